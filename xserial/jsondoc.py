"""A JSON document that serializers can write into and read from."""

from __future__ import annotations

import json
import math
from typing import Any, Callable, Iterable

from .context import Context, ContextType
from .errors import DeserializerError, SerializerError, TypeSerializerError
from .interfaces import Deserializer, Null, Serializer
from .typeutil import Scalar, ScalarKind, can_assign
from .values import register_trait

_UNSIGNED = (
    ScalarKind.UCHAR,
    ScalarKind.USHORT,
    ScalarKind.UINT,
    ScalarKind.ULONG,
    ScalarKind.ULONGLONG,
)
_SIGNED = (
    ScalarKind.SCHAR,
    ScalarKind.SHORT,
    ScalarKind.INT,
    ScalarKind.LONG,
    ScalarKind.LONGLONG,
)
_FLOATING = (ScalarKind.FLOAT, ScalarKind.DOUBLE, ScalarKind.LONGDOUBLE)

_NOT_SCALAR = object()


def json_context_type(node: Any) -> ContextType:
    """How the children of a JSON node are addressed."""
    if isinstance(node, dict):
        return ContextType.NAME
    if isinstance(node, list):
        return ContextType.INDEX
    return ContextType.NONE


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid literal: {name}")


def _parse(text: str) -> Any:
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except (ValueError, TypeError) as exc:
        raise SerializerError(Context(), str(exc)) from exc


def _dumpable(node: Any) -> Any:
    if isinstance(node, float) and not math.isfinite(node):
        return None
    if isinstance(node, dict):
        return {key: _dumpable(item) for key, item in node.items()}
    if isinstance(node, list):
        return [_dumpable(item) for item in node]
    return node


def _dump(node: Any) -> str:
    return json.dumps(
        _dumpable(node),
        separators=(",", ":"),
        sort_keys=True,
        ensure_ascii=False,
    )


def _cleared(node: Any) -> Any:
    """The empty value of the node's own type; null stays null."""
    if node is None:
        return None
    if isinstance(node, bool):
        return False
    if isinstance(node, int):
        return 0
    if isinstance(node, float):
        return 0.0
    if isinstance(node, str):
        return ""
    if isinstance(node, dict):
        return {}
    if isinstance(node, list):
        return []
    return None


def _raw_scalar(value: Any) -> Any:
    if isinstance(value, Scalar):
        return value.value
    if isinstance(value, (bool, int, float, str)):
        return value
    return _NOT_SCALAR


class JSONSerializer(Serializer):
    """Writes values into the JSON node stored at ``holder[key]``."""

    def __init__(self, holder: list | dict, key: int | str) -> None:
        self._holder = holder
        self._key = key

    def _current(self) -> Any:
        try:
            return self._holder[self._key]
        except (KeyError, IndexError):
            return None

    def context_type(self) -> ContextType:
        return json_context_type(self._current())

    def _slot(self, context: Context) -> tuple[list | dict, int | str]:
        if context.type is ContextType.NONE:
            return self._holder, self._key
        node = self._current()
        if context.type is ContextType.NAME:
            if node is None:
                node = {}
                self._holder[self._key] = node
            if not isinstance(node, dict):
                raise SerializerError(context, "invalid context")
            node.setdefault(context.name, None)
            return node, context.name
        if node is None:
            node = []
            self._holder[self._key] = node
        if not isinstance(node, list):
            raise SerializerError(context, "invalid context")
        index = context.index
        if index >= len(node):
            node.extend(None for _ in range(index + 1 - len(node)))
        return node, index

    def write(self, value: Any, context: Context) -> None:
        if isinstance(value, Deserializer):
            container, key = self._slot(context)
            target = value.context_type()
            if target is ContextType.NAME:
                container[key] = {}
            elif target is ContextType.INDEX:
                container[key] = []
            else:
                container[key] = _cleared(container[key])
            value.visit(JSONSerializer(container, key))
            return
        if isinstance(value, Null):
            container, key = self._slot(context)
            container[key] = _cleared(container[key])
            return
        raw = _raw_scalar(value)
        if raw is _NOT_SCALAR:
            raise TypeSerializerError(context, "invalid value")
        container, key = self._slot(context)
        container[key] = raw


def _try_kinds(
    kinds: Iterable[ScalarKind], number: int | float, write: Callable[[Any], None]
) -> bool:
    for kind in kinds:
        if not can_assign(kind, number):
            continue
        try:
            write(Scalar(kind, number))
        except TypeSerializerError:
            continue
        return True
    return False


class JSONDeserializer(Deserializer):
    """Hands the contents of a JSON node over to a serializer."""

    def __init__(self, node: Any) -> None:
        self.node = node

    def context_type(self) -> ContextType:
        return json_context_type(self.node)

    def visit(self, serializer: Serializer) -> None:
        node = self.node
        target = self.context_type()
        if target is ContextType.NAME:
            for key in sorted(node):
                _write_node(serializer, node[key], Context(key))
        elif target is ContextType.INDEX:
            for index, item in enumerate(node):
                _write_node(serializer, item, Context(index))
        else:
            _write_node(serializer, node, Context())


def _write_node(serializer: Serializer, node: Any, context: Context) -> None:
    def write(value: Any) -> None:
        serializer.write(value, context)

    if node is None:
        write(Null())
    elif isinstance(node, bool):
        write(Scalar(ScalarKind.BOOL, node))
    elif isinstance(node, int):
        if not _try_kinds(_UNSIGNED + _SIGNED + _FLOATING, node, write):
            raise DeserializerError("no matching type to write")
    elif isinstance(node, float):
        if not _try_kinds(_FLOATING, node, write):
            raise DeserializerError("no matching type to write")
    elif isinstance(node, str):
        write(Scalar(ScalarKind.STRING, node))
    else:
        write(JSONDeserializer(node))


class JSON:
    """A JSON document; null when no text is given."""

    def __init__(self, text: str | None = None) -> None:
        self._box: list[Any] = [None if text is None else _parse(text)]

    @property
    def value(self) -> Any:
        """The document as plain Python data."""
        return self._box[0]

    def __str__(self) -> str:
        return _dump(self._box[0])

    def __repr__(self) -> str:
        return f"JSON({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JSON):
            return NotImplemented
        return self._box[0] == other._box[0]

    __hash__ = None  # type: ignore[assignment]

    def serializer(self) -> JSONSerializer:
        """A serializer that writes into this document."""
        return JSONSerializer(self._box, 0)

    def deserializer(self) -> JSONDeserializer:
        """A deserializer that reads this document."""
        return JSONDeserializer(self._box[0])


register_trait(JSON, JSON.serializer, JSON.deserializer)