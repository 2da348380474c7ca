"""Serializers and deserializers for scalars, sequences and mappings.

A *kind* describes the type a value is read or written as. It may be a
``ScalarKind``, one of the Python types ``bool``, ``int``, ``float`` and
``str``, a parametrised ``list[...]`` or ``dict[str, ...]``, or a class
whose serializers were registered with ``register_trait``. Where a kind is
left out it is inferred from the value.
"""

from __future__ import annotations

import typing
from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .context import Context, ContextType
from .errors import DeserializerError, SerializerError, TypeSerializerError
from .interfaces import BaseSerializer, Deserializer, Null, Serializer
from .typeutil import Scalar, ScalarKind, kind_of

SerializerFactory = Callable[[Any], Serializer]
DeserializerFactory = Callable[[Any], Deserializer]

_TRAITS: dict[type, tuple[Optional[SerializerFactory], Optional[DeserializerFactory]]] = {}

_PY_SCALARS = {
    bool: ScalarKind.BOOL,
    int: ScalarKind.INT,
    float: ScalarKind.DOUBLE,
    str: ScalarKind.STRING,
}


@dataclass(frozen=True)
class _SequenceKind:
    item: Any


@dataclass(frozen=True)
class _MappingKind:
    value: Any


def register_trait(
    cls: type,
    to_serializer: Optional[SerializerFactory],
    to_deserializer: Optional[DeserializerFactory],
) -> None:
    """Register how instances of a class (and its subclasses) are serialized."""
    if not isinstance(cls, type):
        raise TypeError(f"class expected, got {cls!r}")
    _TRAITS[cls] = (to_serializer, to_deserializer)


def _lookup_trait(cls: Any):
    if not isinstance(cls, type):
        return None
    for base in cls.__mro__:
        if base in _TRAITS:
            return _TRAITS[base]
    return None


def _resolve_kind(kind: Any) -> Any:
    if kind is None or isinstance(kind, (ScalarKind, _SequenceKind, _MappingKind)):
        return kind
    if isinstance(kind, type) and kind in _PY_SCALARS:
        return _PY_SCALARS[kind]
    origin = typing.get_origin(kind)
    if origin is not None:
        args = typing.get_args(kind)
        if origin in (list, MutableSequence, Sequence):
            return _SequenceKind(_resolve_kind(args[0]) if args else None)
        if origin in (dict, MutableMapping, Mapping):
            return _MappingKind(_resolve_kind(args[1]) if len(args) == 2 else None)
        raise TypeError(f"unsupported kind: {kind!r}")
    if kind is list:
        return _SequenceKind(None)
    if kind is dict:
        return _MappingKind(None)
    if isinstance(kind, type):
        return kind
    raise TypeError(f"unsupported kind: {kind!r}")


def _infer_kind(value: Any) -> Any:
    if _lookup_trait(type(value)) is not None:
        return type(value)
    scalar = kind_of(value)
    if scalar is not None:
        return scalar
    if isinstance(value, Mapping):
        return _MappingKind(None)
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return _SequenceKind(None)
    return type(value)


def _kind_for(value: Any, kind: Any) -> Any:
    return _resolve_kind(kind) if kind is not None else _infer_kind(value)


def _is_trivial(kind: Any) -> bool:
    return isinstance(kind, ScalarKind)


def _default(kind: Any) -> Any:
    if isinstance(kind, ScalarKind):
        if kind is ScalarKind.BOOL:
            return False
        if kind is ScalarKind.STRING:
            return ""
        if kind.is_floating():
            return 0.0
        return 0
    if isinstance(kind, _SequenceKind):
        return []
    if isinstance(kind, _MappingKind):
        return {}
    if isinstance(kind, type):
        return kind()
    raise TypeError(f"cannot build a default value for {kind!r}")


def _scalar_parts(value: Any) -> Optional[tuple[ScalarKind, Any]]:
    """The kind and raw value of a scalar write, or None for anything else."""
    if isinstance(value, Scalar):
        return value.kind, value.value
    if isinstance(value, (Deserializer, Null)):
        return None
    kind = kind_of(value)
    if kind is None:
        return None
    return kind, value


def _accepts(kind: Any, value: Any) -> bool:
    if _is_trivial(kind):
        parts = _scalar_parts(value)
        return parts is not None and parts[0] is kind
    return isinstance(value, Deserializer)


def _first(values) -> Any:
    return next(iter(values))


class AtomSerializer(BaseSerializer):
    """Receives a single scalar of one exact kind; the result is in ``value``."""

    def __init__(self, kind: Any, value: Any = None) -> None:
        resolved = _resolve_kind(kind)
        if not isinstance(resolved, ScalarKind):
            raise TypeError(f"scalar kind expected, got {kind!r}")
        self.kind = resolved
        if isinstance(value, Scalar):
            value = value.value
        self.value = _default(resolved) if value is None else value

    def context_type(self) -> ContextType:
        return ContextType.NONE

    def write(self, value: Any, context: Context) -> None:
        parts = _scalar_parts(value)
        if parts is not None and parts[0] is self.kind:
            if context.type is not ContextType.NONE:
                raise SerializerError(context, "invalid context")
            self.value = parts[1]
            return
        super().write(value, context)


class AtomDeserializer(Deserializer):
    """Hands a single scalar over at the empty context."""

    def __init__(self, value: Any, kind: Any = None) -> None:
        if isinstance(value, Scalar):
            if kind is None:
                kind = value.kind
            value = value.value
        resolved = _kind_for(value, kind)
        if not isinstance(resolved, ScalarKind):
            raise TypeError(f"scalar value expected, got {value!r}")
        self.kind = resolved
        self.value = value

    def context_type(self) -> ContextType:
        return ContextType.NONE

    def visit(self, serializer: Serializer) -> None:
        serializer.write(Scalar(self.kind, self.value), Context())


class SequenceSerializer(BaseSerializer):
    """Writes indexed values into a list, growing it as needed."""

    def __init__(self, items: MutableSequence, item_kind: Any = None) -> None:
        if not isinstance(items, MutableSequence):
            raise TypeError(f"mutable sequence expected, got {items!r}")
        if item_kind is None:
            if not items:
                raise TypeError("the item kind of an empty sequence must be given")
            item_kind = _infer_kind(_first(items))
        self.items = items
        self.item_kind = _resolve_kind(item_kind)

    def context_type(self) -> ContextType:
        return ContextType.INDEX

    def prepare_context(self, context_type: ContextType) -> bool:
        return context_type is ContextType.INDEX

    def write(self, value: Any, context: Context) -> None:
        if not _accepts(self.item_kind, value):
            super().write(value, context)
            return
        if context.type is ContextType.NONE:
            if isinstance(value, Deserializer):
                super().write(value, context)
                return
            raise TypeSerializerError(context, "invalid value")
        if context.type is ContextType.INDEX:
            index = context.index
            missing = index + 1 - len(self.items)
            if missing > 0:
                self.items.extend(_default(self.item_kind) for _ in range(missing))
            self.items[index] = write_value(self.items[index], value, self.item_kind)
            return
        raise SerializerError(context, "invalid context type")


class SequenceDeserializer(Deserializer):
    """Hands the items of a sequence over, each at its index."""

    def __init__(self, items: Sequence, item_kind: Any = None) -> None:
        self.items = items
        self.item_kind = _resolve_kind(item_kind)

    def context_type(self) -> ContextType:
        return ContextType.INDEX

    def visit(self, serializer: Serializer) -> None:
        target = serializer.context_type()
        if target is ContextType.INDEX:
            for index, item in enumerate(self.items):
                visit_value(serializer, item, Context(index), self.item_kind)
        elif target is ContextType.NONE:
            serializer.write(self, Context())
        else:
            raise DeserializerError("invalid value context type")


class DictSerializer(BaseSerializer):
    """Writes named values into a mapping."""

    def __init__(self, mapping: MutableMapping, value_kind: Any = None) -> None:
        if not isinstance(mapping, MutableMapping):
            raise TypeError(f"mutable mapping expected, got {mapping!r}")
        if value_kind is None:
            if not mapping:
                raise TypeError("the value kind of an empty mapping must be given")
            value_kind = _infer_kind(_first(mapping.values()))
        self.mapping = mapping
        self.value_kind = _resolve_kind(value_kind)

    def context_type(self) -> ContextType:
        return ContextType.NAME

    def prepare_context(self, context_type: ContextType) -> bool:
        return context_type is ContextType.NAME

    def write(self, value: Any, context: Context) -> None:
        if not _accepts(self.value_kind, value):
            super().write(value, context)
            return
        if context.type is ContextType.NONE:
            if isinstance(value, Deserializer):
                super().write(value, context)
                return
            raise SerializerError(context, "invalid value")
        if context.type is ContextType.NAME:
            name = context.name
            if name not in self.mapping:
                self.mapping[name] = _default(self.value_kind)
            self.mapping[name] = write_value(self.mapping[name], value, self.value_kind)
            return
        raise SerializerError(context, "invalid context type")


class DictDeserializer(Deserializer):
    """Hands the entries of a mapping over, each at its key."""

    def __init__(self, mapping: Mapping, value_kind: Any = None) -> None:
        self.mapping = mapping
        self.value_kind = _resolve_kind(value_kind)

    def context_type(self) -> ContextType:
        return ContextType.NAME

    def visit(self, serializer: Serializer) -> None:
        target = serializer.context_type()
        if target is ContextType.NAME:
            for key, item in self.mapping.items():
                visit_value(serializer, item, Context(key), self.value_kind)
        elif target is ContextType.NONE:
            serializer.write(self, Context())
        else:
            raise DeserializerError("invalid value context type")


def to_serializer(value: Any, kind: Any = None) -> Serializer:
    """A serializer that writes into ``value``, read as ``kind``."""
    resolved = _kind_for(value, kind)
    if isinstance(resolved, ScalarKind):
        return AtomSerializer(resolved, value)
    if isinstance(resolved, _SequenceKind):
        return SequenceSerializer(value, resolved.item)
    if isinstance(resolved, _MappingKind):
        return DictSerializer(value, resolved.value)
    trait = _lookup_trait(resolved)
    if trait is None or trait[0] is None:
        raise TypeError(f"no serializer for {resolved!r}")
    return trait[0](value)


def to_deserializer(value: Any, kind: Any = None) -> Deserializer:
    """A deserializer that hands ``value`` over, read as ``kind``."""
    if isinstance(value, Deserializer):
        return value
    if isinstance(value, Scalar) and kind is None:
        return AtomDeserializer(value)
    resolved = _kind_for(value, kind)
    if isinstance(resolved, ScalarKind):
        return AtomDeserializer(value, resolved)
    if isinstance(resolved, _SequenceKind):
        return SequenceDeserializer(value, resolved.item)
    if isinstance(resolved, _MappingKind):
        return DictDeserializer(value, resolved.value)
    trait = _lookup_trait(resolved)
    if trait is None or trait[1] is None:
        raise TypeError(f"no deserializer for {resolved!r}")
    return trait[1](value)


def serialize(serializer: Serializer, value: Any, context: Optional[Context] = None) -> None:
    """Write a whole value into a serializer at a context."""
    serializer.write(to_deserializer(value), Context() if context is None else context)


def deserialize(deserializer: Deserializer, target: Any, kind: Any = None) -> Any:
    """Read everything a deserializer holds into ``target``.

    Returns the result: ``target`` itself when it is changed in place, the new
    value when ``target`` is a scalar.
    """
    serializer = to_serializer(target, kind)
    serializer.write(deserializer, Context())
    if isinstance(serializer, AtomSerializer):
        return serializer.value
    return target


def visit_value(serializer: Serializer, value: Any, context: Context, kind: Any = None) -> None:
    """Write one value of a structure: scalars directly, others as deserializers."""
    if isinstance(value, Deserializer):
        serializer.write(value, context)
        return
    if isinstance(value, Scalar) and kind is None:
        serializer.write(value, context)
        return
    resolved = _kind_for(value, kind)
    if isinstance(resolved, ScalarKind):
        raw = value.value if isinstance(value, Scalar) else value
        serializer.write(Scalar(resolved, raw), context)
    else:
        serializer.write(to_deserializer(value, resolved), context)


def write_value(current: Any, value: Any, kind: Any = None) -> Any:
    """Assign ``value`` to a slot holding ``current`` and return the new content.

    Scalar slots take scalar values only; a structure written to a scalar slot
    raises TypeSerializerError. Other slots are filled in place.
    """
    resolved = _kind_for(current, kind)
    if isinstance(resolved, ScalarKind):
        parts = _scalar_parts(value)
        if parts is None:
            raise TypeSerializerError(Context(), "invalid value")
        try:
            return Scalar(resolved, parts[1]).value
        except (TypeError, OverflowError) as exc:
            raise TypeSerializerError(Context(), "invalid value") from exc
    serializer = to_serializer(current, resolved)
    serializer.write(value, Context())
    return current