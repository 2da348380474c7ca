"""A small demonstration: printing structured objects as readable text."""

from __future__ import annotations

import copy
import sys
from dataclasses import dataclass
from typing import Any, Optional, TextIO

from .context import Context, ContextType
from .errors import SerializerError, TypeSerializerError
from .interfaces import BaseSerializer, Deserializer, Null, Serializer
from .meta import FieldAttribute, MetaObject, field
from .typeutil import Scalar, ScalarKind, kind_of
from .values import register_trait, serialize

_CHAR_KINDS = (ScalarKind.CHAR, ScalarKind.SCHAR, ScalarKind.UCHAR)


def _scalar_parts(value: Any) -> tuple[ScalarKind, Any]:
    if isinstance(value, Scalar):
        return value.kind, value.value
    kind = kind_of(value)
    if kind is None:
        raise TypeSerializerError(Context(), "invalid value")
    return kind, value


def _format(kind: ScalarKind, raw: Any) -> str:
    if kind is ScalarKind.BOOL:
        return "1" if raw else "0"
    if kind in _CHAR_KINDS:
        return chr(raw % 256)
    if kind.is_floating():
        return format(raw, "g")
    return str(raw)


class StringSerializer(Serializer):
    """Writes values to a text stream as ``{name:value, ...}`` and ``[...]``.

    Closing the serializer writes the bracket that ends its structure.
    """

    def __init__(
        self,
        stream: TextIO,
        context_type: ContextType = ContextType.NONE,
        context: Optional[Context] = None,
    ) -> None:
        self._stream = stream
        self._type = context_type
        self._first = True
        self._closed = False
        if context is not None:
            if context.type is ContextType.NAME:
                stream.write(f"{context.name}: ")
            if context_type is ContextType.NAME:
                stream.write("{")
            elif context_type is ContextType.INDEX:
                stream.write("[")

    def context_type(self) -> ContextType:
        return self._type

    def close(self) -> None:
        """Write the closing bracket of this serializer's structure, once."""
        if self._closed:
            return
        self._closed = True
        if self._type is ContextType.NAME:
            self._stream.write("}")
        elif self._type is ContextType.INDEX:
            self._stream.write("]")

    def __enter__(self) -> "StringSerializer":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _separator(self) -> None:
        if self._first:
            self._first = False
        else:
            self._stream.write(", ")

    def write(self, value: Any, context: Context) -> None:
        if isinstance(value, Deserializer):
            self._separator()
            with StringSerializer(self._stream, value.context_type(), context) as nested:
                value.visit(nested)
            return
        if isinstance(value, Null):
            kind, raw = ScalarKind.STRING, "<null>"
        else:
            kind, raw = _scalar_parts(value)
        self._separator()
        text = _format(kind, raw)
        if context.type is ContextType.NAME:
            self._stream.write(f"{context.name}:{text}")
        elif context.type is ContextType.INDEX:
            self._stream.write(text)
        else:
            raise SerializerError(context)


class Point(MetaObject):
    """A point on the plane."""

    x = field(int, FieldAttribute.WEAK)
    y = field(int, FieldAttribute.WEAK)

    def increment(self) -> "Point":
        """Move one step along x and return the point itself."""
        self.x += 1
        return self


class Line(MetaObject):
    """A segment between two points."""

    begin = field(Point)
    end = field(Point)


class Vector(MetaObject):
    """A list of integers."""

    v = field(list[int])


class PointVector(MetaObject):
    """A list of points."""

    v = field(list[Point])


@dataclass
class Data:
    """A plain record with its own hand-written serializers."""

    str: str = ""
    num: int = 0


class CustomClass(MetaObject):
    """An object holding a plain record."""

    data = field(Data)


class DataDeserializer(Deserializer):
    """Hands a Data record over as the names ``str`` and ``num``."""

    def __init__(self, data: Data) -> None:
        self.data = data

    def context_type(self) -> ContextType:
        return ContextType.NAME

    def visit(self, serializer: Serializer) -> None:
        serializer.write(Scalar(ScalarKind.STRING, self.data.str), Context("str"))
        serializer.write(Scalar(ScalarKind.INT, self.data.num), Context("num"))


class DataSerializer(BaseSerializer):
    """Fills a Data record from the names ``str`` and ``num``."""

    def __init__(self, data: Data) -> None:
        self.data = data

    def context_type(self) -> ContextType:
        return ContextType.NAME

    def write(self, value: Any, context: Context) -> None:
        if isinstance(value, Deserializer):
            if context.type is not ContextType.NONE:
                raise SerializerError(context)
            value.visit(self)
            return
        if not isinstance(value, Null):
            kind = value.kind if isinstance(value, Scalar) else kind_of(value)
            raw = value.value if isinstance(value, Scalar) else value
            if kind is ScalarKind.STRING:
                if context != Context("str"):
                    raise SerializerError(context)
                self.data.str = raw
                return
            if kind is ScalarKind.INT:
                if context != Context("num"):
                    raise SerializerError(context)
                self.data.num = raw
                return
        super().write(value, context)


register_trait(Data, DataSerializer, DataDeserializer)


def print_value(stream: TextIO, value: Any) -> None:
    """Write a readable form of a value to a text stream."""
    with StringSerializer(stream) as serializer:
        serialize(serializer, value)


def _advance(value: Any) -> Any:
    if isinstance(value, Point):
        return value.increment()
    return value + 1


def generate(first: Any, count: int) -> list:
    """``count`` successive values starting at ``first``."""
    result = []
    current = copy.copy(first)
    for _ in range(count):
        result.append(copy.copy(current))
        current = _advance(current)
    return result


def render() -> str:
    """The text the demonstration prints."""
    from io import StringIO

    stream = StringIO()
    values = [
        Point(42, 43),
        Line(Point(1, 2), Point(3, 4)),
        Vector(generate(42, 10)),
        PointVector(generate(Point(), 10)),
        CustomClass(Data("foobar", 42)),
    ]
    for position, value in enumerate(values):
        if position:
            stream.write("\n")
        print_value(stream, value)
    return stream.getvalue()


def main(argv: Optional[list[str]] = None) -> int:
    """Print the demonstration objects."""
    sys.stdout.write(render() + "\n")
    return 0