"""Classes whose declared fields are serialized by name."""

from __future__ import annotations

import copy
import enum
from types import MappingProxyType
from typing import Any, ClassVar, Mapping

from .context import Context, ContextType
from .errors import DeserializerError, SerializerError, TypeSerializerError
from .interfaces import Deserializer, Null, Serializer
from .typeutil import Scalar, ScalarKind, can_assign, is_weak_convertible, kind_of
from .values import _default, _resolve_kind, register_trait, visit_value, write_value

_MISSING = object()


class FieldAttribute(enum.IntFlag):
    """Options that change how a field accepts values."""

    WEAK = 1
    OPTIONAL = 2


class ClassAttribute(enum.IntFlag):
    """Options that change how a class accepts values."""

    OPEN = 1


def _scalar_parts(value: Any) -> tuple[ScalarKind, Any] | None:
    if isinstance(value, (Deserializer, Null)):
        return None
    if isinstance(value, Scalar):
        return value.kind, value.value
    try:
        kind = kind_of(value)
    except OverflowError:
        return None
    if kind is None:
        return None
    return kind, value


class Field:
    """A serialized attribute of a MetaObject subclass.

    ``kind`` is what the field holds (see ``xserial.values``); the remaining
    positional arguments are FieldAttribute flags.
    """

    def __init__(self, kind: Any, *args: FieldAttribute, default: Any = _MISSING) -> None:
        flags = FieldAttribute(0)
        for attr in args:
            if not isinstance(attr, FieldAttribute):
                raise TypeError(f"field attribute expected, got {attr!r}")
            flags |= attr
        resolved = _resolve_kind(kind)
        if resolved is None:
            raise TypeError("a field needs a kind")
        self.kind = resolved
        self.attributes = flags
        self.name: str | None = None
        self._default = default
        if default is not _MISSING:
            self._coerce(default)

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, obj: Any, owner: type | None = None) -> Any:
        if obj is None:
            return self
        try:
            return obj.__dict__[self.name]
        except KeyError:
            value = self._make_default()
            obj.__dict__[self.name] = value
            return value

    def __set__(self, obj: Any, value: Any) -> None:
        obj.__dict__[self.name] = self._coerce(value)

    def __repr__(self) -> str:
        return f"Field({self.name!r}, {self.kind!r}, {self.attributes!r})"

    def _make_default(self) -> Any:
        if self._default is _MISSING:
            return _default(self.kind)
        return self._coerce(copy.deepcopy(self._default))

    def _coerce(self, value: Any) -> Any:
        if isinstance(self.kind, ScalarKind):
            if isinstance(value, Scalar):
                value = value.value
            return Scalar(self.kind, value).value
        return value

    def _convert(self, value: Any) -> Any:
        parts = _scalar_parts(value)
        if parts is None:
            return _MISSING
        source, raw = parts
        target = self.kind
        if source is not target:
            weak = FieldAttribute.WEAK in self.attributes
            if not (
                weak
                and is_weak_convertible(source)
                and is_weak_convertible(target)
                and (target.is_floating() or not source.is_floating())
            ):
                return _MISSING
            if not can_assign(target, raw):
                return _MISSING
            raw = float(raw) if target.is_floating() else int(raw)
        try:
            return Scalar(target, raw).value
        except (TypeError, OverflowError):
            return _MISSING

    def write(self, obj: Any, value: Any) -> bool:
        """Store a written value in ``obj``; False if the field cannot take it."""
        if isinstance(self.kind, ScalarKind):
            converted = self._convert(value)
            if converted is _MISSING:
                return False
            obj.__dict__[self.name] = converted
            return True
        if not isinstance(value, Deserializer):
            return False
        current = self.__get__(obj, type(obj))
        obj.__dict__[self.name] = write_value(current, value, self.kind)
        return True

    def visit(self, serializer: Serializer, obj: Any) -> None:
        """Write this field's value of ``obj`` into the serializer, by name."""
        value = self.__get__(obj, type(obj))
        visit_value(serializer, value, Context(self.name), self.kind)


def field(kind: Any, *args: FieldAttribute, default: Any = _MISSING) -> Field:
    """Declare a serialized field of a MetaObject subclass."""
    return Field(kind, *args, default=default)


class MetaObject:
    """Base of classes serialized field by field.

    Fields are declared as Field class attributes; class attributes are given
    as ``class Name(MetaObject, attributes=ClassAttribute.OPEN)``.
    """

    _fields: ClassVar[dict[str, Field]] = {}
    _class_attributes: ClassVar[ClassAttribute] = ClassAttribute(0)

    def __init_subclass__(cls, attributes: ClassAttribute | None = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        fields: dict[str, Field] = {}
        for base in reversed(cls.__mro__[1:]):
            fields.update(getattr(base, "_fields", {}))
        fields.update(
            (name, value) for name, value in cls.__dict__.items() if isinstance(value, Field)
        )
        cls._fields = fields
        if attributes is not None:
            if not isinstance(attributes, ClassAttribute):
                raise TypeError(f"class attribute expected, got {attributes!r}")
            cls._class_attributes = attributes

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        fields = type(self)._fields
        if len(args) > len(fields):
            raise TypeError(
                f"{type(self).__name__} takes at most {len(fields)} positional values"
            )
        given = set()
        for name, value in zip(fields, args):
            setattr(self, name, value)
            given.add(name)
        for name, value in kwargs.items():
            if name not in fields:
                raise TypeError(f"{type(self).__name__} has no field {name!r}")
            if name in given:
                raise TypeError(f"field {name!r} given twice")
            setattr(self, name, value)

    @classmethod
    def fields(cls) -> Mapping[str, Field]:
        """The declared fields, in declaration order."""
        return MappingProxyType(cls._fields)

    @classmethod
    def attributes(cls) -> ClassAttribute:
        """The attributes the class was declared with."""
        return cls._class_attributes

    def class_name(self) -> str:
        """The name of the class."""
        return type(self).__name__

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self._fields)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        values = ", ".join(f"{name}={getattr(self, name)!r}" for name in self._fields)
        return f"{type(self).__name__}({values})"


class MetaObjectSerializer(Serializer):
    """Writes named values into the fields of an object."""

    def __init__(self, obj: MetaObject) -> None:
        self.obj = obj
        self._unused = {
            name
            for name, item in type(obj).fields().items()
            if FieldAttribute.OPTIONAL not in item.attributes
        }

    def context_type(self) -> ContextType:
        return ContextType.NAME

    def all_fields_used(self) -> bool:
        """Whether every required field has been written."""
        return not self._unused

    def write(self, value: Any, context: Context) -> None:
        if isinstance(value, Null):
            raise SerializerError(context, "invalid null write")
        if context.type is ContextType.NONE:
            if not isinstance(value, Deserializer):
                raise SerializerError(context, "invalid value")
            if value.context_type() is not ContextType.NAME:
                raise TypeSerializerError(context, "invalid value")
            nested = MetaObjectSerializer(self.obj)
            value.visit(nested)
            if not nested.all_fields_used():
                raise SerializerError(context, "missing fields")
            return
        if context.type is not ContextType.NAME:
            raise SerializerError(context, "invalid context type")
        cls = type(self.obj)
        target = cls.fields().get(context.name)
        if target is None:
            if ClassAttribute.OPEN not in cls.attributes():
                raise SerializerError(context, "unknown field")
            return
        if not target.write(self.obj, value):
            raise TypeSerializerError(context, "invalid field write")
        self._unused.discard(context.name)


class MetaObjectDeserializer(Deserializer):
    """Hands the fields of an object over, each at its name."""

    def __init__(self, obj: MetaObject) -> None:
        self.obj = obj

    def context_type(self) -> ContextType:
        return ContextType.NAME

    def visit(self, serializer: Serializer) -> None:
        if serializer.context_type() is not ContextType.NAME:
            raise DeserializerError("invalid context type")
        for item in type(self.obj).fields().values():
            item.visit(serializer, self.obj)


register_trait(MetaObject, MetaObjectSerializer, MetaObjectDeserializer)