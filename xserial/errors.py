"""Errors raised while moving values between serializers."""

from __future__ import annotations

from .context import Context


class SerializationError(Exception):
    """Base of every serialization failure."""

    def __init__(self, msg: str = "") -> None:
        super().__init__(msg)
        self.msg = msg

    def __str__(self) -> str:
        return self.msg or "serialization error"


class SerializerError(SerializationError):
    """A serializer rejected a value at a given context."""

    def __init__(self, context: Context | None = None, msg: str = "") -> None:
        super().__init__(msg)
        self.context = context if context is not None else Context()

    def __str__(self) -> str:
        return f"{self.msg or 'serializer error'} at {self.context!r}"


class TypeSerializerError(SerializerError):
    """A serializer rejected a value because of its type."""


class DeserializerError(SerializationError):
    """A deserializer could not hand its values over."""