"""The serializer and deserializer protocols, and a strict base serializer."""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import Any

from .context import Context, ContextType
from .errors import TypeSerializerError


@dataclass(frozen=True)
class Null:
    """The absence of a value."""


class Serializer(abc.ABC):
    """Receives values, each at a context, and stores them somewhere."""

    @abc.abstractmethod
    def context_type(self) -> ContextType:
        """How this serializer addresses the values written to it."""

    @abc.abstractmethod
    def write(self, value: Any, context: Context) -> None:
        """Store a value: a Deserializer, Null, a Scalar or a plain scalar."""


class Deserializer(abc.ABC):
    """Hands the values it holds to a serializer."""

    @abc.abstractmethod
    def context_type(self) -> ContextType:
        """How the values held here are addressed."""

    @abc.abstractmethod
    def visit(self, serializer: Serializer) -> None:
        """Write every value held here into the serializer."""


class BaseSerializer(Serializer):
    """A serializer that only accepts a whole structure at the empty context.

    Subclasses override write for the values they accept and defer to this
    implementation for the rest.
    """

    def write(self, value: Any, context: Context) -> None:
        if isinstance(value, Deserializer) and context.type is ContextType.NONE:
            if not self.prepare_context(value.context_type()):
                raise TypeSerializerError(context, "invalid value")
            value.visit(self)
            return
        raise TypeSerializerError(context, "invalid value")

    def prepare_context(self, context_type: ContextType) -> bool:
        """Whether a structure addressed this way can be written here."""
        return True