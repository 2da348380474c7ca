"""Addressing of a value inside a serialized structure."""

from __future__ import annotations

import enum


class ContextType(enum.IntEnum):
    """How a context addresses a value."""

    NONE = 0
    INDEX = 1
    NAME = 2


class Context:
    """Where a value goes: nowhere in particular, a position, or a name."""

    __slots__ = ("_key",)

    def __init__(self, key: int | str | None = None) -> None:
        if isinstance(key, bool) or not isinstance(key, (int, str, type(None))):
            raise TypeError(f"invalid context key: {key!r}")
        if isinstance(key, int) and key < 0:
            raise ValueError("context index must not be negative")
        self._key = key

    @property
    def type(self) -> ContextType:
        """The kind of addressing this context uses."""
        if self._key is None:
            return ContextType.NONE
        if isinstance(self._key, int):
            return ContextType.INDEX
        return ContextType.NAME

    @property
    def index(self) -> int:
        """The position addressed; only valid for index contexts."""
        if isinstance(self._key, int):
            return self._key
        raise TypeError("not an index context type")

    @property
    def name(self) -> str:
        """The name addressed; only valid for name contexts."""
        if isinstance(self._key, str):
            return self._key
        raise TypeError("not a name context type")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Context):
            return NotImplemented
        return type(self._key) is type(other._key) and self._key == other._key

    def __hash__(self) -> int:
        return hash((type(self._key).__name__, self._key))

    def __repr__(self) -> str:
        if self._key is None:
            return "Context()"
        return f"Context({self._key!r})"