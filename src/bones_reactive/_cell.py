"""Type-erased value cell.

Signals and effect results share one node representation. The cell keeps the
payload together with the type it was created with, and every access checks
the caller's type against it.
"""

from __future__ import annotations

import copy
from typing import Any, TypeVar

from bones_reactive.errors import TypeMismatchError

T = TypeVar("T")


class ValueCell:
    """Holds exactly one value of a fixed type."""

    __slots__ = ("_value", "_type")

    def __init__(self, value: Any, value_type: type | None = None) -> None:
        self._type = type(value) if value_type is None else value_type
        self._value = value
        self.check_value(value)

    @property
    def value_type(self) -> type:
        return self._type

    def check_value(self, value: Any) -> None:
        """Raise TypeMismatchError unless value can be stored in this cell."""
        if not isinstance(value, self._type):
            raise TypeMismatchError(
                f"Cannot store {type(value).__name__} in a cell of type {self._type.__name__}."
            )

    def cast(self, expected: type[T]) -> T:
        """Borrow the value as `expected`."""
        if expected is not self._type:
            raise TypeMismatchError(
                f"Cell holds {self._type.__name__}, accessed as {getattr(expected, '__name__', expected)}."
            )
        return self._value

    def replace(self, expected: type[T], value: T) -> T:
        """Store a new value and return the previous one."""
        old = self.cast(expected)
        self.check_value(value)
        self._value = value
        return old

    def clone(self) -> ValueCell:
        return ValueCell(copy.copy(self._value), self._type)

    def __repr__(self) -> str:
        return f"ValueCell({self._value!r}, {self._type.__name__})"
