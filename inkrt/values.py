"""Runtime values and the numeric casts allowed between them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class InkError(Exception):
    """Raised when the story runtime hits an invalid state or operation."""


class ValueType(Enum):
    """Kinds of value that live on the stacks and in the output stream."""

    NONE = auto()
    NULL = auto()
    BOOLEAN = auto()
    UINT32 = auto()
    INT32 = auto()
    FLOAT32 = auto()
    STRING = auto()
    NEWLINE = auto()
    LIST = auto()
    LIST_FLAG = auto()
    DIVERT = auto()
    GLUE = auto()
    FUNC_START = auto()
    FUNC_END = auto()
    MARKER = auto()
    VALUE_POINTER = auto()
    TUNNEL_FRAME = auto()
    FUNCTION_FRAME = auto()
    THREAD_FRAME = auto()
    THREAD_START = auto()
    THREAD_END = auto()
    JUMP_MARKER = auto()


_PRINTABLE = frozenset(
    {
        ValueType.BOOLEAN,
        ValueType.UINT32,
        ValueType.INT32,
        ValueType.FLOAT32,
        ValueType.STRING,
        ValueType.NEWLINE,
        ValueType.LIST,
        ValueType.LIST_FLAG,
    }
)


@dataclass(frozen=True)
class Value:
    """A typed runtime value; the default is the empty ``NONE`` value."""

    type: ValueType = ValueType.NONE
    data: Any = None

    def printable(self) -> bool:
        """Whether this value produces text when written to output."""
        return self.type in _PRINTABLE


def numeric_cast(value: Value, to: ValueType) -> Any:
    """Convert the payload of ``value`` to the Python type behind ``to``.

    Booleans widen to integers, and signed integers widen to floats;
    any other mismatch raises :class:`InkError`.
    """
    if to is ValueType.UINT32:
        if value.type is ValueType.UINT32:
            return value.data
        if value.type is ValueType.BOOLEAN:
            return int(value.data)
        raise InkError("invalid cast to uint!")
    if to is ValueType.INT32:
        if value.type is ValueType.INT32:
            return value.data
        if value.type is ValueType.BOOLEAN:
            return int(value.data)
        raise InkError("invalid cast to int!")
    if to is ValueType.FLOAT32:
        if value.type is ValueType.FLOAT32:
            return value.data
        if value.type is ValueType.INT32:
            return float(value.data)
        raise InkError("invalid numeric_cast!")
    if value.type is to:
        return value.data
    raise InkError("invalid numeric_cast!")