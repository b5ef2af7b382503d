"""Arithmetic, comparison and logic on numeric runtime values."""

from __future__ import annotations

import math
import operator
import random
from enum import Enum, auto
from typing import Sequence

from .values import InkError, Value, ValueType, numeric_cast


class Command(Enum):
    """Operations the evaluator applies to values on the evaluation stack."""

    ADD = auto()
    SUBTRACT = auto()
    DIVIDE = auto()
    MULTIPLY = auto()
    MOD = auto()
    RANDOM = auto()
    IS_EQUAL = auto()
    GREATER_THAN = auto()
    LESS_THAN = auto()
    GREATER_THAN_EQUALS = auto()
    LESS_THAN_EQUALS = auto()
    NOT_EQUAL = auto()
    AND = auto()
    OR = auto()
    MIN = auto()
    MAX = auto()
    NOT = auto()
    NEGATE = auto()
    FLOOR = auto()
    CEILING = auto()
    INT_CAST = auto()
    INTERSECTION = auto()
    HAS = auto()
    HASNT = auto()
    LIST_COUNT = auto()
    LIST_MIN = auto()
    LIST_MAX = auto()
    LIST_ALL = auto()
    LIST_INVERT = auto()
    LIST_VALUE = auto()
    LIST_INT = auto()
    LIST_RANGE = auto()
    LRND = auto()
    READ_COUNT_VAR = auto()
    TURNS = auto()
    CHOICE_COUNT = auto()


_NUMERIC = frozenset(
    {ValueType.BOOLEAN, ValueType.INT32, ValueType.UINT32, ValueType.FLOAT32}
)
_INTEGRAL = frozenset({ValueType.BOOLEAN, ValueType.INT32, ValueType.UINT32})

_CASTS = {
    frozenset({ValueType.INT32, ValueType.FLOAT32}): ValueType.FLOAT32,
    frozenset({ValueType.BOOLEAN, ValueType.UINT32}): ValueType.UINT32,
    frozenset({ValueType.BOOLEAN, ValueType.INT32}): ValueType.INT32,
}

_UNARY = frozenset(
    {Command.NOT, Command.NEGATE, Command.FLOOR, Command.CEILING, Command.INT_CAST}
)

_COMPARISONS = {
    Command.IS_EQUAL: operator.eq,
    Command.NOT_EQUAL: operator.ne,
    Command.GREATER_THAN: operator.gt,
    Command.LESS_THAN: operator.lt,
    Command.GREATER_THAN_EQUALS: operator.ge,
    Command.LESS_THAN_EQUALS: operator.le,
}


def ink_floor(f: float) -> float:
    """Floor as the runtime computes it: truncate, minus one below zero."""
    if f >= 0.0:
        return float(int(f))
    return float(int(f) - 1)


def ink_ceil(f: float) -> float:
    """Ceiling as the runtime computes it, built on :func:`ink_floor`."""
    if f - ink_floor(f) == 0:
        return f
    return float(int(f) + 1)


def _store(ty: ValueType, x) -> Value:
    if ty is ValueType.INT32:
        return Value(ty, (int(x) + 2**31) % 2**32 - 2**31)
    if ty is ValueType.UINT32:
        return Value(ty, int(x) % 2**32)
    if ty is ValueType.BOOLEAN:
        return Value(ty, bool(x))
    if ty is ValueType.FLOAT32:
        return Value(ty, float(x))
    return Value(ty, x)


def _int_div(a: int, b: int) -> int:
    if b == 0:
        raise InkError("division by zero")
    quotient = abs(a) // abs(b)
    return -quotient if (a < 0) != (b < 0) else quotient


def _float_div(a: float, b: float) -> float:
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _common_type(a: Value, b: Value) -> ValueType:
    if a.type is b.type:
        return a.type
    try:
        return _CASTS[frozenset((a.type, b.type))]
    except KeyError:
        raise InkError(f"no common type for {a.type.name} and {b.type.name}") from None


def _random(operands: Sequence[Value], rng) -> Value:
    low = numeric_cast(operands[0], ValueType.INT32)
    high = numeric_cast(operands[1], ValueType.INT32)
    if high < low:
        raise InkError("RANDOM needs a minimum not above its maximum")
    rng = random if rng is None else rng
    return Value(ValueType.INT32, rng.randrange(high - low + 1) + low)


def _unary(command: Command, v: Value) -> Value:
    ty = v.type
    if command is Command.NOT:
        if ty not in _INTEGRAL:
            raise InkError(f"NOT is not defined for {ty.name}")
        return Value(ValueType.BOOLEAN, not v.data)
    if ty not in _NUMERIC:
        raise InkError(f"{command.name} is not defined for {ty.name}")
    if command is Command.NEGATE:
        if ty is ValueType.BOOLEAN:
            return Value(ty, not v.data)
        return _store(ty, -v.data)
    if command is Command.FLOOR:
        return Value(ty, ink_floor(v.data)) if ty is ValueType.FLOAT32 else v
    if command is Command.CEILING:
        return Value(ty, ink_ceil(v.data)) if ty is ValueType.FLOAT32 else v
    return _store(ValueType.INT32, int(v.data))


def _binary(command: Command, a: Value, b: Value) -> Value:
    if (
        a.type is ValueType.DIVERT
        and b.type is ValueType.DIVERT
        and command in (Command.IS_EQUAL, Command.NOT_EQUAL)
    ):
        return Value(ValueType.BOOLEAN, _COMPARISONS[command](a.data, b.data))

    ty = _common_type(a, b)
    if ty not in _NUMERIC:
        raise InkError(f"{command.name} is not defined for {ty.name}")
    if ty is ValueType.BOOLEAN and command in (
        Command.SUBTRACT,
        Command.DIVIDE,
        Command.MOD,
    ):
        ty = ValueType.INT32
    x, y = numeric_cast(a, ty), numeric_cast(b, ty)

    if command in _COMPARISONS:
        return Value(ValueType.BOOLEAN, _COMPARISONS[command](x, y))
    if command is Command.ADD:
        return _store(ty, x + y)
    if command is Command.SUBTRACT:
        return _store(ty, x - y)
    if command is Command.MULTIPLY:
        return _store(ty, x * y)
    if command is Command.DIVIDE:
        if ty is ValueType.FLOAT32:
            return _store(ty, _float_div(x, y))
        return _store(ty, _int_div(x, y))
    if command is Command.MIN:
        return _store(ty, x if x < y else y)
    if command is Command.MAX:
        return _store(ty, x if x > y else y)
    if ty not in _INTEGRAL:
        raise InkError(f"{command.name} is not defined for {ty.name}")
    if command is Command.MOD:
        return _store(ty, x - y * _int_div(x, y))
    if command is Command.AND:
        return Value(ValueType.BOOLEAN, bool(x) and bool(y))
    if command is Command.OR:
        return Value(ValueType.BOOLEAN, bool(x) or bool(y))
    raise InkError(f"{command.name} is not a numeric operation")


def numeric_operation(command: Command, operands: Sequence[Value], rng=None) -> Value:
    """Apply ``command`` to numeric ``operands`` and return the result.

    ``rng`` must offer ``randrange(n)``; it defaults to the ``random`` module.
    """
    operands = tuple(operands)
    arity = 1 if command in _UNARY else 2
    if len(operands) != arity:
        raise InkError(
            f"{command.name} takes {arity} operand(s), got {len(operands)}"
        )
    if command is Command.RANDOM:
        return _random(operands, rng)
    if arity == 1:
        return _unary(command, operands[0])
    return _binary(command, *operands)