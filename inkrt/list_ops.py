"""Operations of the evaluator on list and list-flag values."""

from __future__ import annotations

import random
from typing import Sequence

from .list_store import ListFlag, ListRef
from .numeric_ops import Command
from .values import InkError, Value, ValueType

_UNARY = frozenset(
    {
        Command.LIST_COUNT,
        Command.LIST_MIN,
        Command.LIST_MAX,
        Command.LIST_ALL,
        Command.LIST_INVERT,
        Command.LRND,
        Command.LIST_VALUE,
    }
)

_QUERIES = {
    Command.LIST_COUNT: "count",
    Command.LIST_MIN: "min",
    Command.LIST_MAX: "max",
    Command.LIST_ALL: "all",
    Command.LIST_INVERT: "invert",
}

_BINARY = {
    Command.INTERSECTION: "intersect",
    Command.LESS_THAN: "less",
    Command.LESS_THAN_EQUALS: "less_equal",
    Command.GREATER_THAN: "greater",
    Command.GREATER_THAN_EQUALS: "greater_equal",
    Command.IS_EQUAL: "equal",
    Command.NOT_EQUAL: "not_equal",
    Command.HAS: "has",
    Command.HASNT: "hasnt",
}

_INTEGERS = (ValueType.INT32, ValueType.UINT32)


def _wrap(result) -> Value:
    if isinstance(result, bool):
        return Value(ValueType.BOOLEAN, result)
    if isinstance(result, int):
        return Value(ValueType.INT32, result)
    if isinstance(result, ListRef):
        return Value(ValueType.LIST, result)
    if isinstance(result, ListFlag):
        return Value(ValueType.LIST_FLAG, result)
    raise InkError(f"unexpected list operation result {result!r}")


def _list_operand(value: Value):
    if value.type not in (ValueType.LIST, ValueType.LIST_FLAG):
        raise InkError(f"expected a list or list flag, got {value.type.name}")
    return value.data


def _limit(value: Value) -> int:
    if value.type is ValueType.INT32:
        return value.data - 1
    if value.type is ValueType.LIST_FLAG:
        return value.data.flag
    raise InkError(f"invalid list range limit of type {value.type.name}")


def _arity(command: Command) -> int:
    if command in _UNARY:
        return 1
    if command is Command.LIST_RANGE:
        return 3
    return 2


def list_operation(command: Command, operands: Sequence[Value], lists, rng=None) -> Value:
    """Apply ``command`` to list operands using the table ``lists``.

    ``rng`` is used by ``LRND`` and must offer ``randrange(n)``; it
    defaults to the ``random`` module.
    """
    operands = tuple(operands)
    arity = _arity(command)
    if len(operands) != arity:
        raise InkError(f"{command.name} takes {arity} operand(s), got {len(operands)}")

    if command is Command.LIST_VALUE:
        if operands[0].type is not ValueType.LIST_FLAG:
            raise InkError("LIST_VALUE only works on list_flag values")
        return Value(ValueType.INT32, operands[0].data.flag + 1)

    if command is Command.LIST_INT:
        name, position = operands
        if name.type is not ValueType.STRING or position.type is not ValueType.INT32:
            raise InkError("LIST_INT needs a list name and an integer")
        entry = lists.get_list_id(name.data)
        return Value(ValueType.LIST_FLAG, ListFlag(entry.list_id, position.data - 1))

    if command is Command.LIST_RANGE:
        if operands[0].type is not ValueType.LIST:
            raise InkError("LIST_RANGE needs a list")
        return Value(
            ValueType.LIST,
            lists.range(operands[0].data, _limit(operands[1]), _limit(operands[2])),
        )

    if command is Command.LRND:
        arg = _list_operand(operands[0])
        return Value(ValueType.LIST_FLAG, lists.lrnd(arg, random if rng is None else rng))

    if command in _QUERIES:
        return _wrap(getattr(lists, _QUERIES[command])(_list_operand(operands[0])))

    if command in (Command.ADD, Command.SUBTRACT):
        lh = _list_operand(operands[0])
        rhs = operands[1]
        rh = rhs.data if rhs.type in _INTEGERS else _list_operand(rhs)
        method = lists.add if command is Command.ADD else lists.sub
        return _wrap(method(lh, int(rh) if rhs.type in _INTEGERS else rh))

    if command in _BINARY:
        lh = _list_operand(operands[0])
        rh = _list_operand(operands[1])
        return _wrap(getattr(lists, _BINARY[command])(lh, rh))

    raise InkError(f"{command.name} is not a list operation")