"""External functions that a story can call, and helpers for their stacks."""

from __future__ import annotations

from typing import Any, Callable, Hashable

from .stack import EvalStack
from .values import InkError, Value, ValueType

_PASSABLE = frozenset(
    {
        ValueType.BOOLEAN,
        ValueType.INT32,
        ValueType.UINT32,
        ValueType.FLOAT32,
        ValueType.STRING,
        ValueType.LIST,
        ValueType.LIST_FLAG,
    }
)


def pop_int(stack: EvalStack) -> int:
    """Pop a signed integer argument; any other type is an error."""
    value = stack.pop()
    if value.type is not ValueType.INT32:
        raise InkError("Type missmatch!")
    return value.data


def pop_str(stack: EvalStack) -> str:
    """Pop a string argument; any other type is an error."""
    value = stack.pop()
    if value.type is not ValueType.STRING:
        raise InkError("Type missmatch!")
    return value.data


def push_int(stack: EvalStack, value: int) -> None:
    stack.push(Value(ValueType.INT32, int(value)))


def push_string(stack: EvalStack, value: str) -> None:
    stack.push(Value(ValueType.STRING, str(value)))


def _argument(value: Value) -> Any:
    if value.type in (ValueType.NULL, ValueType.DIVERT, ValueType.NONE):
        raise InkError(
            "Trying to pass null or divert as ink parameter to external function"
        )
    if value.type not in _PASSABLE:
        raise InkError(f"can not pass {value.type.name} to an external function")
    return value.data


def _result(result: Any) -> Value:
    if result is None:
        return Value()
    if isinstance(result, Value):
        return result
    if isinstance(result, bool):
        return Value(ValueType.BOOLEAN, result)
    if isinstance(result, int):
        return Value(ValueType.INT32, result)
    if isinstance(result, float):
        return Value(ValueType.FLOAT32, result)
    if isinstance(result, str):
        return Value(ValueType.STRING, result)
    raise InkError(f"can not return {type(result).__name__} from an external function")


class FunctionRegistry:
    """Functions bound by name; the first binding of a name is the one called."""

    def __init__(self) -> None:
        self._functions: dict[Hashable, Callable[..., Any]] = {}

    def __contains__(self, name: Hashable) -> bool:
        return name in self._functions

    def __len__(self) -> int:
        return len(self._functions)

    def add(self, name: Hashable, func: Callable[..., Any]) -> None:
        """Bind ``func`` to ``name`` unless the name is already bound."""
        self._functions.setdefault(name, func)

    def call(self, name: Hashable, stack: EvalStack, num_arguments: int) -> bool:
        """Call the function bound to ``name`` with arguments from ``stack``.

        The arguments are popped (the last pushed is the last argument) and
        the result is pushed; a function returning ``None`` pushes an empty
        value. Returns ``False`` and leaves the stack alone if ``name`` is
        not bound.
        """
        func = self._functions.get(name)
        if func is None:
            return False
        popped = [stack.pop() for _ in range(num_arguments)]
        args = [_argument(v) for v in reversed(popped)]
        stack.push(_result(func(*args)))
        return True