import random

import pytest

from inkrt.numeric_ops import Command, ink_ceil, ink_floor, numeric_operation
from inkrt.values import InkError, Value, ValueType


def i32(x):
    return Value(ValueType.INT32, x)


def u32(x):
    return Value(ValueType.UINT32, x)


def f32(x):
    return Value(ValueType.FLOAT32, x)


def boolean(x):
    return Value(ValueType.BOOLEAN, x)


def op(command, *operands, rng=None):
    return numeric_operation(command, operands, rng)


def test_floor_and_ceil():
    assert ink_floor(2.5) == 2.0
    assert ink_floor(-1.5) == -2.0
    assert ink_ceil(2.5) == 3.0
    assert ink_ceil(4.0) == 4.0
    assert ink_floor(4.0) == 4.0


def test_floor_ceiling_commands():
    assert op(Command.FLOOR, f32(6.0)) == f32(6.0)
    assert op(Command.FLOOR, i32(9)) == i32(9)
    assert op(Command.CEILING, u32(9)) == u32(9)
    assert op(Command.CEILING, f32(6.0)) == f32(6.0)


def test_add_subtract_round_trip():
    total = op(Command.ADD, i32(17), i32(-40))
    assert total.type is ValueType.INT32
    assert op(Command.SUBTRACT, total, i32(-40)) == i32(17)


def test_int_float_mix_promotes_to_float():
    mixed = op(Command.ADD, i32(2), f32(0.5))
    assert mixed == op(Command.ADD, f32(2.0), f32(0.5))
    assert mixed.type is ValueType.FLOAT32


def test_incompatible_types_raise():
    with pytest.raises(InkError):
        op(Command.ADD, i32(1), u32(1))
    with pytest.raises(InkError):
        op(Command.ADD, boolean(True), f32(1.0))


def test_int32_wraps():
    assert op(Command.ADD, i32(2**31 - 1), i32(1)) == i32(-(2**31))


def test_uint32_wraps():
    assert op(Command.SUBTRACT, u32(0), u32(1)) == u32(2**32 - 1)


def test_integer_division_truncates_toward_zero():
    assert op(Command.DIVIDE, i32(-7), i32(2)).data == -op(Command.DIVIDE, i32(7), i32(2)).data


@pytest.mark.parametrize("a,b", [(7, 2), (-7, 2), (7, -3), (-9, -4)])
def test_mod_matches_division(a, b):
    q = op(Command.DIVIDE, i32(a), i32(b)).data
    r = op(Command.MOD, i32(a), i32(b)).data
    assert b * q + r == a
    assert abs(r) < abs(b)


def test_integer_division_by_zero():
    with pytest.raises(InkError):
        op(Command.DIVIDE, i32(1), i32(0))


def test_boolean_subtract_uses_int():
    result = op(Command.SUBTRACT, boolean(True), boolean(True))
    assert result == op(Command.SUBTRACT, i32(1), i32(1))


def test_comparisons():
    assert op(Command.LESS_THAN, i32(1), i32(2)) == boolean(True)
    assert op(Command.GREATER_THAN, i32(1), i32(2)) == boolean(False)
    assert op(Command.IS_EQUAL, i32(3), f32(3.0)) == boolean(True)
    assert op(Command.NOT_EQUAL, u32(3), u32(3)) == boolean(False)
    assert op(Command.LESS_THAN_EQUALS, f32(1.5), f32(1.5)) == boolean(True)
    assert op(Command.GREATER_THAN_EQUALS, i32(0), i32(5)) == boolean(False)


def test_divert_equality():
    assert op(Command.IS_EQUAL, Value(ValueType.DIVERT, 10), Value(ValueType.DIVERT, 10)) == boolean(True)
    assert op(Command.NOT_EQUAL, Value(ValueType.DIVERT, 10), Value(ValueType.DIVERT, 11)) == boolean(True)


def test_min_max_pick_inputs():
    assert op(Command.MIN, i32(3), i32(7)) == i32(3)
    assert op(Command.MAX, i32(3), i32(7)) == i32(7)
    assert op(Command.MAX, i32(3), f32(7.5)) == f32(7.5)


def test_logic():
    assert op(Command.AND, boolean(True), boolean(False)) == boolean(False)
    assert op(Command.OR, i32(0), i32(4)) == boolean(True)
    assert op(Command.NOT, i32(0)) == boolean(True)
    with pytest.raises(InkError):
        op(Command.AND, f32(1.0), f32(1.0))


def test_negate():
    assert op(Command.NEGATE, op(Command.NEGATE, i32(12))) == i32(12)
    assert op(Command.NEGATE, boolean(True)) == boolean(False)


def test_int_cast():
    assert op(Command.INT_CAST, f32(7.0)) == i32(7)
    assert op(Command.INT_CAST, f32(-2.5)).data == -op(Command.INT_CAST, f32(2.5)).data
    assert op(Command.INT_CAST, boolean(True)).type is ValueType.INT32


def test_mod_on_float_raises():
    with pytest.raises(InkError):
        op(Command.MOD, f32(1.0), f32(2.0))


def test_random_within_bounds():
    rng = random.Random(42)
    for _ in range(50):
        result = op(Command.RANDOM, i32(3), i32(8), rng=rng)
        assert 3 <= result.data <= 8
    assert op(Command.RANDOM, i32(5), i32(5), rng=rng) == i32(5)


def test_random_bad_range():
    with pytest.raises(InkError):
        op(Command.RANDOM, i32(8), i32(3), rng=random.Random(0))


def test_wrong_arity():
    with pytest.raises(InkError):
        op(Command.ADD, i32(1))
    with pytest.raises(InkError):
        op(Command.NOT, i32(1), i32(2))


def test_non_numeric_command():
    with pytest.raises(InkError):
        op(Command.LIST_COUNT, i32(1), i32(2))