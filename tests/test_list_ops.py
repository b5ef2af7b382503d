import random

import pytest

from inkrt.list_ops import list_operation
from inkrt.list_store import ListFlag, ListRef
from inkrt.list_table import ListTable
from inkrt.numeric_ops import Command
from inkrt.values import InkError, Value, ValueType

RED = ListFlag(0, 0)
GREEN = ListFlag(0, 1)
BLUE = ListFlag(0, 2)
SMALL = ListFlag(1, 0)


@pytest.fixture
def lists():
    return ListTable(
        [("colors", {0: "red", 1: "green", 2: "blue"}), ("sizes", {0: "small", 1: "large"})]
    )


def flag(f):
    return Value(ValueType.LIST_FLAG, f)


def make_list(lists, *flags):
    ref = lists.create()
    for f in flags:
        lists.add_inplace(ref, f)
    return Value(ValueType.LIST, ref)


def test_list_int_and_value_round_trip(lists):
    made = list_operation(
        Command.LIST_INT, [Value(ValueType.STRING, "colors"), Value(ValueType.INT32, 2)], lists
    )
    assert made == flag(GREEN)
    back = list_operation(Command.LIST_VALUE, [made], lists)
    assert back == Value(ValueType.INT32, 2)


def test_list_int_unknown_name(lists):
    with pytest.raises(InkError):
        list_operation(
            Command.LIST_INT, [Value(ValueType.STRING, "nope"), Value(ValueType.INT32, 1)], lists
        )


def test_add_two_flags_gives_list_holding_both(lists):
    result = list_operation(Command.ADD, [flag(RED), flag(SMALL)], lists)
    assert result.type is ValueType.LIST
    assert lists.has(result.data, RED)
    assert lists.has(result.data, SMALL)
    assert lists.count(result.data) == lists.count(RED) + lists.count(SMALL)


def test_flag_shift_round_trip(lists):
    up = list_operation(Command.ADD, [flag(RED), Value(ValueType.INT32, 1)], lists)
    assert up == flag(GREEN)
    down = list_operation(Command.SUBTRACT, [up, Value(ValueType.UINT32, 1)], lists)
    assert down == flag(RED)


def test_list_shift_round_trip(lists):
    original = make_list(lists, RED, GREEN)
    up = list_operation(Command.ADD, [original, Value(ValueType.INT32, 1)], lists)
    assert up.type is ValueType.LIST
    assert lists.has(up.data, BLUE)
    down = list_operation(Command.SUBTRACT, [up, Value(ValueType.INT32, 1)], lists)
    assert lists.equal(down.data, original.data)


def test_subtract_flag_from_list(lists):
    original = make_list(lists, RED, GREEN)
    result = list_operation(Command.SUBTRACT, [original, flag(RED)], lists)
    assert result.type is ValueType.LIST
    assert lists.equal(result.data, GREEN)


def test_intersection_types(lists):
    a = make_list(lists, RED, GREEN)
    b = make_list(lists, GREEN, BLUE)
    both = list_operation(Command.INTERSECTION, [a, b], lists)
    assert both.type is ValueType.LIST
    assert lists.equal(both.data, GREEN)
    single = list_operation(Command.INTERSECTION, [a, flag(GREEN)], lists)
    assert single == flag(GREEN)


def test_count_min_max(lists):
    lst = make_list(lists, RED, BLUE)
    assert list_operation(Command.LIST_COUNT, [lst], lists) == Value(
        ValueType.INT32, lists.count(lst.data)
    )
    assert list_operation(Command.LIST_MIN, [lst], lists) == flag(RED)
    assert list_operation(Command.LIST_MAX, [lst], lists) == flag(BLUE)
    assert list_operation(Command.LIST_MIN, [flag(GREEN)], lists) == flag(GREEN)


def test_all_and_invert(lists):
    everything = list_operation(Command.LIST_ALL, [flag(GREEN)], lists)
    assert lists.list_str(everything.data) == "red, green, blue"
    inverted = list_operation(Command.LIST_INVERT, [make_list(lists, RED, BLUE)], lists)
    assert lists.equal(inverted.data, GREEN)


def test_comparisons(lists):
    assert list_operation(Command.LESS_THAN, [flag(RED), flag(BLUE)], lists).data is True
    assert list_operation(Command.GREATER_THAN, [flag(RED), flag(BLUE)], lists).data is False
    assert list_operation(Command.LESS_THAN_EQUALS, [flag(RED), flag(RED)], lists).data is True


def test_equal_and_not_equal_are_opposite(lists):
    lst = make_list(lists, GREEN)
    for other in (flag(GREEN), flag(RED)):
        eq = list_operation(Command.IS_EQUAL, [lst, other], lists)
        ne = list_operation(Command.NOT_EQUAL, [lst, other], lists)
        assert eq.type is ValueType.BOOLEAN
        assert eq.data is not ne.data
    assert list_operation(Command.IS_EQUAL, [lst, flag(GREEN)], lists).data is True


def test_has_and_hasnt(lists):
    lst = make_list(lists, RED, GREEN)
    assert list_operation(Command.HAS, [lst, flag(RED)], lists).data is True
    assert list_operation(Command.HASNT, [lst, flag(BLUE)], lists).data is True
    assert list_operation(Command.HAS, [lst, make_list(lists, RED, BLUE)], lists).data is False


def test_lrnd_picks_member(lists):
    lst = make_list(lists, RED, BLUE)
    for seed in range(5):
        picked = list_operation(Command.LRND, [lst], lists, random.Random(seed))
        assert picked.type is ValueType.LIST_FLAG
        assert picked.data in (RED, BLUE)


def test_range_with_integer_limits(lists):
    lst = make_list(lists, RED, GREEN, BLUE)
    result = list_operation(
        Command.LIST_RANGE, [lst, Value(ValueType.INT32, 1), Value(ValueType.INT32, 2)], lists
    )
    assert lists.list_str(result.data) == "red, green"


def test_range_with_flag_limits(lists):
    lst = make_list(lists, RED, GREEN, BLUE)
    result = list_operation(Command.LIST_RANGE, [lst, flag(GREEN), flag(BLUE)], lists)
    assert lists.list_str(result.data) == "green, blue"


def test_errors(lists):
    with pytest.raises(InkError):
        list_operation(Command.LIST_COUNT, [Value(ValueType.INT32, 1)], lists)
    with pytest.raises(InkError):
        list_operation(Command.HAS, [flag(RED)], lists)
    with pytest.raises(InkError):
        list_operation(Command.LIST_VALUE, [make_list(lists, RED)], lists)
    with pytest.raises(InkError):
        list_operation(Command.MULTIPLY, [flag(RED), flag(RED)], lists)
    assert isinstance(make_list(lists).data, ListRef)