import pytest

from inkrt.list_store import NULL_FLAG, ListFlag, ListRef, ListStore
from inkrt.values import InkError

DEFS = [
    ("colours", {0: "red", 1: "green", 2: "blue"}),
    ("sizes", {0: "small", 2: "large"}),
]
RED = ListFlag(0, 0)
GREEN = ListFlag(0, 1)
BLUE = ListFlag(0, 2)
SMALL = ListFlag(1, 0)
LARGE = ListFlag(1, 2)


@pytest.fixture
def store():
    return ListStore(DEFS)


def make(store, *flags):
    ref = store.create_permanent()
    for flag in flags:
        store.add_inplace(ref, flag)
    return ref


def snap(store, ref):
    return store._snapshot(ref)


def test_validity():
    assert not ListStore()
    assert ListStore(DEFS)


def test_get_list_id(store):
    assert store.get_list_id("sizes") == ListFlag(1, -1)
    assert store.get_list_id("colours") == ListFlag(0, -1)


def test_get_list_id_unknown(store):
    with pytest.raises(InkError):
        store.get_list_id("shapes")


def test_gc_frees_only_unused(store):
    used = store.create()
    permanent = store.create_permanent()
    unused = store.create()
    store.clear_usage()
    store.mark_used(used)
    store.gc()
    assert store.create() == unused
    assert store.create() == ListRef(permanent.lid + 2)


def test_gc_clears_reused_slot(store):
    ref = store.create()
    store.add_inplace(ref, RED)
    store.clear_usage()
    store.gc()
    again = store.create()
    assert again == ref
    assert snap(store, again) == (frozenset(), frozenset())


def test_add_inplace_ignores_null_flag(store):
    ref = make(store, NULL_FLAG)
    assert snap(store, ref) == (frozenset(), frozenset())


def test_add_inplace_bare_list_sets_origin_only(store):
    ref = make(store, ListFlag(1, -1))
    assert snap(store, ref) == (frozenset({1}), frozenset())


def test_add_two_flags(store):
    ref = store.add(RED, SMALL)
    assert snap(store, ref) == (frozenset({0, 1}), frozenset({RED, SMALL}))


def test_add_list_list_is_union(store):
    ref = store.add(make(store, RED), make(store, LARGE))
    assert snap(store, ref) == (frozenset({0, 1}), frozenset({RED, LARGE}))


def test_add_flag_list_matches_list_flag(store):
    base = make(store, GREEN)
    assert snap(store, store.add(BLUE, base)) == snap(store, store.add(base, BLUE))


def test_shift_out_of_range_keeps_origin(store):
    ref = store.add(make(store, BLUE), 1)
    assert snap(store, ref) == (frozenset({0}), frozenset())


def test_shift_flag(store):
    assert store.add(RED, 2) == BLUE
    assert store.sub(GREEN, 1) == RED
    assert store.add(BLUE, 1) == ListFlag(0, -1)
    assert store.sub(RED, 1) == ListFlag(0, -1)


def test_sub_list_list(store):
    both = make(store, RED, GREEN)
    rest = store.sub(both, make(store, RED))
    assert snap(store, rest) == (frozenset({0}), frozenset({GREEN}))
    empty = store.sub(both, both)
    assert snap(store, empty) == (frozenset({0}), frozenset())


def test_sub_list_flag(store):
    mixed = make(store, RED, SMALL)
    assert snap(store, store.sub(mixed, SMALL)) == (frozenset({0}), frozenset({RED}))
    single = make(store, RED)
    assert snap(store, store.sub(single, RED)) == (frozenset({0}), frozenset())


def test_sub_flag_operands(store):
    assert store.sub(RED, RED) == ListFlag(0, -1)
    assert store.sub(RED, GREEN) == RED
    assert store.sub(RED, make(store, RED, BLUE)) == ListFlag(0, -1)
    assert store.sub(GREEN, make(store, RED)) == GREEN


def test_intersect(store):
    left = make(store, RED, GREEN, SMALL)
    right = make(store, GREEN, BLUE)
    assert snap(store, store.intersect(left, right)) == (
        frozenset({0}),
        frozenset({GREEN}),
    )
    assert store.intersect(left, SMALL) == SMALL
    assert store.intersect(BLUE, left) == NULL_FLAG
    assert store.intersect(RED, RED) == RED
    assert store.intersect(RED, GREEN) == NULL_FLAG


def test_all(store):
    assert snap(store, store.all(GREEN)) == (
        frozenset({0}),
        frozenset({RED, GREEN, BLUE}),
    )
    assert snap(store, store.all(NULL_FLAG)) == (frozenset(), frozenset())
    ref = store.all(make(store, SMALL))
    origins, flags = snap(store, ref)
    assert origins == frozenset({1})
    assert {SMALL, LARGE} <= flags


def test_invert(store):
    inverted = store.invert(make(store, RED))
    assert snap(store, inverted) == (frozenset({0}), frozenset({GREEN, BLUE}))
    from_flag = store.invert(GREEN)
    assert snap(store, from_flag) == (frozenset(), frozenset({RED, BLUE}))
    full = store.invert(make(store, RED, GREEN, BLUE))
    assert snap(store, full) == (frozenset(), frozenset())


def test_range(store):
    ref = make(store, RED, GREEN, BLUE)
    assert snap(store, store.range(ref, 1, 2)) == (
        frozenset({0}),
        frozenset({GREEN, BLUE}),
    )
    none = store.range(ref, 5, 9)
    assert snap(store, none) == (frozenset({0}), frozenset())


def test_redefine_gives_origin(store):
    old = make(store, RED)
    new = make(store)
    result = store.redefine(old, new)
    assert snap(store, result) == (frozenset({0}), frozenset())
    assert snap(store, new) == (frozenset({0}), frozenset())


def test_redefine_keeps_own_origin(store):
    old = make(store, RED)
    new = make(store, SMALL)
    assert snap(store, store.redefine(old, new)) == (frozenset({1}), frozenset({SMALL}))


def test_unsupported_operands(store):
    with pytest.raises(TypeError):
        store.add(3, RED)
    with pytest.raises(TypeError):
        store.intersect(RED, 2)
    with pytest.raises(TypeError):
        store.all("red")