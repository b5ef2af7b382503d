"""Storage of list definitions and of the list values a story creates."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, Mapping, Union

from .values import InkError


@dataclass(frozen=True)
class ListFlag:
    """One entry of a list definition; ``flag == -1`` means the bare list."""

    list_id: int
    flag: int


NULL_FLAG = ListFlag(-1, -1)


@dataclass(frozen=True)
class ListRef:
    """Handle to a list value held by a :class:`ListStore`."""

    lid: int


class _State(Enum):
    UNUSED = auto()
    USED = auto()
    PERMANENT = auto()
    EMPTY = auto()


@dataclass
class _Entry:
    state: _State
    origins: set[int] = field(default_factory=set)
    flags: set[int] = field(default_factory=set)


Definitions = Iterable[tuple[str, Union[Mapping[int, str], Iterable[tuple[int, str]]]]]


class ListStore:
    """List definitions plus the pool of list values built from them.

    ``definitions`` is a sequence of ``(list_name, flags)`` pairs where
    ``flags`` maps a flag's position to its name. Positions left out get
    no name. Without definitions the store is falsy.
    """

    def __init__(self, definitions: Definitions | None = None):
        self._list_end: list[int] = []
        self._flag_names: list[str | None] = []
        self._list_names: list[str] = []
        self._entries: list[_Entry] = []
        self._valid = definitions is not None
        if definitions is None:
            return
        for list_name, flags in definitions:
            named = dict(flags)
            if any(position < 0 for position in named):
                raise ValueError(f"negative flag position in list {list_name!r}")
            size = max(named, default=-1) + 1
            self._list_names.append(list_name)
            self._flag_names.extend(named.get(pos) for pos in range(size))
            self._list_end.append(len(self._flag_names))

    def __bool__(self) -> bool:
        return self._valid

    # -- metadata helpers -------------------------------------------------

    def _begin(self, lid: int) -> int:
        return 0 if lid == 0 else self._list_end[lid - 1]

    def _fids(self, lid: int) -> range:
        return range(self._begin(lid), self._list_end[lid])

    def _fid(self, flag: ListFlag) -> int:
        return self._begin(flag.list_id) + flag.flag

    def _to_flag(self, fid: int) -> ListFlag:
        lid = bisect_right(self._list_end, fid)
        return ListFlag(lid, fid - self._begin(lid))

    def _entry(self, ref: ListRef) -> _Entry:
        return self._entries[ref.lid]

    def _holds(self, entry: _Entry, flag: ListFlag) -> bool:
        return (
            flag.list_id >= 0
            and flag.flag >= 0
            and flag.list_id in entry.origins
            and self._fid(flag) in entry.flags
        )

    def _make(self, origins: Iterable[int], flags: Iterable[int]) -> ListRef:
        origins, flags = set(origins), set(flags)
        ref = self.create()
        entry = self._entry(ref)
        entry.origins = origins
        entry.flags = flags
        return ref

    def _snapshot(self, ref: ListRef) -> tuple[frozenset[int], frozenset[ListFlag]]:
        entry = self._entry(ref)
        return frozenset(entry.origins), frozenset(self._to_flag(f) for f in entry.flags)

    # -- pool management --------------------------------------------------

    def create(self) -> ListRef:
        """Return a new empty list, reusing a collected slot when possible."""
        for lid, entry in enumerate(self._entries):
            if entry.state is _State.EMPTY:
                entry.state = _State.USED
                return ListRef(lid)
        self._entries.append(_Entry(_State.USED))
        return ListRef(len(self._entries) - 1)

    def create_permanent(self) -> ListRef:
        """Return a new empty list that garbage collection never frees."""
        ref = self.create()
        self._entry(ref).state = _State.PERMANENT
        return ref

    def add_inplace(self, lst: ListRef, flag: ListFlag) -> ListRef:
        """Add ``flag`` (or just its list as origin) to ``lst`` itself."""
        if flag.list_id < 0:
            return lst
        entry = self._entry(lst)
        entry.origins.add(flag.list_id)
        if flag.flag >= 0:
            entry.flags.add(self._fid(flag))
        return lst

    def get_list_id(self, list_name: str) -> ListFlag:
        """Return the bare flag naming the list called ``list_name``."""
        for lid, name in enumerate(self._list_names):
            if name == list_name:
                return ListFlag(lid, -1)
        raise InkError("No list with name found!")

    def clear_usage(self) -> None:
        """Mark every non-permanent live list as unused."""
        for entry in self._entries:
            if entry.state is _State.USED:
                entry.state = _State.UNUSED

    def mark_used(self, lst: ListRef) -> None:
        self._entry(lst).state = _State.USED

    def gc(self) -> None:
        """Free every list still marked unused."""
        for entry in self._entries:
            if entry.state is _State.UNUSED:
                entry.state = _State.EMPTY
                entry.origins.clear()
                entry.flags.clear()

    # -- operations -------------------------------------------------------

    def redefine(self, lh: ListRef, rh: ListRef) -> ListRef:
        """Assign ``rh`` over ``lh``; an origin-less ``rh`` takes ``lh``'s origins."""
        left, right = self._entry(lh), self._entry(rh)
        if not right.origins:
            right.origins |= left.origins
        return self._make(right.origins, right.flags)

    def _shift_list(self, ref: ListRef, amount: int) -> ListRef:
        src = self._entry(ref)
        origins: set[int] = set()
        flags: set[int] = set()
        for lid in src.origins:
            fids = self._fids(lid)
            moved = {f + amount for f in src.flags if f in fids and f + amount in fids}
            if moved:
                origins.add(lid)
                flags |= moved
        if not origins:
            origins = set(src.origins)
        return self._make(origins, flags)

    def _shift_flag(self, flag: ListFlag, amount: int) -> ListFlag:
        if flag.list_id < 0:
            return NULL_FLAG
        moved = flag.flag + amount
        if moved < 0 or moved >= len(self._fids(flag.list_id)):
            moved = -1
        return ListFlag(flag.list_id, moved)

    def add(self, lh, rh):
        """Union of lists and flags, or a shift of all flags by an integer."""
        if isinstance(rh, int):
            if isinstance(lh, ListRef):
                return self._shift_list(lh, rh)
            if isinstance(lh, ListFlag):
                return self._shift_flag(lh, rh)
        elif isinstance(lh, ListFlag) and isinstance(rh, ListFlag):
            both = [f for f in (lh, rh) if f.list_id >= 0]
            return self._make(
                {f.list_id for f in both},
                {self._fid(f) for f in both if f.flag >= 0},
            )
        elif isinstance(lh, ListFlag) and isinstance(rh, ListRef):
            return self.add(rh, lh)
        elif isinstance(lh, ListRef):
            left = self._entry(lh)
            if isinstance(rh, ListRef):
                right = self._entry(rh)
                return self._make(left.origins | right.origins, left.flags | right.flags)
            if isinstance(rh, ListFlag):
                origins, flags = set(left.origins), set(left.flags)
                if rh.list_id >= 0:
                    origins.add(rh.list_id)
                    if rh.flag >= 0:
                        flags.add(self._fid(rh))
                return self._make(origins, flags)
        raise TypeError(f"unsupported operands for list add: {lh!r}, {rh!r}")

    def sub(self, lh, rh):
        """Difference of lists and flags, or a downward shift by an integer."""
        if isinstance(rh, int):
            if isinstance(lh, ListRef):
                return self._shift_list(lh, -rh)
            if isinstance(lh, ListFlag):
                return self._shift_flag(lh, -rh)
        elif isinstance(lh, ListFlag) and isinstance(rh, ListFlag):
            return ListFlag(lh.list_id, -1) if lh == rh else lh
        elif isinstance(lh, ListFlag) and isinstance(rh, ListRef):
            if self._holds(self._entry(rh), lh):
                return ListFlag(lh.list_id, -1)
            return lh
        elif isinstance(lh, ListRef):
            left = self._entry(lh)
            if isinstance(rh, ListRef):
                right = self._entry(rh)
                flags = left.flags - right.flags
                origins = left.origins - right.origins
                active = False
                for lid in right.origins & left.origins:
                    if any(f in flags for f in self._fids(lid)):
                        origins.add(lid)
                        active = True
                if not active and not origins:
                    origins = set(left.origins)
                return self._make(origins, flags)
            if isinstance(rh, ListFlag):
                origins, flags = set(left.origins), set(left.flags)
                if rh.list_id >= 0:
                    if rh.flag >= 0:
                        flags.discard(self._fid(rh))
                    if not any(f in flags for f in self._fids(rh.list_id)):
                        origins.discard(rh.list_id)
                        if not origins:
                            origins = set(left.origins)
                return self._make(origins, flags)
        raise TypeError(f"unsupported operands for list sub: {lh!r}, {rh!r}")

    def intersect(self, lh, rh):
        """Common part of two lists, or a flag if both operands hold it."""
        if isinstance(lh, ListRef) and isinstance(rh, ListRef):
            left, right = self._entry(lh), self._entry(rh)
            return self._make(left.origins & right.origins, left.flags & right.flags)
        if isinstance(lh, ListRef) and isinstance(rh, ListFlag):
            return rh if self._holds(self._entry(lh), rh) else NULL_FLAG
        if isinstance(lh, ListFlag) and isinstance(rh, ListRef):
            return self.intersect(rh, lh)
        if isinstance(lh, ListFlag) and isinstance(rh, ListFlag):
            return lh if lh == rh else NULL_FLAG
        raise TypeError(f"unsupported operands for list intersect: {lh!r}, {rh!r}")

    def all(self, arg):
        """Every flag of every list that ``arg`` belongs to."""
        if isinstance(arg, ListRef):
            origins = set(self._entry(arg).origins)
            flags = {f for lid in origins for f in self._fids(lid)}
            return self._make(origins, flags)
        if isinstance(arg, ListFlag):
            if arg == NULL_FLAG or arg.list_id < 0:
                return self.create()
            return self._make({arg.list_id}, self._fids(arg.list_id))
        raise TypeError(f"unsupported operand for list all: {arg!r}")

    def invert(self, arg):
        """Flags of ``arg``'s lists that ``arg`` does not hold.

        Inverting a single flag yields flags without any origin list.
        """
        if isinstance(arg, ListRef):
            src = self._entry(arg)
            origins: set[int] = set()
            flags: set[int] = set()
            for lid in src.origins:
                missing = set(self._fids(lid)) - src.flags
                if missing:
                    origins.add(lid)
                    flags |= missing
            return self._make(origins, flags)
        if isinstance(arg, ListFlag):
            if arg == NULL_FLAG or arg.list_id < 0:
                return self.create()
            begin = self._begin(arg.list_id)
            return self._make(
                set(), {f for f in self._fids(arg.list_id) if f - begin != arg.flag}
            )
        raise TypeError(f"unsupported operand for list invert: {arg!r}")

    def range(self, lst: ListRef, low: int, high: int) -> ListRef:
        """Flags of ``lst`` whose positions lie between ``low`` and ``high``."""
        src = self._entry(lst)
        origins: set[int] = set()
        flags: set[int] = set()
        for lid in src.origins:
            begin = self._begin(lid)
            kept = {
                f
                for f in self._fids(lid)
                if f in src.flags and low <= f - begin <= high
            }
            if kept:
                origins.add(lid)
                flags |= kept
        if not origins:
            origins = set(src.origins)
        return self._make(origins, flags)