"""List values with queries: naming, counting, ordering and membership."""

from __future__ import annotations

from typing import Iterator

from .list_store import NULL_FLAG, ListFlag, ListRef, ListStore, _Entry


class ListTable(ListStore):
    """A :class:`ListStore` that can also describe and compare its lists.

    ``lrnd`` expects ``rng`` to offer ``randrange(n)`` (``random.Random`` does).
    """

    def _held(self, entry: _Entry, lid: int) -> list[int]:
        return [fid for fid in self._fids(lid) if fid in entry.flags]

    def flag_name(self, flag: ListFlag) -> str | None:
        """Name of ``flag``, or ``None`` for a bare list or an unnamed flag."""
        if flag.list_id < 0 or flag.flag < 0:
            return None
        return self._flag_names[self._fid(flag)]

    def list_str(self, lst: ListRef) -> str:
        """Names of the flags in ``lst``, ordered by position, then by list."""
        entry = self._entry(lst)
        origins = sorted(entry.origins)
        width = max((len(self._fids(lid)) for lid in origins), default=0)
        names: list[str] = []
        for pos in range(width):
            for lid in origins:
                fids = self._fids(lid)
                if pos >= len(fids):
                    continue
                fid = fids[pos]
                name = self._flag_names[fid]
                if fid in entry.flags and name is not None:
                    names.append(name)
        return ", ".join(names)

    def count(self, arg) -> int:
        """Number of flags held by a list or a single flag."""
        if isinstance(arg, ListFlag):
            return 0 if arg.flag < 0 else 1
        if isinstance(arg, ListRef):
            entry = self._entry(arg)
            return sum(len(self._held(entry, lid)) for lid in entry.origins)
        raise TypeError(f"unsupported operand for list count: {arg!r}")

    def min(self, arg) -> ListFlag:
        """Flag with the lowest position; earlier lists win ties."""
        if isinstance(arg, ListFlag):
            return arg
        if not isinstance(arg, ListRef):
            raise TypeError(f"unsupported operand for list min: {arg!r}")
        entry = self._entry(arg)
        best = NULL_FLAG
        for lid in sorted(entry.origins):
            held = self._held(entry, lid)
            if held:
                position = held[0] - self._begin(lid)
                if best.flag < 0 or position < best.flag:
                    best = ListFlag(lid, position)
        return best

    def max(self, arg) -> ListFlag:
        """Flag with the highest position; earlier lists win ties."""
        if isinstance(arg, ListFlag):
            return arg
        if not isinstance(arg, ListRef):
            raise TypeError(f"unsupported operand for list max: {arg!r}")
        entry = self._entry(arg)
        best = NULL_FLAG
        for lid in sorted(entry.origins):
            held = self._held(entry, lid)
            if held:
                position = held[-1] - self._begin(lid)
                if position > best.flag:
                    best = ListFlag(lid, position)
        return best

    def lrnd(self, arg, rng) -> ListFlag:
        """A randomly picked flag of ``arg``; the null flag for an empty list."""
        if isinstance(arg, ListFlag):
            return arg
        if not isinstance(arg, ListRef):
            raise TypeError(f"unsupported operand for list lrnd: {arg!r}")
        entry = self._entry(arg)
        held = [fid for lid in sorted(entry.origins) for fid in self._held(entry, lid)]
        if not held:
            return NULL_FLAG
        return self._to_flag(held[rng.randrange(len(held))])

    def less(self, lh, rh) -> bool:
        return self.max(lh).flag < self.min(rh).flag

    def greater(self, lh, rh) -> bool:
        return self.min(lh).flag > self.max(rh).flag

    def less_equal(self, lh, rh) -> bool:
        return (
            self.max(lh).flag <= self.max(rh).flag
            and self.min(lh).flag <= self.min(rh).flag
        )

    def greater_equal(self, lh, rh) -> bool:
        return (
            self.max(lh).flag >= self.max(rh).flag
            and self.min(lh).flag >= self.min(rh).flag
        )

    def equal(self, lh, rh) -> bool:
        """Same origin lists and the same flags within them."""
        if isinstance(lh, ListFlag) and isinstance(rh, ListFlag):
            return lh == rh
        if isinstance(lh, ListFlag) and isinstance(rh, ListRef):
            return self.equal(rh, lh)
        if isinstance(lh, ListRef) and isinstance(rh, ListRef):
            left, right = self._entry(lh), self._entry(rh)
            if left.origins != right.origins:
                return False
            return all(
                self._held(left, lid) == self._held(right, lid) for lid in left.origins
            )
        if isinstance(lh, ListRef) and isinstance(rh, ListFlag):
            left = self._entry(lh)
            if rh.list_id < 0:
                return not left.origins
            if left.origins != {rh.list_id}:
                return False
            begin = self._begin(rh.list_id)
            return all(
                (fid in left.flags) == (fid - begin == rh.flag)
                for fid in self._fids(rh.list_id)
            )
        raise TypeError(f"unsupported operands for list equal: {lh!r}, {rh!r}")

    def not_equal(self, lh, rh) -> bool:
        return not self.equal(lh, rh)

    def has(self, lh, rh) -> bool:
        """Whether ``lh`` contains every flag of ``rh``."""
        if isinstance(lh, ListFlag) and isinstance(rh, ListFlag):
            return lh == rh
        if isinstance(lh, ListFlag) and isinstance(rh, ListRef):
            return self.has(rh, lh)
        if isinstance(lh, ListRef) and isinstance(rh, ListFlag):
            return self._holds(self._entry(lh), rh)
        if isinstance(lh, ListRef) and isinstance(rh, ListRef):
            left, right = self._entry(lh), self._entry(rh)
            for lid in right.origins:
                if lid not in left.origins:
                    return False
                if any(fid not in left.flags for fid in self._held(right, lid)):
                    return False
            return True
        raise TypeError(f"unsupported operands for list has: {lh!r}, {rh!r}")

    def hasnt(self, lh, rh) -> bool:
        return not self.has(lh, rh)

    def named_flags(self, filter: ListRef | None = None) -> Iterator[tuple[ListFlag, str]]:
        """Yield ``(flag, name)`` for named flags, optionally only those in ``filter``."""
        entry = None if filter is None or filter.lid < 0 else self._entry(filter)
        for lid in range(len(self._list_end)):
            if entry is not None and lid not in entry.origins:
                continue
            begin = self._begin(lid)
            for fid in self._fids(lid):
                name = self._flag_names[fid]
                if name is None:
                    continue
                if entry is not None and fid not in entry.flags:
                    continue
                yield ListFlag(lid, fid - begin), name