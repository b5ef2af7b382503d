"""Story-wide state: global variables, visit and turn counts, and lists."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable, Iterable

from .list_store import ListFlag, ListRef
from .list_table import ListTable
from .values import InkError, Value, ValueType


@dataclass
class _VisitCount:
    visits: int = 0
    turns: int = -1


class Globals:
    """Global store shared by every runner of one story.

    ``num_containers`` sizes the visit counters. ``lists`` holds the story's
    list definitions; each entry of ``static_lists`` is a sequence of flags
    that becomes one permanent list, in order. Every named list flag is also
    made available as a global variable under its name.
    """

    def __init__(
        self,
        num_containers: int,
        lists: ListTable | None = None,
        static_lists: Iterable[Iterable[ListFlag]] = (),
    ):
        if num_containers < 0:
            raise ValueError("number of containers can not be negative")
        self._visit_counts = [_VisitCount() for _ in range(num_containers)]
        self._variables: dict[Hashable, Value] = {}
        self._saved: dict[Hashable, Value] | None = None
        self._lists = lists if lists is not None else ListTable()
        refs: list[ListRef] = []
        if self._lists:
            for flags in static_lists:
                ref = self._lists.create_permanent()
                for flag in flags:
                    self._lists.add_inplace(ref, flag)
                refs.append(ref)
            for flag, name in self._lists.named_flags(None):
                self.set_variable(name, Value(ValueType.LIST_FLAG, flag))
        self.static_lists: tuple[ListRef, ...] = tuple(refs)

    @property
    def lists(self) -> ListTable:
        """The list definitions and list values of the story."""
        return self._lists

    @property
    def num_containers(self) -> int:
        return len(self._visit_counts)

    # -- visit and turn counts --------------------------------------------

    def _count(self, container_id: int) -> _VisitCount:
        if not 0 <= container_id < len(self._visit_counts):
            raise InkError(f"container {container_id} out of range")
        return self._visit_counts[container_id]

    def visit(self, container_id: int) -> None:
        """Record a visit to a container and restart its turn count."""
        count = self._count(container_id)
        count.visits += 1
        count.turns = 0

    def visits(self, container_id: int) -> int:
        """Number of visits to a container."""
        return self._count(container_id).visits

    def turns(self, container_id: int) -> int:
        """Turns since the container was last visited, -1 if never visited."""
        return self._count(container_id).turns

    def turn(self) -> None:
        """Signal that a turn has passed (for example a choice was taken)."""
        for count in self._visit_counts:
            if count.turns != -1:
                count.turns += 1

    # -- variables --------------------------------------------------------

    def set_variable(self, name: Hashable, value: Value) -> None:
        self._variables[name] = value

    def get_variable(self, name: Hashable) -> Value | None:
        return self._variables.get(name)

    def _fetch(self, name: Hashable, ty: ValueType) -> Any:
        value = self._variables.get(name)
        if value is not None and value.type is ty:
            return value.data
        return None

    def _replace(self, name: Hashable, ty: ValueType, data: Any) -> bool:
        value = self._variables.get(name)
        if value is None or value.type is not ty:
            return False
        self._variables[name] = Value(ty, data)
        return True

    def get_int(self, name: Hashable) -> int | None:
        """Value of a signed integer variable, or None if absent or of another type."""
        return self._fetch(name, ValueType.INT32)

    def set_int(self, name: Hashable, value: int) -> bool:
        """Set an existing signed integer variable; False if that is not possible."""
        return self._replace(name, ValueType.INT32, int(value))

    def get_uint(self, name: Hashable) -> int | None:
        return self._fetch(name, ValueType.UINT32)

    def set_uint(self, name: Hashable, value: int) -> bool:
        if value < 0:
            raise ValueError("unsigned value can not be negative")
        return self._replace(name, ValueType.UINT32, int(value))

    def get_float(self, name: Hashable) -> float | None:
        return self._fetch(name, ValueType.FLOAT32)

    def set_float(self, name: Hashable, value: float) -> bool:
        return self._replace(name, ValueType.FLOAT32, float(value))

    def get_str(self, name: Hashable) -> str | None:
        return self._fetch(name, ValueType.STRING)

    def set_str(self, name: Hashable, value: str) -> bool:
        return self._replace(name, ValueType.STRING, str(value))

    # -- save points ------------------------------------------------------

    def save(self) -> None:
        """Remember the variables so that :meth:`restore` can return to them."""
        if self._saved is not None:
            raise InkError("Can not save over existing save point!")
        self._saved = dict(self._variables)

    def restore(self) -> None:
        """Return the variables to the last save point."""
        if self._saved is None:
            raise InkError("No save point to restore!")
        self._variables = self._saved
        self._saved = None

    def forget(self) -> None:
        """Drop the save point and keep the current variables."""
        if self._saved is None:
            raise InkError("No save point to forget!")
        self._saved = None