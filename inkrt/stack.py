"""Call stack with temporary variables and threads, and the evaluation stack."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Hashable

from .values import InkError, Value, ValueType


class FrameType(Enum):
    """Kind of call frame pushed onto a :class:`CallStack`."""

    FUNCTION = auto()
    TUNNEL = auto()
    THREAD = auto()


_FRAME_VALUE = {
    FrameType.FUNCTION: ValueType.FUNCTION_FRAME,
    FrameType.TUNNEL: ValueType.TUNNEL_FRAME,
    FrameType.THREAD: ValueType.THREAD_FRAME,
}
_VALUE_FRAME = {v: k for k, v in _FRAME_VALUE.items()}

_JUMPERS = (ValueType.THREAD_START, ValueType.JUMP_MARKER)


@dataclass(frozen=True)
class _ThreadMark:
    """Payload of thread starts and jump markers.

    ``thread`` identifies the thread; ``jump`` counts the entries below the
    marker that it hides from lookups.
    """

    thread: int
    jump: int


@dataclass
class Entry:
    """One stack slot: a named variable, or a marker when ``name`` is None."""

    name: Hashable | None
    data: Value


def _frame_type(value_type: ValueType) -> FrameType:
    try:
        return _VALUE_FRAME[value_type]
    except KeyError:
        raise InkError("Unknown frame type detected") from None


class _Finder:
    """Reverse search for a variable that stops at the current frame boundary."""

    def __init__(self, name: Hashable):
        self.name = name
        self.skip: int | None = None
        self.jumping = 0

    def __call__(self, e: Entry) -> bool:
        if self.jumping > 0:
            self.jumping -= 1
            return False
        if self.skip is None and e.data.type is ValueType.THREAD_END:
            self.skip = e.data.data
        if self.skip is not None:
            if e.data.type is ValueType.THREAD_START and e.data.data.thread == self.skip:
                self.skip = None
            return False
        if e.name is None and e.data.type in _JUMPERS:
            jump = e.data.data.jump
            if jump > 0:
                self.jumping = jump
                return False
        return e.name is None or e.name == self.name


class _FrameFinder:
    """Reverse search for a variable in the current (0) or calling (-1) frame."""

    def __init__(self, ci: int, name: Hashable):
        if ci not in (-1, 0):
            raise InkError("only support ci == -1, for now!")
        self.ci = ci
        self.current = 0
        self.finder = _Finder(name)

    def __call__(self, e: Entry) -> bool:
        if self.finder(e):
            if self.ci == self.current:
                return True
            self.current -= 1
        return False


class CallStack:
    """Temporary variables, call frames and thread blocks, with save points."""

    def __init__(self) -> None:
        self._entries: list[Entry] = []
        self._next_thread = 0
        self._saved: tuple[list[Entry], int] | None = None

    def __len__(self) -> int:
        return len(self._entries)

    def _find(self, predicate) -> Entry | None:
        for e in reversed(self._entries):
            if predicate(e):
                return e
        return None

    def _add(self, name: Hashable | None, value: Value) -> Entry:
        entry = Entry(name, value)
        self._entries.append(entry)
        return entry

    def _pop(self) -> Entry:
        if not self._entries:
            raise InkError("Can not pop. No elements to pop!")
        return self._entries.pop()

    def set(self, name: Hashable, value: Value) -> None:
        """Set a variable of the current frame, creating it if needed."""
        if name is None:
            raise InkError("variables need a name")
        found = self._find(_Finder(name))
        if found is not None and found.name == name:
            found.data = value
        else:
            self._add(name, value)

    def get(self, name: Hashable) -> Value | None:
        """Value of a variable in the current frame, or None."""
        found = self._find(_Finder(name))
        if found is not None and found.name == name:
            return found.data
        return None

    def get_from_frame(self, ci: int, name: Hashable) -> Value | None:
        """Value of a variable in the current (``ci == 0``) or calling (``-1``) frame."""
        found = self._find(_FrameFinder(ci, name))
        if found is None and ci == -1:
            found = self._find(_FrameFinder(0, name))
        if found is not None and found.name == name:
            return found.data
        return None

    def push_frame(self, frame_type: FrameType, return_to: int, eval_mode: bool) -> None:
        """Open a frame that returns to ``return_to`` with the given eval mode."""
        self._add(None, Value(_FRAME_VALUE[frame_type], (return_to, eval_mode)))

    def _thread_jump_pop(self, start: int) -> Entry | None:
        entries = self._entries
        marker = entries[start]
        kind = marker.data.type
        mark: _ThreadMark = marker.data.data
        jump = mark.jump
        i = start - 1 - mark.jump
        while i >= 0 and (
            entries[i].name is not None
            or entries[i].data.type in (ValueType.THREAD_START, ValueType.THREAD_END)
        ):
            e = entries[i]
            if e.data.type is ValueType.THREAD_END:
                tid = e.data.data
                while not (
                    entries[i].data.type is ValueType.THREAD_START
                    and entries[i].data.data.thread == tid
                ):
                    jump += 1
                    i -= 1
                    if i < 0:
                        raise InkError("thread end without matching thread start")
            i -= 1
            jump += 1
        jump += 1
        if kind not in _JUMPERS:
            raise InkError("unknown jump type")
        marker.data = Value(kind, replace(mark, jump=jump))
        return entries[i] if i >= 0 else None

    def pop_frame(self) -> tuple[FrameType, int, bool]:
        """Leave the top frame; return its type, return address and eval mode."""
        if not self._entries:
            raise InkError("Can not pop frame from empty callstack.")
        returned: Entry | None = None
        while self._entries:
            top = self._entries[-1]
            if top.name is not None:
                self._pop()
                continue
            kind = top.data.type
            if kind is ValueType.THREAD_END:
                self._add(None, Value(ValueType.JUMP_MARKER, _ThreadMark(0, 0)))
                returned = self._thread_jump_pop(len(self._entries) - 1)
            elif kind in _JUMPERS:
                returned = self._thread_jump_pop(len(self._entries) - 1)
            else:
                returned = self._pop()
            break
        if returned is None:
            raise InkError("Attempting to pop_frame when no frames exist!")
        if returned.data.type in (ValueType.THREAD_START, ValueType.THREAD_END):
            raise InkError("Can not return from a thread!")
        frame_type = _frame_type(returned.data.type)
        return_to, eval_mode = returned.data.data
        return frame_type, return_to, eval_mode

    def has_frame(self) -> FrameType | None:
        """Type of the innermost visible frame, or None if there is none."""
        jumping = 0
        thread: int | None = None
        for e in reversed(self._entries):
            if jumping > 0:
                jumping -= 1
                continue
            if e.name is not None:
                continue
            kind = e.data.type
            if thread is not None:
                if kind is ValueType.THREAD_START and e.data.data.thread == thread:
                    thread = None
                continue
            if kind in _JUMPERS:
                jumping = e.data.data.jump
                continue
            if kind is ValueType.THREAD_END:
                thread = e.data.data
                continue
            return _frame_type(kind)
        return None

    def clear(self) -> None:
        self._entries.clear()
        self._saved = None

    def fork_thread(self) -> int:
        """Start a new thread block here and return its id."""
        thread = self._next_thread
        self._next_thread += 1
        self._add(None, Value(ValueType.THREAD_START, _ThreadMark(thread, 0)))
        return thread

    def complete_thread(self, thread: int) -> None:
        """Close the block of ``thread``; it stays until collapsed."""
        self._add(None, Value(ValueType.THREAD_END, thread))

    def collapse_to_thread(self, thread: int | None) -> None:
        """Keep only the call stack of ``thread`` (None for the main thread)."""
        self._next_thread = 0
        if thread is not None:
            top = self._pop()
            while not (top.data.type is ValueType.THREAD_END and top.data.data == thread):
                if not self._entries:
                    raise InkError(
                        "Ran out of stack while searching for end of thread marker."
                    )
                top = self._pop()

        nulling: int | None = None
        jumping = 0
        kept: list[Entry] = []
        for e in reversed(self._entries):
            if jumping > 0:
                jumping -= 1
                continue
            kind = e.data.type
            if nulling is None and kind is ValueType.THREAD_END and e.name is None:
                nulling = e.data.data
            if nulling is not None:
                if (
                    e.name is None
                    and kind is ValueType.THREAD_START
                    and e.data.data.thread == nulling
                ):
                    nulling = None
                continue
            if e.name is None and kind in _JUMPERS:
                jumping = e.data.data.jump
                continue
            if e.name is None and kind is ValueType.THREAD_FRAME:
                continue
            kept.append(e)
        kept.reverse()
        self._entries = kept
        self._next_thread = 0

    def save(self) -> None:
        if self._saved is not None:
            raise InkError("Can not save over existing save point!")
        snapshot = [Entry(e.name, e.data) for e in self._entries]
        self._saved = (snapshot, self._next_thread)

    def restore(self) -> None:
        if self._saved is None:
            raise InkError("No save point to restore!")
        self._entries, self._next_thread = self._saved
        self._saved = None

    def forget(self) -> None:
        if self._saved is None:
            raise InkError("No save point to forget!")
        self._saved = None

    def fetch_values(self, other: CallStack) -> None:
        """Copy values of referenced variables in ``other`` into this stack.

        Each pointer entry of the current frame names a variable of ``other``
        by its own name and a target by the pointer's name.
        """
        for e in list(reversed(self._entries)):
            if e.name is None:
                break
            if e.data.type is not ValueType.VALUE_POINTER:
                continue
            name, ci = e.data.data
            if ci == 0:
                raise InkError("Global refs should not exists on ref stack!")
            if ci != -1:
                raise InkError("only support ci = -1 for now!")
            value = other.get(e.name)
            if value is None:
                raise InkError(f"referenced variable {e.name!r} not found")
            self.set(name, value)

    def push_values(self, other: CallStack) -> None:
        """Write this frame's plain values into ``other``, stopping at a pointer."""
        for e in list(reversed(self._entries)):
            if e.name is None or e.data.type is ValueType.VALUE_POINTER:
                break
            other.set(e.name, e.data)


class EvalStack:
    """Stack of values for expression evaluation, with save points.

    Values of type ``NONE`` are treated as empty slots by :meth:`pop` and
    :meth:`top_value`.
    """

    def __init__(self) -> None:
        self._values: list[Value] = []
        self._saved: list[Value] | None = None

    def __len__(self) -> int:
        return len(self._values)

    def push(self, value: Value) -> None:
        self._values.append(value)

    def pop(self) -> Value:
        """Remove and return the top value, passing over empty slots."""
        while self._values and self._values[-1].type is ValueType.NONE:
            self._values.pop()
        if not self._values:
            raise InkError("Can not pop. No elements to pop!")
        return self._values.pop()

    def top(self) -> Value:
        if not self._values:
            raise InkError("Stack is empty!")
        return self._values[-1]

    def top_value(self) -> Value:
        """Top value that is not an empty slot."""
        for value in reversed(self._values):
            if value.type is not ValueType.NONE:
                return value
        raise InkError("Stack holds no value!")

    def is_empty(self) -> bool:
        return not self._values

    def clear(self) -> None:
        self._values.clear()
        self._saved = None

    def save(self) -> None:
        if self._saved is not None:
            raise InkError("Can not save over existing save point!")
        self._saved = list(self._values)

    def restore(self) -> None:
        if self._saved is None:
            raise InkError("No save point to restore!")
        self._values = self._saved
        self._saved = None

    def forget(self) -> None:
        if self._saved is None:
            raise InkError("No save point to forget!")
        self._saved = None