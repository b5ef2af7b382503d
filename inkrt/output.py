"""The output stream: text and control values waiting to become lines."""

from __future__ import annotations

from typing import Iterable, Sequence

from .values import InkError, Value, ValueType


def _is_whitespace(text: str, include_newline: bool = True) -> bool:
    """Whether ``text`` holds only spaces (and newlines, if allowed)."""
    return all(c.isspace() and (include_newline or c != "\n") for c in text)


def _clean_string(text: str, leading: bool, trailing: bool) -> str:
    """Collapse runs of spaces and drop spaces that touch a newline.

    ``leading`` drops a space at the very start, ``trailing`` at the end.
    """
    out: list[str] = []
    for c in text:
        if c == "\n":
            if out and out[-1] == " ":
                out.pop()
            out.append(c)
        elif c.isspace():
            if out and out[-1] in (" ", "\n"):
                continue
            if not out and leading:
                continue
            out.append(" ")
        else:
            out.append(c)
    result = "".join(out)
    if trailing:
        result = result.rstrip(" ")
    return result


def _format_float(x: float) -> str:
    return f"{x:.7g}"


def _value_text(value: Value, lists) -> str:
    ty = value.type
    if ty is ValueType.STRING:
        return value.data
    if ty is ValueType.NEWLINE:
        return "\n"
    if ty in (ValueType.INT32, ValueType.UINT32):
        return str(int(value.data))
    if ty is ValueType.FLOAT32:
        return _format_float(value.data)
    if ty is ValueType.BOOLEAN:
        return "true" if value.data else "false"
    if ty in (ValueType.LIST, ValueType.LIST_FLAG):
        if lists is None:
            raise InkError("list definitions are needed to print a list")
        if ty is ValueType.LIST:
            return lists.list_str(value.data)
        return lists.flag_name(value.data) or ""
    raise InkError("cant convert expression to string!")


class OutputStream:
    """Collects output values and turns them into text on demand.

    Glue and function ends trim the whitespace and newlines before them;
    a marker splits off the part that the next extraction reads.
    """

    def __init__(self, max_size: int | None = None):
        self._data: list[Value] = []
        self._max = max_size
        self._save: int | None = None
        self._lists = None
        self._last_char: str | None = None

    @property
    def last_char(self) -> str | None:
        """Last character of the most recent extracted text."""
        return self._last_char

    @property
    def saved(self) -> bool:
        return self._save is not None

    def __len__(self) -> int:
        return len(self._data)

    def set_list_meta(self, lists) -> None:
        """Use ``lists`` to print list values in :meth:`get`."""
        self._lists = lists

    def append(self, value: Value) -> None:
        """Add one value, applying newline and glue trimming rules."""
        data = self._data
        if value.type is ValueType.NEWLINE:
            if len(data) > 1 and data[-1].type is ValueType.FUNC_START:
                return
            if not data:
                return
        if self._max is not None and len(data) >= self._max:
            raise InkError("Output stream overflow")
        data.append(value)

        if value.type in (ValueType.GLUE, ValueType.FUNC_END) and len(data) > 1:
            for i in range(len(data) - 2, -1, -1):
                d = data[i]
                if d.type is ValueType.NEWLINE or (
                    d.type is ValueType.STRING and _is_whitespace(d.data)
                ):
                    data[i] = Value()
                else:
                    break

    def extend(self, values: Iterable[Value]) -> None:
        for value in values:
            self.append(value)

    def _find_start(self) -> int:
        start = 0
        for i in range(len(self._data) - 1, -1, -1):
            if self._data[i].type is ValueType.MARKER:
                start = i
                break
        if self._save is not None and start < self._save:
            # Reading behind the save point invalidates the whole stream.
            self.clear()
            return 0
        return start

    def _kept(self, start: int) -> Iterable[Value]:
        has_glue = False
        last_newline = False
        for value in self._data[start:]:
            ty = value.type
            if value.printable() and ty not in (ValueType.NEWLINE, ValueType.STRING):
                last_newline = False
                has_glue = False
            elif ty is ValueType.NEWLINE:
                if last_newline or has_glue:
                    continue
                last_newline = True
            elif ty is ValueType.GLUE:
                has_glue = True
            elif ty is ValueType.STRING:
                last_newline = False
                # an empty string does not end glue
                if not _is_whitespace(value.data):
                    has_glue = False
            if value.printable():
                yield value

    def queued(self) -> int:
        """Number of entries the next extraction will consume."""
        return len(self._data) - self._find_start()

    def peek(self) -> Value:
        if not self._data:
            raise InkError("Attempting to peek empty stream!")
        return self._data[-1]

    def discard(self, length: int) -> None:
        """Drop the last ``length`` entries."""
        if length <= 0:
            return
        del self._data[max(0, len(self._data) - length):]

    def get_values(self) -> list[Value]:
        """Extract the printable values after the last marker."""
        start = self._find_start()
        values = list(self._kept(start))
        del self._data[start:]
        return values

    def get(self) -> str:
        """Extract the text after the last marker, without a trailing space."""
        start = self._find_start()
        text = "".join(_value_text(v, self._lists) for v in self._kept(start))
        del self._data[start:]
        result = _clean_string(text, True, False)
        self._last_char = result[-1] if result else None
        if self._last_char == " ":
            result = result[:-1]
        return result

    def get_alloc(self, lists=None, remove_tail: bool = True) -> str:
        """Extract the text after the last marker using ``lists`` for lists.

        Booleans cannot be converted here and raise :class:`InkError`.
        """
        start = self._find_start()
        parts: list[str] = []
        for value in self._kept(start):
            if value.type is ValueType.BOOLEAN:
                raise InkError("cant convert expression to string!")
            parts.append(_value_text(value, lists))
        del self._data[start:]
        result = _clean_string("".join(parts), False, False)
        self._last_char = result[-1] if result else None
        if remove_tail and self._last_char == " ":
            result = result[:-1]
        return result

    def is_empty(self) -> bool:
        return not self._data

    def has_marker(self) -> bool:
        return any(v.type is ValueType.MARKER for v in self._data)

    def ends_with(self, value_type: ValueType) -> bool:
        return bool(self._data) and self._data[-1].type is value_type

    def saved_ends_with(self, value_type: ValueType) -> bool:
        """Whether the last entry at the time of :meth:`save` had this type."""
        if self._save is None:
            raise InkError("Stream is not saved!")
        if self._save == 0:
            return False
        return self._data[self._save - 1].type is value_type

    def text_past_save(self) -> bool:
        """Whether non-whitespace text was added after the save point."""
        if self._save is None:
            return False
        return any(
            v.type is ValueType.STRING and not _is_whitespace(v.data, False)
            for v in self._data[self._save:]
        )

    def clear(self) -> None:
        self._save = None
        self._data.clear()

    def save(self) -> None:
        if self._save is not None:
            raise InkError("Can not save over existing save point!")
        self._save = len(self._data)

    def restore(self) -> None:
        if self._save is None:
            raise InkError("No save point to restore!")
        del self._data[self._save:]
        self._save = None

    def forget(self) -> None:
        if self._save is None:
            raise InkError("No save point to forget!")
        self._save = None