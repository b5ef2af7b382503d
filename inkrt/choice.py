"""Choices offered to the reader."""

from __future__ import annotations

from dataclasses import dataclass

from .output import OutputStream, _clean_string
from .values import ValueType


@dataclass(frozen=True)
class Choice:
    """A choice's text, its position, its target and the thread it came from."""

    text: str
    index: int
    path: int
    thread: int | None = None


def build_choice(
    stream: OutputStream, lists, index: int, path: int, thread: int | None
) -> Choice:
    """Take the choice text from ``stream`` (after its marker) and build a choice."""
    if stream.queued() == 2 and stream.peek().type is ValueType.STRING:
        text = stream.peek().data
        stream.discard(2)
    else:
        text = stream.get_alloc(lists)
    return Choice(_clean_string(text, True, True), index, path, thread)