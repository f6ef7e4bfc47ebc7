from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Token:
    text: str
    start: int
    end: int


def is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def iter_words(text: str) -> Iterator[Token]:
    """Whitespace-delimited words with their character offsets."""
    start = None
    for i, ch in enumerate(text):
        if ch.isspace():
            if start is not None:
                yield Token(text[start:i], start, i)
                start = None
        elif start is None:
            start = i
    if start is not None:
        yield Token(text[start:], start, len(text))


def words(text: str) -> list[str]:
    return [t.text for t in iter_words(text)]


def _bounded(text: str, start: int, end: int, label: str) -> bool:
    # Only an edge of the label that is itself a word character needs a
    # boundary; "Art" must not match inside "Article" or "Bart".
    if is_word_char(label[0]) and start > 0 and is_word_char(text[start - 1]):
        return False
    if is_word_char(label[-1]) and end < len(text) and is_word_char(text[end]):
        return False
    return True


def find_label(text: str, label: str) -> list[tuple[int, int]]:
    """Non-overlapping whole-word spans of `label` in `text`, left to right.

    Matching is exact and case-sensitive.
    """
    spans: list[tuple[int, int]] = []
    if not label or not text:
        return spans
    pos = text.find(label)
    while pos != -1:
        end = pos + len(label)
        if _bounded(text, pos, end, label):
            spans.append((pos, end))
            pos = text.find(label, end)
        else:
            pos = text.find(label, pos + 1)
    return spans


def split_on_label(text: str, label: str) -> list[tuple[str, bool]]:
    """Cut `text` into (segment, is_label) pieces around whole-word matches.

    Empty segments are dropped, so joining the pieces gives back `text`.
    """
    pieces: list[tuple[str, bool]] = []
    cursor = 0
    for start, end in find_label(text, label):
        if start > cursor:
            pieces.append((text[cursor:start], False))
        pieces.append((text[start:end], True))
        cursor = end
    if cursor < len(text):
        pieces.append((text[cursor:], False))
    return pieces
