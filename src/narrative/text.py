from __future__ import annotations

import re
from typing import Iterable, Sequence


_WHITESPACE = re.compile(r"\s+")
_DELIMITERS = re.compile(r"[,、，]")

PAIR_CONNECTIVE = "や"
LIST_SEPARATOR = "、"
LIST_TAIL = "など"
ITEM_PAIR_JOINER = "と"


def normalize_text(value: object) -> str:
    """Collapse whitespace runs to a single space and trim both ends."""

    if value is None:
        return ""
    return _WHITESPACE.sub(" ", str(value)).strip()


def is_blank(value: object) -> bool:
    return len(normalize_text(value)) == 0


def dedupe(items: Iterable[object]) -> list[str]:
    """Normalize, drop empties and keep the first occurrence of each item."""

    seen: set[str] = set()
    unique: list[str] = []
    for item in items:
        text = normalize_text(item)
        if not text or text in seen:
            continue
        seen.add(text)
        unique.append(text)
    return unique


def split_delimited(value: object) -> list[str]:
    text = normalize_text(value)
    if not text:
        return []
    pieces = (normalize_text(piece) for piece in _DELIMITERS.split(text))
    return [piece for piece in pieces if piece]


def merge_tags(tags: Iterable[object], free_text: object = "") -> list[str]:
    """Selected tags first, then free-text pieces, deduplicated in order."""

    return dedupe([*tags, *split_delimited(free_text)])


def join_natural(items: Sequence[object]) -> str:
    values = dedupe(items)
    if not values:
        return ""
    if len(values) == 1:
        return values[0]
    if len(values) == 2:
        return f"{values[0]}{PAIR_CONNECTIVE}{values[1]}"
    return f"{LIST_SEPARATOR.join(values)}{LIST_TAIL}"


def pair_items(items: Sequence[object]) -> str:
    """Foreground the first two survivors, e.g. for best sellers."""

    values = dedupe(items)[:2]
    return ITEM_PAIR_JOINER.join(values)


__all__ = [
    "dedupe",
    "is_blank",
    "join_natural",
    "merge_tags",
    "normalize_text",
    "pair_items",
    "split_delimited",
]
