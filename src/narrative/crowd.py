"""Map free-text crowd impressions ("満席", "9割", "calm") to a crowd level.

This is the only place busyness is inferred; every crowd-dependent phrase is
gated on the level returned here.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Mapping, Sequence

from .models import CrowdLevel
from .text import normalize_text


_ORDER: tuple[CrowdLevel, ...] = (CrowdLevel.BUSY, CrowdLevel.QUIET)


@lru_cache(maxsize=8)
def _compile(patterns: tuple[str, ...]) -> re.Pattern[str] | None:
    if not patterns:
        return None
    return re.compile("|".join(f"(?:{pattern})" for pattern in patterns), re.IGNORECASE)


def _default_keywords() -> Mapping[str, Sequence[str]]:
    from .phrasebank import load_phrasebank

    return load_phrasebank().crowd_keywords


def classify(feel_text: str, keywords: Mapping[str, Sequence[str]] | None = None) -> CrowdLevel:
    text = normalize_text(feel_text)
    if not text:
        return CrowdLevel.NORMAL
    table = keywords if keywords is not None else _default_keywords()
    for level in _ORDER:
        pattern = _compile(tuple(table.get(level.value, ())))
        if pattern is not None and pattern.search(text):
            return level
    return CrowdLevel.NORMAL


__all__ = ["classify"]
