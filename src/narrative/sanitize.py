from __future__ import annotations

import re
from typing import Iterable


SENTENCE_END = "。"

_DOUBLE_COMMA = re.compile(r"、{2,}")
_DOUBLE_STOP = re.compile(r"。{2,}")
_COMMA_DE_COMMA = re.compile(r"、で、")
_WHITESPACE = re.compile(r"\s+")


def _collapse(text: str) -> str:
    text = _DOUBLE_COMMA.sub("、", text)
    text = _DOUBLE_STOP.sub(SENTENCE_END, text)
    return _WHITESPACE.sub(" ", text).strip()


def strip_terms(text: str, terms: Iterable[str]) -> str:
    """Remove every occurrence of each term; punctuation is not touched."""

    result = text or ""
    for term in terms:
        if term:
            result = result.replace(term, "")
    return result


def strip_forbidden(text: str, forbidden: Iterable[str]) -> str:
    return _collapse(strip_terms(text, forbidden))


def polish(text: str, forbidden: Iterable[str] = ()) -> str:
    result = strip_forbidden(text, forbidden)
    result = _COMMA_DE_COMMA.sub("、", result)
    return _collapse(result)


def split_sentences(text: str) -> list[str]:
    return [part.strip() for part in (text or "").split(SENTENCE_END) if part.strip()]


def clamp_sentences(text: str, max_sentences: int = 3) -> str:
    """Keep at most ``max_sentences`` sentences; within bounds the text is unchanged."""

    max_sentences = max(int(max_sentences), 1)
    stripped = (text or "").strip()
    fragments = split_sentences(stripped)
    if len(fragments) <= max_sentences:
        if stripped.count(SENTENCE_END) <= max_sentences:
            return stripped
        tail = SENTENCE_END if stripped.endswith(SENTENCE_END) else ""
        return f"{SENTENCE_END} ".join(fragments) + tail
    return f"{SENTENCE_END} ".join(fragments[:max_sentences]) + SENTENCE_END


def single_sentence(text: str) -> str:
    """Fold every inner full stop into a comma so ``text`` reads as one sentence."""

    stripped = (text or "").strip()
    fragments = split_sentences(stripped)
    if not fragments:
        return ""
    tail = SENTENCE_END if stripped.endswith(SENTENCE_END) else ""
    return _collapse("、".join(fragments) + tail)


__all__ = [
    "SENTENCE_END",
    "clamp_sentences",
    "polish",
    "single_sentence",
    "split_sentences",
    "strip_forbidden",
    "strip_terms",
]
