"""Render peak-time ranges such as ``12-14`` or ``12:30-14:00`` as phrases."""

from __future__ import annotations

import re

from .text import normalize_text


_RANGE_SEPARATOR = re.compile(r"[-~〜～–—]")
_CLOCK_SEPARATOR = re.compile(r"[:：]")

HOUR_SUFFIX = "時"
MINUTE_SUFFIX = "分"
RANGE_JOINER = "から"


def _parse_number(token: str) -> int | None:
    try:
        return int(token.strip())
    except ValueError:
        return None


def _format_token(token: str) -> str | None:
    token = token.strip()
    if not token:
        return None
    if _CLOCK_SEPARATOR.search(token):
        hour_raw, minute_raw = _CLOCK_SEPARATOR.split(token, maxsplit=1)
        hour = _parse_number(hour_raw)
        minute = _parse_number(minute_raw)
        if hour is None or minute is None:
            return None
        if minute == 0:
            return f"{hour}{HOUR_SUFFIX}"
        return f"{hour}{HOUR_SUFFIX}{minute}{MINUTE_SUFFIX}"
    hour = _parse_number(token)
    if hour is None:
        return None
    return f"{hour}{HOUR_SUFFIX}"


def _split_range(text: str) -> tuple[str, str] | None:
    if not _RANGE_SEPARATOR.search(text):
        return None
    start, end = _RANGE_SEPARATOR.split(text, maxsplit=1)
    return start.strip(), end.strip()


def format_range(raw: str) -> str:
    """``"12-14"`` -> ``"12時から14時"``; anything unparseable is returned as is."""

    text = normalize_text(raw)
    parts = _split_range(text)
    if parts is None:
        return text
    start = _format_token(parts[0])
    end = _format_token(parts[1])
    if not start or not end:
        return text
    return f"{start}{RANGE_JOINER}{end}"


def format_start(raw: str) -> str:
    """Only the opening of the range, for "from X onward" phrasing."""

    text = normalize_text(raw)
    parts = _split_range(text)
    token = parts[0] if parts is not None else text
    rendered = _format_token(token)
    return rendered or text


def parse_start_hour(raw: str) -> int | None:
    text = normalize_text(raw)
    parts = _split_range(text)
    start = parts[0] if parts is not None else text
    hour_raw = _CLOCK_SEPARATOR.split(start, maxsplit=1)[0]
    if not hour_raw.strip():
        return None
    return _parse_number(hour_raw)


__all__ = ["format_range", "format_start", "parse_start_hour"]
