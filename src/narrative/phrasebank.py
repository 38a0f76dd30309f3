from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from string import Formatter
from typing import Mapping, Optional, Sequence

from .guards import GuardContext, guards_hold, unknown_guards
from .settings import DEFAULT_PHRASEBANK_PATH
from .variation import VariationEngine, VariationItem


logger = logging.getLogger(__name__)

PLACEHOLDERS: frozenset[str] = frozenset(
    {"weather", "customers", "peak", "peak_start", "best_sellers", "feel", "event", "notice"}
)


class PhrasebankError(ValueError):
    """Raised when the phrase table is structurally invalid."""


@dataclass(frozen=True)
class PhraseVariant(VariationItem):
    when: tuple[str, ...] = ()

    def applies(self, ctx: GuardContext) -> bool:
        return guards_hold(self.when, ctx)


@dataclass(frozen=True)
class PhraseSlot:
    name: str
    variants: tuple[PhraseVariant, ...]

    def eligible(self, ctx: GuardContext) -> tuple[PhraseVariant, ...]:
        return tuple(variant for variant in self.variants if variant.applies(ctx))


class _FormatTokens(dict):
    def __missing__(self, key: str) -> str:
        return ""


@dataclass(frozen=True)
class PeriodPhrases:
    service: str
    slots: Mapping[str, PhraseSlot]
    extras: tuple[Optional[str], ...] = ()
    strip_closing_terms: bool = False

    def select(
        self,
        slot: str,
        ctx: GuardContext,
        engine: VariationEngine,
        fields: Mapping[str, str],
    ) -> str:
        """Draw one eligible variant for ``slot``; an empty pool renders as ``""``."""

        pool = self.slots.get(slot)
        if pool is None:
            return ""
        eligible = pool.eligible(ctx)
        if not eligible:
            logger.debug("phrase_slot_empty", extra={"service": self.service, "slot": slot})
            return ""
        variant = engine.weighted_choice(eligible)
        if variant is None:
            return ""
        return variant.text.format_map(_FormatTokens(fields))


@dataclass(frozen=True)
class Phrasebank:
    version: str
    periods: Mapping[str, PeriodPhrases]
    crowd_keywords: Mapping[str, tuple[str, ...]]
    forbidden: tuple[str, ...]
    closing_terms: tuple[str, ...]
    notice_label: str
    labels: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def for_service(self, service: str) -> PeriodPhrases:
        key = getattr(service, "value", service)
        try:
            return self.periods[str(key)]
        except KeyError as exc:
            raise PhrasebankError(f"no phrases for service period '{key}'") from exc


def _placeholders(text: str) -> set[str]:
    try:
        return {name for _, name, _, _ in Formatter().parse(text) if name}
    except ValueError as exc:
        raise PhrasebankError(f"malformed template {text!r}") from exc


def _parse_variant(slot: str, raw: object, forbidden: Sequence[str]) -> PhraseVariant:
    if isinstance(raw, str):
        raw = {"text": raw}
    if not isinstance(raw, Mapping):
        raise PhrasebankError(f"slot '{slot}' has a non-object variant")
    text = str(raw.get("text") or "").strip()
    if not text:
        raise PhrasebankError(f"slot '{slot}' has an empty variant")
    when = tuple(str(name) for name in (raw.get("when") or ()))
    missing = unknown_guards(when)
    if missing:
        raise PhrasebankError(f"slot '{slot}' uses unknown guards {missing}")
    extra = _placeholders(text) - PLACEHOLDERS
    if extra:
        raise PhrasebankError(f"slot '{slot}' uses unknown placeholders {sorted(extra)}")
    for term in forbidden:
        if term in text:
            raise PhrasebankError(f"slot '{slot}' variant contains forbidden term {term!r}")
    try:
        weight = float(raw.get("weight", 1))
    except (TypeError, ValueError):
        weight = 1.0
    return PhraseVariant(text=text, weight=weight, when=when)


def _parse_period(service: str, raw: Mapping[str, object], forbidden: Sequence[str]) -> PeriodPhrases:
    slots: dict[str, PhraseSlot] = {}
    for name, variants in (raw.get("slots") or {}).items():
        slots[str(name)] = PhraseSlot(
            name=str(name),
            variants=tuple(_parse_variant(str(name), item, forbidden) for item in variants),
        )
    extras = tuple(None if item is None else str(item) for item in (raw.get("extras") or ()))
    for extra in extras:
        if extra is not None and extra not in slots:
            raise PhrasebankError(f"period '{service}' lists unknown extra slot '{extra}'")
    return PeriodPhrases(
        service=service,
        slots=slots,
        extras=extras,
        strip_closing_terms=bool(raw.get("strip_closing_terms", False)),
    )


def _parse_keywords(raw: Mapping[str, object]) -> dict[str, tuple[str, ...]]:
    keywords: dict[str, tuple[str, ...]] = {}
    for level, patterns in raw.items():
        parsed = tuple(str(pattern) for pattern in patterns)
        for pattern in parsed:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise PhrasebankError(f"crowd keyword {pattern!r} ({level}) does not compile: {exc}") from exc
        keywords[str(level)] = parsed
    return keywords


def parse_phrasebank(payload: Mapping[str, object]) -> Phrasebank:
    forbidden = tuple(str(term) for term in (payload.get("forbidden") or ()) if str(term))
    periods = {
        str(service): _parse_period(str(service), config, forbidden)
        for service, config in (payload.get("periods") or {}).items()
    }
    if not periods:
        raise PhrasebankError("phrasebank defines no service periods")
    keywords = payload.get("crowd_keywords") or {}
    return Phrasebank(
        version=str(payload.get("version", "0")),
        periods=periods,
        crowd_keywords=_parse_keywords(keywords),
        forbidden=forbidden,
        closing_terms=tuple(str(term) for term in (payload.get("closing_terms") or ())),
        notice_label=str(payload.get("notice_label", "")),
        labels={
            str(name): tuple(str(item) for item in items)
            for name, items in (payload.get("labels") or {}).items()
        },
    )


@lru_cache(maxsize=4)
def load_phrasebank(path: Path = DEFAULT_PHRASEBANK_PATH) -> Phrasebank:
    with Path(path).open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    bank = parse_phrasebank(payload)
    logger.info(
        "phrasebank_loaded",
        extra={"path": str(path), "version": bank.version, "periods": sorted(bank.periods)},
    )
    return bank


__all__ = [
    "PLACEHOLDERS",
    "PeriodPhrases",
    "PhraseSlot",
    "PhraseVariant",
    "Phrasebank",
    "PhrasebankError",
    "load_phrasebank",
    "parse_phrasebank",
]
