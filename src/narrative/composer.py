"""Assemble slot selections into a short shift report.

The body is at most three sentences: an intro, a customers/peak sentence and
a crowd/best-seller sentence. Optional clauses are folded into an existing
sentence so they never push core content past the sentence limit; the
notice is rendered separately by the engine.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Mapping

from .guards import GuardContext
from .models import ServicePeriod
from .phrasebank import PeriodPhrases
from .sanitize import SENTENCE_END
from .variation import VariationEngine


CLAUSE_JOINER = "、"


def join_sentences(*chunks: str) -> str:
    return " ".join(chunk for chunk in chunks if chunk)


def merge_lead(lead: str, follow: str) -> str:
    """Run ``follow`` on from ``lead`` unless the lead already closed its sentence."""

    if not lead:
        return follow
    if lead.endswith(SENTENCE_END):
        return join_sentences(lead, follow)
    return f"{lead}{follow}"


def merge_summary(summary: str, detail: str) -> str:
    """``"A。"`` + ``"B。"`` -> ``"A、B。"``; either side may be empty."""

    if not detail:
        return summary
    if not summary:
        return detail
    return f"{summary.removesuffix(SENTENCE_END)}{CLAUSE_JOINER}{detail}"


def attach_extra(sentence: str, extra: str) -> str:
    """Fold an optional clause into ``sentence``.

    Lead-in clauses ending in a comma open the sentence, full clauses continue
    it after a comma, and asides such as ``"（物産展も入っていました）"`` go
    right before its full stop.
    """

    if not extra:
        return sentence
    if extra.endswith(CLAUSE_JOINER):
        return f"{extra}{sentence}" if sentence else ""
    if extra.endswith(SENTENCE_END):
        return merge_summary(sentence, extra)
    if sentence.endswith(SENTENCE_END):
        return f"{sentence.removesuffix(SENTENCE_END)}{extra}{SENTENCE_END}"
    return f"{sentence}{extra}"


def _extra(
    phrases: PeriodPhrases,
    ctx: GuardContext,
    engine: VariationEngine,
    fields: Mapping[str, str],
) -> str:
    if not phrases.extras:
        return ""
    chosen = engine.one_of(phrases.extras)
    if chosen is None:
        return ""
    return phrases.select(chosen, ctx, engine, fields)


def _closing(
    phrases: PeriodPhrases,
    ctx: GuardContext,
    engine: VariationEngine,
    fields: Mapping[str, str],
) -> str:
    summary = phrases.select("crowd_summary", ctx, engine, fields)
    sellers = phrases.select("best_sellers", ctx, engine, fields)
    return attach_extra(merge_summary(summary, sellers), _extra(phrases, ctx, engine, fields))


def compose_lunch(
    phrases: PeriodPhrases,
    ctx: GuardContext,
    engine: VariationEngine,
    fields: Mapping[str, str],
) -> str:
    lead = phrases.select("weather", ctx, engine, fields)
    ctx = replace(ctx, lead_closed=not lead or lead.endswith(SENTENCE_END))
    opening = phrases.select("opening", ctx, engine, fields)
    mid = phrases.select("customers", ctx, engine, fields) + phrases.select(
        "peak", ctx, engine, fields
    )
    if ctx.lead_closed:
        # a closed lead stands alone; the opening then heads the next sentence
        intro, mid = lead, opening + mid
    else:
        intro = merge_lead(lead, opening)

    return join_sentences(intro, mid, _closing(phrases, ctx, engine, fields))


def compose_dinner(
    phrases: PeriodPhrases,
    ctx: GuardContext,
    engine: VariationEngine,
    fields: Mapping[str, str],
    *,
    feel_detail_rate: float = 0.5,
) -> str:
    intro = phrases.select("opening", ctx, engine, fields) + phrases.select(
        "customers", ctx, engine, fields
    )

    mid = phrases.select("peak", ctx, engine, fields)
    if fields.get("feel") and engine.chance(feel_detail_rate):
        mid = attach_extra(mid, phrases.select("feel_detail", ctx, engine, fields))

    return join_sentences(intro, mid, _closing(phrases, ctx, engine, fields))


def compose_body(
    service: ServicePeriod,
    phrases: PeriodPhrases,
    ctx: GuardContext,
    engine: VariationEngine,
    fields: Mapping[str, str],
    *,
    feel_detail_rate: float = 0.5,
) -> str:
    if service is ServicePeriod.DINNER:
        return compose_dinner(phrases, ctx, engine, fields, feel_detail_rate=feel_detail_rate)
    return compose_lunch(phrases, ctx, engine, fields)


def notice_sentence(label: str, notice: str) -> str:
    return f"{label}{notice}" if notice else ""


__all__ = [
    "attach_extra",
    "compose_body",
    "compose_dinner",
    "compose_lunch",
    "join_sentences",
    "merge_lead",
    "merge_summary",
    "notice_sentence",
]
