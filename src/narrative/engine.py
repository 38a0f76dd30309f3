from __future__ import annotations

import logging

from .composer import compose_body, join_sentences, notice_sentence
from .crowd import classify
from .guards import GuardContext
from .models import ObservationRecord, ServicePeriod, ShiftReport
from .phrasebank import Phrasebank, load_phrasebank
from .sanitize import (
    clamp_sentences,
    polish,
    single_sentence,
    split_sentences,
    strip_forbidden,
    strip_terms,
)
from .settings import NarrativeSettings, load_settings
from .text import join_natural, normalize_text, pair_items
from .timefmt import format_range, format_start, parse_start_hour
from .variation import RandomSource, VariationEngine


logger = logging.getLogger(__name__)


def _fields(record: ObservationRecord) -> dict[str, str]:
    return {
        "weather": normalize_text(record.weather),
        "customers": join_natural(record.customers()),
        "peak": format_range(record.peak_range),
        "peak_start": format_start(record.peak_range),
        "best_sellers": pair_items(record.best_sellers()),
        "feel": normalize_text(record.crowd_feel),
        "event": record.event(),
        "notice": normalize_text(record.notice),
    }


def generate_report(
    record: ObservationRecord,
    rng: RandomSource | None = None,
    *,
    settings: NarrativeSettings | None = None,
    phrasebank: Phrasebank | None = None,
) -> ShiftReport:
    settings = settings or load_settings()
    bank = phrasebank or load_phrasebank(settings.phrasebank_path)
    service = ServicePeriod(record.service)
    phrases = bank.for_service(service)
    engine = VariationEngine(rng)

    crowd = classify(record.crowd_feel, bank.crowd_keywords)
    ctx = GuardContext(
        record=record,
        crowd=crowd,
        start_hour=parse_start_hour(record.peak_range),
        gentle_start_hour=settings.gentle_start_hour,
    )
    fields = _fields(record)

    body = compose_body(
        service, phrases, ctx, engine, fields, feel_detail_rate=settings.feel_detail_rate
    )
    if phrases.strip_closing_terms:
        body = strip_terms(body, bank.closing_terms)
    body = polish(clamp_sentences(polish(body, bank.forbidden), settings.max_sentences))
    notice = phrases.select("notice", ctx, engine, fields)
    if phrases.strip_closing_terms:
        notice = strip_terms(notice, bank.closing_terms)
    notice = single_sentence(strip_forbidden(notice, bank.forbidden)).lstrip("、 ")
    text = join_sentences(body, notice_sentence(bank.notice_label, notice))

    report = ShiftReport(text=text, crowd_level=crowd, sentence_count=len(split_sentences(text)))
    logger.debug(
        "shift_report_generated",
        extra={"service": service.value, "crowd": crowd.value, "sentences": report.sentence_count},
    )
    return report


def generate(
    record: ObservationRecord,
    rng: RandomSource | None = None,
    *,
    settings: NarrativeSettings | None = None,
) -> str:
    """Render ``record`` as a short report; the same draws always give the same text."""

    return generate_report(record, rng, settings=settings).text


__all__ = ["generate", "generate_report"]
