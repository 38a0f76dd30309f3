"""Caller side of the narrative engine: merge form fields, validate, generate."""

from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Mapping

from src.narrative.engine import generate_report
from src.narrative.models import ObservationRecord, ServicePeriod
from src.narrative.phrasebank import load_phrasebank
from src.narrative.settings import NarrativeSettings, load_settings
from src.narrative.text import is_blank, merge_tags

logger = logging.getLogger(__name__)

_SEED_LIMIT = 2**31 - 1

# Messages shown to the person filling in the form, keyed by required field.
_REQUIRED_MESSAGES = {
    "weather": "天気は必須",
    "customers": "客層は必須",
    "peak": "ピーク時間は必須",
    "best_sellers": "売れ筋は必須",
}
_LUNCH_WEATHER_MESSAGE = "ランチは天気が必須"


def merge_inputs(data: Mapping[str, Any]) -> Dict[str, List[str]]:
    return {
        "customers": merge_tags(data.get("customers") or [], data.get("customers_free") or ""),
        "best_sellers": merge_tags(data.get("hits") or [], data.get("hits_free") or ""),
    }


def validate_request(data: Mapping[str, Any], settings: NarrativeSettings | None = None) -> List[str]:
    """Return validation messages; an empty list means the record can be generated."""

    settings = settings or load_settings()
    service = str(data.get("service") or "lunch")
    merged = merge_inputs(data)
    present = {
        "weather": not is_blank(data.get("weather")),
        "customers": bool(merged["customers"]),
        "peak": not is_blank(data.get("peak")),
        "best_sellers": bool(merged["best_sellers"]),
    }
    errors: List[str] = []
    for name in settings.required_fields(service):
        if present.get(name, True):
            continue
        if name == "weather" and service == "lunch":
            errors.append(_LUNCH_WEATHER_MESSAGE)
        else:
            errors.append(_REQUIRED_MESSAGES.get(name, f"{name}は必須"))
    return errors


def build_record(data: Mapping[str, Any]) -> ObservationRecord:
    return ObservationRecord(
        service=ServicePeriod(str(data.get("service") or "lunch")),
        weather=str(data.get("weather") or ""),
        customer_tags=tuple(data.get("customers") or ()),
        customer_free_text=str(data.get("customers_free") or ""),
        peak_range=str(data.get("peak") or ""),
        crowd_feel=str(data.get("seat_feel") or ""),
        best_seller_tags=tuple(data.get("hits") or ()),
        best_seller_free_text=str(data.get("hits_free") or ""),
        event_present=data.get("event_mode") == "yes",
        event_name=str(data.get("event_name") or ""),
        notice=str(data.get("notice") or ""),
    )


class ShiftReportInvalid(ValueError):
    def __init__(self, errors: List[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors


def render_shift_report(data: Mapping[str, Any], settings: NarrativeSettings | None = None) -> Dict[str, Any]:
    settings = settings or load_settings()
    errors = validate_request(data, settings)
    if errors:
        logger.info("shift_report_invalid", extra={"errors": errors})
        raise ShiftReportInvalid(errors)

    seed = data.get("seed")
    if seed is None:
        seed = random.randrange(_SEED_LIMIT)
    report = generate_report(build_record(data), random.Random(seed), settings=settings)
    logger.info(
        "shift_report_rendered",
        extra={"service": data.get("service"), "crowd": report.crowd_level.value, "seed": seed},
    )
    return {
        "text": report.text,
        "crowd_level": report.crowd_level.value,
        "sentence_count": report.sentence_count,
        "seed": seed,
    }


def label_options(settings: NarrativeSettings | None = None) -> Dict[str, List[str]]:
    settings = settings or load_settings()
    labels = load_phrasebank(settings.phrasebank_path).labels
    return {
        "customers": list(labels.get("customers", ())),
        "hits": list(labels.get("best_sellers", ())),
    }
