from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path


logger = logging.getLogger(__name__)

DEFAULT_PHRASEBANK_PATH = (
    Path(__file__).resolve().parents[2] / "data" / "phrasebank" / "shift_phrases.json"
)

_DEFAULT_REQUIRED = {
    "lunch": ("weather", "customers", "peak", "best_sellers"),
    "dinner": ("customers", "peak", "best_sellers"),
}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("settings_invalid_int", extra={"setting": name, "value": raw})
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("settings_invalid_float", extra={"setting": name, "value": raw})
        return default


def _env_fields(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None:
        return default
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class NarrativeSettings:
    max_sentences: int = 3
    feel_detail_rate: float = 0.5
    gentle_start_hour: int = 12
    phrasebank_path: Path = DEFAULT_PHRASEBANK_PATH
    required_lunch: tuple[str, ...] = _DEFAULT_REQUIRED["lunch"]
    required_dinner: tuple[str, ...] = _DEFAULT_REQUIRED["dinner"]

    def required_fields(self, service: str) -> tuple[str, ...]:
        if str(service) == "dinner":
            return self.required_dinner
        return self.required_lunch


def load_settings() -> NarrativeSettings:
    """Read engine and caller settings from the environment."""

    path_raw = os.getenv("NARRATIVE_PHRASEBANK_PATH", "").strip()
    rate = min(max(_env_float("NARRATIVE_FEEL_DETAIL_RATE", 0.5), 0.0), 1.0)
    return NarrativeSettings(
        max_sentences=max(_env_int("NARRATIVE_MAX_SENTENCES", 3), 1),
        feel_detail_rate=rate,
        gentle_start_hour=_env_int("NARRATIVE_GENTLE_START_HOUR", 12),
        phrasebank_path=Path(path_raw) if path_raw else DEFAULT_PHRASEBANK_PATH,
        required_lunch=_env_fields("REPORT_REQUIRED_FIELDS_LUNCH", _DEFAULT_REQUIRED["lunch"]),
        required_dinner=_env_fields("REPORT_REQUIRED_FIELDS_DINNER", _DEFAULT_REQUIRED["dinner"]),
    )


__all__ = ["DEFAULT_PHRASEBANK_PATH", "NarrativeSettings", "load_settings"]
