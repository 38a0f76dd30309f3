from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .text import merge_tags, normalize_text


class ServicePeriod(str, Enum):
    LUNCH = "lunch"
    DINNER = "dinner"


class CrowdLevel(str, Enum):
    BUSY = "busy"
    NORMAL = "normal"
    QUIET = "quiet"


@dataclass(frozen=True)
class ObservationRecord:
    """Structured observations about one service period."""

    service: ServicePeriod
    peak_range: str
    weather: str = ""
    customer_tags: tuple[str, ...] = field(default_factory=tuple)
    customer_free_text: str = ""
    crowd_feel: str = ""
    best_seller_tags: tuple[str, ...] = field(default_factory=tuple)
    best_seller_free_text: str = ""
    event_present: bool = False
    event_name: str = ""
    notice: str = ""

    def customers(self) -> list[str]:
        return merge_tags(self.customer_tags, self.customer_free_text)

    def best_sellers(self) -> list[str]:
        return merge_tags(self.best_seller_tags, self.best_seller_free_text)

    def event(self) -> str:
        if not self.event_present:
            return ""
        return normalize_text(self.event_name)


@dataclass(frozen=True)
class ShiftReport:
    text: str
    crowd_level: CrowdLevel
    sentence_count: int


__all__ = ["CrowdLevel", "ObservationRecord", "ServicePeriod", "ShiftReport"]
