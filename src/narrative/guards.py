"""Named predicates gating phrase variants so that selections never contradict."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Mapping

from .models import CrowdLevel, ObservationRecord, ServicePeriod
from .text import is_blank


@dataclass(frozen=True)
class GuardContext:
    record: ObservationRecord
    crowd: CrowdLevel
    start_hour: int | None
    gentle_start_hour: int = 12
    lead_closed: bool = True


Guard = Callable[[GuardContext], bool]


def can_say_gentle_start(ctx: GuardContext) -> bool:
    """Calm-start phrasing is only for lunch with a peak starting at noon or later."""

    if ServicePeriod(ctx.record.service) is not ServicePeriod.LUNCH:
        return False
    if ctx.start_hour is None:
        return False
    return ctx.start_hour >= ctx.gentle_start_hour


GUARDS: Mapping[str, Guard] = {
    "gentle_start": can_say_gentle_start,
    "brisk_start": lambda ctx: not can_say_gentle_start(ctx),
    "lead_open": lambda ctx: not ctx.lead_closed,
    "lead_closed": lambda ctx: ctx.lead_closed,
    "busy": lambda ctx: ctx.crowd is CrowdLevel.BUSY,
    "normal": lambda ctx: ctx.crowd is CrowdLevel.NORMAL,
    "quiet": lambda ctx: ctx.crowd is CrowdLevel.QUIET,
    "has_weather": lambda ctx: not is_blank(ctx.record.weather),
    "has_customers": lambda ctx: bool(ctx.record.customers()),
    "no_customers": lambda ctx: not ctx.record.customers(),
    "has_peak": lambda ctx: not is_blank(ctx.record.peak_range),
    "no_peak": lambda ctx: is_blank(ctx.record.peak_range),
    "has_best_sellers": lambda ctx: bool(ctx.record.best_sellers()),
    "has_feel": lambda ctx: not is_blank(ctx.record.crowd_feel),
    "has_event": lambda ctx: bool(ctx.record.event()),
    "has_notice": lambda ctx: not is_blank(ctx.record.notice),
}


def unknown_guards(names: Iterable[str]) -> list[str]:
    return [name for name in names if name not in GUARDS]


def guards_hold(names: Iterable[str], ctx: GuardContext) -> bool:
    return all(GUARDS[name](ctx) for name in names)


__all__ = [
    "GUARDS",
    "GuardContext",
    "can_say_gentle_start",
    "guards_hold",
    "unknown_guards",
]
