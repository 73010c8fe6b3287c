"""Reduction of raw clock events into worked hours.

Events are paired strictly by position after sorting: ``(e[0], e[1])``,
``(e[2], e[3])`` and so on. Only pairs shaped (in, out) count. Irregular
sequences such as two consecutive clock-ins therefore shift every following
pair; this is the established behavior and is kept as-is.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from time_manager.core.models import ClockEvent, ensure_utc

_TWO_PLACES = Decimal("0.01")
_MICROSECONDS_PER_HOUR = Decimal(3600 * 1_000_000)


@dataclass(frozen=True)
class HoursSummary:
    """Aggregated hours for one user over a window."""

    total_hours: float
    work_days: int
    average_daily_hours: float


def _round_hours(value: Decimal) -> Decimal:
    return value.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def _to_microseconds(delta: timedelta) -> int:
    return (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds


def sort_events(events: Iterable[ClockEvent]) -> list[ClockEvent]:
    """Sort events ascending by time; ties keep their input order."""
    return sorted(events, key=lambda e: ensure_utc(e.time))


def worked_duration(events: Iterable[ClockEvent]) -> timedelta:
    """Sum the durations of all completed (in, out) pairs.

    Args:
        events: Clock events of a single user, in any order

    Returns:
        Total worked time. Misshaped pairs and a trailing unpaired event
        contribute nothing.
    """
    ordered = sort_events(events)
    total = timedelta(0)

    for i in range(0, len(ordered) - 1, 2):
        clock_in, clock_out = ordered[i], ordered[i + 1]
        if clock_in.status is True and clock_out.status is False:
            total += ensure_utc(clock_out.time) - ensure_utc(clock_in.time)

    return total


def _total_hours_decimal(events: Iterable[ClockEvent]) -> Decimal:
    micros = _to_microseconds(worked_duration(events))
    return _round_hours(Decimal(micros) / _MICROSECONDS_PER_HOUR)


def total_hours(events: Iterable[ClockEvent]) -> float:
    """Worked hours rounded half-up to two decimals."""
    return float(_total_hours_decimal(events))


def work_dates(events: Iterable[ClockEvent]) -> set[date]:
    """Distinct UTC calendar dates touched by the events."""
    return {ensure_utc(e.time).date() for e in events}


def count_work_days(events: Iterable[ClockEvent]) -> int:
    """Number of distinct UTC dates, never less than 1.

    An empty set counts as one day so the daily average stays defined.
    """
    return len(work_dates(events)) or 1


def summarize(events: Iterable[ClockEvent]) -> HoursSummary:
    """Compute total hours, work days and the daily average.

    Example:
        >>> summarize([])
        HoursSummary(total_hours=0.0, work_days=1, average_daily_hours=0.0)
    """
    events = list(events)
    hours = _total_hours_decimal(events)
    days = count_work_days(events)
    average = _round_hours(hours / Decimal(days))

    return HoursSummary(
        total_hours=float(hours),
        work_days=days,
        average_daily_hours=float(average),
    )
