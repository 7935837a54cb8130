"""
Travel Tracker - Abroad Periods

Merges visit date ranges that overlap or touch (gap of at most one day)
into continuous periods away from home.
"""

from datetime import date
from typing import Optional

# Visits starting within this many days of the current period's end extend it
MAX_GAP_DAYS = 1


def merge_periods(visits) -> list[dict]:
    """
    Merge the visits' [start, end] ranges into maximal abroad periods.

    Visits without an effective date are skipped. A visit without an end
    date covers its start day only.

    Returns:
        Periods as {"start": date, "end": date}, sorted by start.
    """
    intervals = sorted(
        (v.effective_date, v.effective_end_date)
        for v in visits
        if v.effective_date is not None
    )
    if not intervals:
        return []

    periods = []
    start, end = intervals[0]
    current = {"start": start, "end": end}

    for start, end in intervals[1:]:
        gap_days = (start - current["end"]).days
        if gap_days <= MAX_GAP_DAYS:
            current["end"] = max(current["end"], end)
        else:
            periods.append(current)
            current = {"start": start, "end": end}

    periods.append(current)
    return periods


def period_days(period: dict) -> int:
    """Inclusive day count of a period."""
    return (period["end"] - period["start"]).days + 1


def longest_continuous_days(periods) -> int:
    return max((period_days(p) for p in periods), default=0)


def currently_abroad_days(periods, today: Optional[date] = None) -> int:
    """Days into the latest period if today falls inside it, else 0."""
    if not periods:
        return 0
    today = today or date.today()
    latest = periods[-1]
    if latest["start"] <= today <= latest["end"]:
        return (today - latest["start"]).days + 1
    return 0


def calculate_abroad_stats(visits, today: Optional[date] = None) -> dict:
    periods = merge_periods(visits)
    return {
        "abroad_periods": periods,
        "longest_continuous_days": longest_continuous_days(periods),
        "currently_abroad_days": currently_abroad_days(periods, today),
    }
