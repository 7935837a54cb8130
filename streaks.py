"""
Travel Tracker - Year Streaks & Records

Year-over-year travel streaks, the best travel year and the trip that
covered the most countries.
"""

from datetime import date
from typing import Optional

from trips import trip_key

# How far back the current streak walk looks from the present year
CURRENT_STREAK_LOOKBACK_YEARS = 20


def distinct_years(visits) -> list[int]:
    """Sorted years containing at least one dated visit."""
    return sorted({v.effective_date.year for v in visits if v.effective_date is not None})


def current_year_streak(years, current_year: int, lookback: int = CURRENT_STREAK_LOOKBACK_YEARS) -> int:
    """Consecutive years with travel, walking backward from current_year."""
    present = set(years)
    streak = 0
    year = current_year
    while year >= current_year - lookback and year in present:
        streak += 1
        year -= 1
    return streak


def longest_year_run(years) -> int:
    """Longest run of consecutive years in an ascending year list."""
    longest = 0
    run = 0
    previous = None
    for year in years:
        if previous is not None and year == previous + 1:
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = year
    return longest


def best_year(visits) -> Optional[dict]:
    """
    Year with the most distinct countries visited.

    Ties go to the earliest year. Returns None when no visit is dated.
    """
    countries_per_year = {}
    for visit in visits:
        if visit.effective_date is None or not visit.country_id:
            continue
        countries_per_year.setdefault(visit.effective_date.year, set()).add(visit.country_id)

    best = None
    for year in sorted(countries_per_year):
        count = len(countries_per_year[year])
        if best is None or count > best["count"]:
            best = {"year": year, "count": count}
    return best


def best_multi_country_trip(visits) -> Optional[dict]:
    """Trip (grouped by id, name or date) spanning the most distinct countries."""
    groups = {}
    names = {}
    for visit in visits:
        if visit.effective_date is None:
            continue
        key = trip_key(visit)
        countries = groups.setdefault(key, {})
        if visit.country_id:
            countries.setdefault(visit.country_id)
        if visit.trip_name and key not in names:
            names[key] = visit.trip_name

    best = None
    for key, countries in groups.items():
        if best is None or len(countries) > best["country_count"]:
            best = {
                "trip_key": key,
                "trip_name": names.get(key),
                "country_ids": list(countries),
                "country_count": len(countries),
            }
    return best


def calculate_streaks(
    visits,
    today: Optional[date] = None,
    lookback: int = CURRENT_STREAK_LOOKBACK_YEARS,
) -> dict:
    today = today or date.today()
    years = distinct_years(visits)
    current = current_year_streak(years, today.year, lookback)

    return {
        "years": years,
        "current_year_streak": current,
        # The bounded backward walk can undercount, so take the larger
        "max_year_streak": max(current, longest_year_run(years)),
        "best_year": best_year(visits),
        "best_multi_country_trip": best_multi_country_trip(visits),
    }
