"""
Travel Tracker - Analysis Module

Builds the travel statistics report (streaks, records, abroad periods and
per-member totals) from one snapshot of fetched rows.
"""

from datetime import date, datetime

from intervals import calculate_abroad_stats
from models import Snapshot
from reconcile import reconcile_membership
from streaks import CURRENT_STREAK_LOOKBACK_YEARS, calculate_streaks


def ordinal(n: int) -> str:
    """Return ordinal string for a number (1st, 2nd, 3rd, etc.)."""
    if 11 <= (n % 100) <= 13:
        suffix = 'th'
    else:
        suffix = {1: 'st', 2: 'nd', 3: 'rd'}.get(n % 10, 'th')
    return f"{n}{suffix}"


def format_date_ordinal(dt) -> str:
    """Format date as 'January 1st' style."""
    return f"{dt.strftime('%B')} {ordinal(dt.day)}"


def analyze_travel(snapshot: Snapshot, today: date = None, lookback: int = CURRENT_STREAK_LOOKBACK_YEARS) -> dict:
    """
    Analyze a snapshot of travel records and return statistics.

    Args:
        snapshot: Rows fetched from storage
        today: Reference day for streaks and "currently abroad"; defaults to now
        lookback: Years the current streak walk may go back

    Returns:
        Dictionary with all computed statistics. An empty snapshot yields
        zeros, empty lists and None records.
    """
    today = today or datetime.now().date()
    dated = snapshot.dated_visits

    stats = {}

    # Year streaks and records
    streaks = calculate_streaks(dated, today=today, lookback=lookback)
    stats["current_year_streak"] = streaks["current_year_streak"]
    stats["max_year_streak"] = streaks["max_year_streak"]
    stats["years_with_travel"] = len(streaks["years"])
    stats["best_year"] = streaks["best_year"]
    stats["best_multi_country_trip"] = streaks["best_multi_country_trip"]
    best_trip = streaks["best_multi_country_trip"]
    stats["max_countries_in_one_trip"] = best_trip["country_count"] if best_trip else 0

    # Continuous time abroad
    abroad = calculate_abroad_stats(dated, today=today)
    stats["longest_continuous_days"] = abroad["longest_continuous_days"]
    stats["currently_abroad_days"] = abroad["currently_abroad_days"]
    stats["abroad_periods"] = len(abroad["abroad_periods"])

    # Most recent adventure
    if dated:
        latest = max(dated, key=lambda v: v.effective_date)
        stats["most_recent_visit"] = {
            "country_id": latest.country_id,
            "date": latest.effective_date,
            "date_formatted": format_date_ordinal(latest.effective_date),
        }
        stats["days_since_last_trip"] = max(0, (today - latest.effective_end_date).days)
    else:
        stats["most_recent_visit"] = None
        stats["days_since_last_trip"] = None

    # This year
    stats["this_year_countries"] = len({
        v.country_id for v in dated
        if v.effective_date.year == today.year and v.country_id
    })

    # Totals (dates not required)
    stats["total_visits"] = len(snapshot.visits)
    stats["total_days_abroad"] = sum(v.days for v in snapshot.visits)
    stats["unique_named_trips"] = len({
        v.trip_group_id or v.trip_name
        for v in snapshot.visits
        if v.trip_group_id or v.trip_name
    })

    # Membership
    visited_by, visited_countries = reconcile_membership(snapshot)
    continents = {c.id: c.continent for c in snapshot.countries}
    stats["total_continents"] = len({
        continents[country_id]
        for country_id, names in visited_by.items()
        if names and continents.get(country_id)
    })
    stats["members"] = member_summaries(snapshot, visited_countries)

    return stats


def member_summaries(snapshot: Snapshot, visited_countries: dict) -> list[dict]:
    """Countries visited and first travel year for each family member."""
    visits = {v.id: v for v in snapshot.visits}

    earliest = {}
    for edge in snapshot.current_edges:
        visit = visits.get(edge.visit_id)
        if visit is None or not edge.member_id or visit.effective_date is None:
            continue
        year = visit.effective_date.year
        if edge.member_id not in earliest or year < earliest[edge.member_id]:
            earliest[edge.member_id] = year

    return [
        {
            "member_id": member.id,
            "name": member.name,
            "countries_visited": len(visited_countries.get(member.id, ())),
            "earliest_year": earliest.get(member.id),
        }
        for member in snapshot.members
    ]
