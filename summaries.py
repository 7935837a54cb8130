"""
Travel Tracker - Per-country visit summaries.
"""

from models import Snapshot


def get_country_summary(snapshot: Snapshot, country_id: str) -> dict:
    """Total days, visit count and cities recorded for one country."""
    country_visits = [v for v in snapshot.visits if v.country_id == country_id]
    country_cities = [c for c in snapshot.city_visits if c.country_id == country_id]

    return {
        "country_id": country_id,
        "total_days": sum(v.days for v in country_visits),
        # A visit without a duration is still a visit
        "times_visited": len(country_visits),
        "cities_count": len(country_cities),
        "cities": [c.city_name for c in country_cities],
    }


def get_all_summaries(snapshot: Snapshot) -> dict:
    """Summaries keyed by every country id seen in visits or city visits."""
    country_ids = dict.fromkeys(
        row.country_id for row in [*snapshot.visits, *snapshot.city_visits] if row.country_id
    )

    return {country_id: get_country_summary(snapshot, country_id) for country_id in country_ids}
