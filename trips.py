"""
Travel Tracker - Trip Grouping

Partitions dated visit records into logical trips. Records sharing a
trip_group_id form one multi-country trip; every other record is its own
standalone trip.
"""

import math


def trip_key(visit) -> str:
    """Key identifying the trip a visit belongs to: group id, then trip name, then date."""
    return visit.trip_group_id or visit.trip_name or visit.effective_date.isoformat()


def group_trips(visits) -> list[dict]:
    """
    Group visits into trips, in fetch order.

    Visits without an effective date are left out entirely.

    Returns:
        A list of trip dicts with trip_key, trip_name, total_days,
        country_ids, visit_ids and start_date.
    """
    trips = []
    groups = {}

    for visit in visits:
        start = visit.effective_date
        if start is None:
            continue

        if visit.trip_group_id:
            trip = groups.get(visit.trip_group_id)
            if trip is None:
                trip = _new_trip(visit.trip_group_id)
                groups[visit.trip_group_id] = trip
                trips.append(trip)
        else:
            trip = _new_trip(trip_key(visit))
            trips.append(trip)

        trip["total_days"] += visit.days
        trip["visit_ids"].append(visit.id)
        if visit.country_id:
            trip["country_ids"].setdefault(visit.country_id)
        if trip["trip_name"] is None and visit.trip_name:
            trip["trip_name"] = visit.trip_name
        if trip["start_date"] is None or start < trip["start_date"]:
            trip["start_date"] = start

    for trip in trips:
        trip["country_ids"] = list(trip["country_ids"])
    return trips


def _new_trip(key: str) -> dict:
    return {
        "trip_key": key,
        "trip_name": None,
        "total_days": 0,
        "country_ids": {},
        "visit_ids": [],
        "start_date": None,
    }


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def get_grouped_trip_stats(visits) -> dict:
    """
    Trip count and duration statistics.

    Trips with no recorded duration count toward total_trip_count but are
    left out of trip_durations and the longest, shortest and average
    durations. When several trips share the longest duration, longest_trip
    is the first one in fetch order.
    """
    trips = group_trips(visits)
    trip_durations = [t for t in trips if t["total_days"] > 0]

    longest_trip = None
    shortest_trip = None
    for trip in trip_durations:
        if longest_trip is None or trip["total_days"] > longest_trip["total_days"]:
            longest_trip = trip
        if shortest_trip is None or trip["total_days"] < shortest_trip["total_days"]:
            shortest_trip = trip

    if trip_durations:
        avg = round_half_up(sum(t["total_days"] for t in trip_durations) / len(trip_durations))
    else:
        avg = 0

    return {
        "total_trip_count": len(trips),
        "trip_durations": trip_durations,
        "longest_trip_days": longest_trip["total_days"] if longest_trip else 0,
        "longest_trip": longest_trip,
        "shortest_trip_days": shortest_trip["total_days"] if shortest_trip else 0,
        "avg_trip_duration": avg,
    }
