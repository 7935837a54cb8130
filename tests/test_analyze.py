from datetime import date

from analyze import analyze_travel, format_date_ordinal, ordinal
from models import Snapshot


def test_ordinal():
    assert [ordinal(n) for n in (1, 2, 3, 4, 11, 12, 13, 21, 22, 23)] == [
        "1st", "2nd", "3rd", "4th", "11th", "12th", "13th", "21st", "22nd", "23rd"
    ]
    assert format_date_ordinal(date(2023, 4, 21)) == "April 21st"


def test_adjacent_trips_end_to_end():
    snapshot = Snapshot.from_rows(visits=[
        {"id": "v1", "country_id": "FR", "visit_date": "2023-04-10", "end_date": "2023-04-20", "number_of_days": 10},
        {"id": "v2", "country_id": "IT", "visit_date": "2023-04-21", "end_date": "2023-04-25", "number_of_days": 4},
    ])
    stats = analyze_travel(snapshot, today=date(2023, 6, 1))
    assert stats["longest_continuous_days"] == 16
    assert stats["abroad_periods"] == 1
    assert stats["currently_abroad_days"] == 0


def test_family_report_while_abroad(family_snapshot):
    stats = analyze_travel(family_snapshot, today=date(2023, 4, 22))

    assert stats["current_year_streak"] == 1
    assert stats["max_year_streak"] == 1
    assert stats["years_with_travel"] == 2
    assert stats["best_year"] == {"year": 2023, "count": 2}
    assert stats["max_countries_in_one_trip"] == 1

    assert stats["longest_continuous_days"] == 16
    assert stats["currently_abroad_days"] == 13
    assert stats["days_since_last_trip"] == 0
    assert stats["most_recent_visit"]["country_id"] == "it"
    assert stats["most_recent_visit"]["date_formatted"] == "April 21st"

    assert stats["this_year_countries"] == 2
    assert stats["total_visits"] == 3
    assert stats["total_days_abroad"] == 14
    assert stats["unique_named_trips"] == 0
    assert stats["total_continents"] == 2


def test_member_summaries(family_snapshot):
    stats = analyze_travel(family_snapshot, today=date(2024, 1, 1))
    members = {m["member_id"]: m for m in stats["members"]}

    assert members["m1"] == {"member_id": "m1", "name": "Ana", "countries_visited": 2, "earliest_year": 2019}
    assert members["m2"]["countries_visited"] == 2
    assert members["m2"]["earliest_year"] == 2023
    assert members["m3"]["countries_visited"] == 0
    assert members["m3"]["earliest_year"] is None


def test_currently_abroad_recomputed_per_day(family_snapshot):
    assert analyze_travel(family_snapshot, today=date(2023, 4, 25))["currently_abroad_days"] == 16
    assert analyze_travel(family_snapshot, today=date(2023, 4, 26))["currently_abroad_days"] == 0
    assert analyze_travel(family_snapshot, today=date(2023, 5, 5))["days_since_last_trip"] == 10


def test_empty_snapshot_report():
    stats = analyze_travel(Snapshot.empty(), today=date(2024, 1, 1))
    assert stats["current_year_streak"] == 0
    assert stats["max_year_streak"] == 0
    assert stats["longest_continuous_days"] == 0
    assert stats["currently_abroad_days"] == 0
    assert stats["best_year"] is None
    assert stats["best_multi_country_trip"] is None
    assert stats["most_recent_visit"] is None
    assert stats["days_since_last_trip"] is None
    assert stats["total_continents"] == 0
    assert stats["members"] == []
