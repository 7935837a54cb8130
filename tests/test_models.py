from datetime import date

from models import CurrentEdge, LegacyEdge, MembershipFact, Snapshot, VisitRecord, parse_iso_date


def test_parse_iso_date_handles_timestamps_and_garbage():
    assert parse_iso_date("2023-04-10") == date(2023, 4, 10)
    assert parse_iso_date("2023-04-10T08:30:00+00:00") == date(2023, 4, 10)
    assert parse_iso_date("not a date") is None
    assert parse_iso_date("") is None
    assert parse_iso_date(None) is None


def test_effective_date_prefers_exact_date():
    record = VisitRecord.from_row({
        "id": "v1", "country_id": "fr", "visit_date": "2022-06-01",
        "approximate_year": 2010, "approximate_month": 3,
    })
    assert record.effective_date == date(2022, 6, 1)


def test_effective_date_from_approximate_year_and_month():
    record = VisitRecord.from_row({"id": "v1", "country_id": "fr", "approximate_year": 2010, "approximate_month": 3})
    assert record.effective_date == date(2010, 3, 1)


def test_effective_date_month_defaults_to_january():
    record = VisitRecord.from_row({"id": "v1", "country_id": "fr", "approximate_year": 2010})
    assert record.effective_date == date(2010, 1, 1)

    bad_month = VisitRecord.from_row({"id": "v2", "country_id": "fr", "approximate_year": 2010, "approximate_month": 14})
    assert bad_month.effective_date == date(2010, 1, 1)


def test_undated_record_has_no_effective_dates():
    record = VisitRecord.from_row({"id": "v1", "country_id": "fr", "visit_date": "garbage"})
    assert record.effective_date is None
    assert record.effective_end_date is None


def test_end_before_start_is_a_single_day():
    record = VisitRecord.from_row({"id": "v1", "country_id": "fr", "visit_date": "2022-06-10", "end_date": "2022-06-01"})
    assert record.effective_end_date == date(2022, 6, 10)


def test_negative_duration_is_treated_as_absent():
    record = VisitRecord.from_row({"id": "v1", "country_id": "fr", "number_of_days": -3})
    assert record.number_of_days is None
    assert record.days == 0


def test_edges_resolve_to_membership_facts():
    visit_countries = {"v1": "fr"}

    legacy = LegacyEdge.from_row({"country_id": "it", "family_member_id": "m1", "family_members": {"name": "Ana"}})
    current = CurrentEdge.from_row({"visit_id": "v1", "family_member_id": "m2", "family_members": {"name": "Ben"}})

    assert legacy.resolve(visit_countries) == MembershipFact("it", "m1", "Ana")
    assert current.resolve(visit_countries) == MembershipFact("fr", "m2", "Ben")


def test_orphaned_or_nameless_edges_do_not_resolve():
    visit_countries = {"v1": "fr"}

    orphan = CurrentEdge.from_row({"visit_id": "missing", "family_member_id": "m1", "family_members": {"name": "Ana"}})
    nameless = CurrentEdge.from_row({"visit_id": "v1", "family_member_id": "m1", "family_members": None})
    no_country = LegacyEdge.from_row({"country_id": None, "family_member_id": "m1", "family_members": {"name": "Ana"}})

    assert orphan.resolve(visit_countries) is None
    assert nameless.resolve(visit_countries) is None
    assert no_country.resolve(visit_countries) is None


def test_snapshot_from_rows_accepts_missing_collections():
    snapshot = Snapshot.from_rows(visits=None, countries=[{"id": "fr", "name": "France"}])
    assert snapshot.visits == ()
    assert snapshot.countries[0].name == "France"
    assert snapshot.dated_visits == []
