import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from models import Snapshot


def visit(id, country_id, visit_date=None, end_date=None, **fields):
    row = {"id": id, "country_id": country_id, "visit_date": visit_date, "end_date": end_date}
    row.update(fields)
    return row


@pytest.fixture
def family_snapshot():
    """A small family with records split across both membership systems."""
    return Snapshot.from_rows(
        visits=[
            visit("v1", "fr", "2023-04-10", "2023-04-20", number_of_days=10),
            visit("v2", "it", "2023-04-21", "2023-04-25", number_of_days=4),
            visit("v3", "jp", None, None, approximate_year=2019, approximate_month=5),
        ],
        legacy_edges=[
            {"country_id": "fr", "family_member_id": "m1", "family_members": {"name": "Ana"}},
            {"country_id": "es", "family_member_id": "m2", "family_members": {"name": "Ben"}},
        ],
        current_edges=[
            {"visit_id": "v1", "family_member_id": "m1", "family_members": {"name": "Ana"}},
            {"visit_id": "v2", "family_member_id": "m2", "family_members": {"name": "Ben"}},
            {"visit_id": "v3", "family_member_id": "m1", "family_members": {"name": "Ana"}},
        ],
        city_visits=[
            {"id": "c1", "country_id": "fr", "city_name": "Paris"},
            {"id": "c2", "country_id": "fr", "city_name": "Lyon"},
            {"id": "c3", "country_id": "pt", "city_name": "Lisbon"},
        ],
        countries=[
            {"id": "fr", "name": "France", "continent": "Europe"},
            {"id": "it", "name": "Italy", "continent": "Europe"},
            {"id": "jp", "name": "Japan", "continent": "Asia"},
            {"id": "es", "name": "Spain", "continent": "Europe"},
            {"id": "br", "name": "Brazil", "continent": "South America"},
        ],
        members=[
            {"id": "m1", "name": "Ana"},
            {"id": "m2", "name": "Ben"},
            {"id": "m3", "name": "Cy"},
        ],
    )
