"""
Travel Tracker - Data Models

Row shapes fetched from storage, plus the effective-date rules every
date-based statistic relies on.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import NamedTuple, Optional, Union


def parse_iso_date(value) -> Optional[date]:
    """Parse 'YYYY-MM-DD' (optionally followed by a time part). Returns None if unparseable."""
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value[:10], "%Y-%m-%d").date()
    except ValueError:
        return None


def _as_int(value) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class VisitRecord:
    id: str
    country_id: Optional[str]
    visit_date: Optional[date] = None
    end_date: Optional[date] = None
    approximate_year: Optional[int] = None
    approximate_month: Optional[int] = None
    number_of_days: Optional[int] = None
    trip_name: Optional[str] = None
    trip_group_id: Optional[str] = None
    highlight: Optional[str] = None
    why_it_mattered: Optional[str] = None
    notes: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict) -> "VisitRecord":
        days = _as_int(row.get("number_of_days"))
        if days is not None and days < 0:
            days = None
        return cls(
            id=row.get("id"),
            country_id=row.get("country_id"),
            visit_date=parse_iso_date(row.get("visit_date")),
            end_date=parse_iso_date(row.get("end_date")),
            approximate_year=_as_int(row.get("approximate_year")),
            approximate_month=_as_int(row.get("approximate_month")),
            number_of_days=days,
            trip_name=row.get("trip_name") or None,
            trip_group_id=row.get("trip_group_id") or None,
            highlight=row.get("highlight"),
            why_it_mattered=row.get("why_it_mattered"),
            notes=row.get("notes"),
        )

    @property
    def effective_date(self) -> Optional[date]:
        """Exact visit date, else one synthesized from the approximate year/month."""
        if self.visit_date:
            return self.visit_date
        if self.approximate_year is None:
            return None
        month = self.approximate_month
        if month is None or not 1 <= month <= 12:
            month = 1
        try:
            return date(self.approximate_year, month, 1)
        except ValueError:
            return None

    @property
    def effective_end_date(self) -> Optional[date]:
        start = self.effective_date
        if start is None:
            return None
        # An end before the start is treated as a single-day visit
        if self.end_date is None or self.end_date < start:
            return start
        return self.end_date

    @property
    def days(self) -> int:
        return self.number_of_days or 0


class MembershipFact(NamedTuple):
    """A normalized 'member visited country' fact."""
    country_id: str
    member_id: Optional[str]
    member_name: str


def _member_name(row: dict) -> Optional[str]:
    # PostgREST embeds the joined member as {"family_members": {"name": ...}}
    joined = row.get("family_members")
    if isinstance(joined, dict) and joined.get("name"):
        return joined["name"]
    return row.get("member_name") or None


@dataclass(frozen=True)
class LegacyEdge:
    """Direct, dateless country <-> member edge."""
    country_id: Optional[str]
    member_id: Optional[str]
    member_name: Optional[str]

    @classmethod
    def from_row(cls, row: dict) -> "LegacyEdge":
        return cls(
            country_id=row.get("country_id"),
            member_id=row.get("family_member_id"),
            member_name=_member_name(row),
        )

    def resolve(self, visit_countries: dict) -> Optional[MembershipFact]:
        if not self.country_id or not self.member_name:
            return None
        return MembershipFact(self.country_id, self.member_id, self.member_name)


@dataclass(frozen=True)
class CurrentEdge:
    """Visit <-> member edge; the country comes from the referenced visit."""
    visit_id: Optional[str]
    member_id: Optional[str]
    member_name: Optional[str]

    @classmethod
    def from_row(cls, row: dict) -> "CurrentEdge":
        return cls(
            visit_id=row.get("visit_id"),
            member_id=row.get("family_member_id"),
            member_name=_member_name(row),
        )

    def resolve(self, visit_countries: dict) -> Optional[MembershipFact]:
        country_id = visit_countries.get(self.visit_id)
        if not country_id or not self.member_name:
            return None
        return MembershipFact(country_id, self.member_id, self.member_name)


MembershipEdge = Union[LegacyEdge, CurrentEdge]


@dataclass(frozen=True)
class CityVisit:
    id: str
    country_id: Optional[str]
    city_name: Optional[str]
    visit_date: Optional[date] = None

    @classmethod
    def from_row(cls, row: dict) -> "CityVisit":
        return cls(
            id=row.get("id"),
            country_id=row.get("country_id"),
            city_name=row.get("city_name"),
            visit_date=parse_iso_date(row.get("visit_date")),
        )


@dataclass(frozen=True)
class FamilyMember:
    id: str
    name: str
    role: Optional[str] = None
    avatar: Optional[str] = None
    color: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict) -> "FamilyMember":
        return cls(
            id=row.get("id"),
            name=row.get("name") or "",
            role=row.get("role"),
            avatar=row.get("avatar"),
            color=row.get("color"),
        )


@dataclass(frozen=True)
class Country:
    id: str
    name: str
    continent: Optional[str] = None
    flag: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict) -> "Country":
        return cls(
            id=row.get("id"),
            name=row.get("name") or "",
            continent=row.get("continent"),
            flag=row.get("flag"),
        )


@dataclass(frozen=True)
class Snapshot:
    """One full-replace fetch of every watched record type."""
    visits: tuple = ()
    legacy_edges: tuple = ()
    current_edges: tuple = ()
    city_visits: tuple = ()
    countries: tuple = ()
    members: tuple = ()

    @classmethod
    def empty(cls) -> "Snapshot":
        return cls()

    @classmethod
    def from_rows(
        cls,
        visits=None,
        legacy_edges=None,
        current_edges=None,
        city_visits=None,
        countries=None,
        members=None,
    ) -> "Snapshot":
        """Build a snapshot from raw storage rows. Any argument may be None."""
        return cls(
            visits=tuple(VisitRecord.from_row(r) for r in visits or []),
            legacy_edges=tuple(LegacyEdge.from_row(r) for r in legacy_edges or []),
            current_edges=tuple(CurrentEdge.from_row(r) for r in current_edges or []),
            city_visits=tuple(CityVisit.from_row(r) for r in city_visits or []),
            countries=tuple(Country.from_row(r) for r in countries or []),
            members=tuple(FamilyMember.from_row(r) for r in members or []),
        )

    @property
    def dated_visits(self) -> list:
        """Visits with an effective date, in fetch order."""
        return [v for v in self.visits if v.effective_date is not None]
