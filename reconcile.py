"""
Travel Tracker - Membership Reconciliation

Merges the legacy country/member edges and the current visit/member edges
into one view of who visited which country.
"""

import logging

from models import MembershipFact, Snapshot

logger = logging.getLogger(__name__)


def normalize_edges(legacy_edges, current_edges, visits) -> list[MembershipFact]:
    """
    Resolve both edge variants into MembershipFacts.

    Current edges resolve through the visit they reference; legacy edges
    carry their country directly. Edges that cannot be resolved (unknown
    visit, missing country or member name) are dropped.
    """
    visit_countries = {v.id: v.country_id for v in visits if v.id and v.country_id}

    facts = []
    dropped = 0
    for edge in [*current_edges, *legacy_edges]:
        fact = edge.resolve(visit_countries)
        if fact is None:
            dropped += 1
            continue
        facts.append(fact)

    if dropped:
        logger.debug(f"Dropped {dropped} unresolvable membership edges")
    return facts


def reconcile_membership(snapshot: Snapshot) -> tuple[dict, dict]:
    """
    Compute the union of both membership systems.

    Returns:
        (visited_by, visited_countries) where visited_by maps
        country_id -> set of member names and visited_countries maps
        member_id -> set of country_ids. Every known country and member has
        an entry, empty when nothing was recorded for it.
    """
    visited_by = {country.id: set() for country in snapshot.countries}
    visited_countries = {member.id: set() for member in snapshot.members}

    facts = normalize_edges(snapshot.legacy_edges, snapshot.current_edges, snapshot.visits)
    for fact in facts:
        visited_by.setdefault(fact.country_id, set()).add(fact.member_name)
        if fact.member_id:
            visited_countries.setdefault(fact.member_id, set()).add(fact.country_id)

    return visited_by, visited_countries
