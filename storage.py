"""
Travel Tracker - Storage client

Reads travel rows from the hosted Postgres REST API (PostgREST / Supabase).
"""

import asyncio
import logging

import httpx

from models import Snapshot

logger = logging.getLogger(__name__)

# Tables whose changes should trigger a refetch
VISITS_TABLE = "country_visit_details"
LEGACY_EDGES_TABLE = "country_visits"
CURRENT_EDGES_TABLE = "visit_family_members"
CITY_VISITS_TABLE = "city_visits"
COUNTRIES_TABLE = "countries"
MEMBERS_TABLE = "family_members"

WATCHED_TABLES = (
    VISITS_TABLE,
    LEGACY_EDGES_TABLE,
    CURRENT_EDGES_TABLE,
    CITY_VISITS_TABLE,
    COUNTRIES_TABLE,
    MEMBERS_TABLE,
)

PAGE_SIZE = 1000


class StorageError(Exception):
    """Raised when the storage API returns an error or cannot be reached."""
    pass


class RateLimitError(StorageError):
    """Raised when the storage API rate limit is hit."""
    pass


class TravelStorage:
    """Fetches each record type as a list of row dicts."""

    def __init__(self, base_url: str, api_key: str, client: httpx.AsyncClient = None):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.client = client or httpx.AsyncClient(timeout=10.0)

    async def aclose(self):
        await self.client.aclose()

    async def _select(self, table: str, select: str = "*", order: str = None) -> list:
        rows = []
        offset = 0

        while True:
            params = {"select": select, "limit": PAGE_SIZE, "offset": offset}
            if order:
                params["order"] = order

            try:
                response = await self.client.get(
                    f"{self.base_url}/rest/v1/{table}",
                    params=params,
                    headers={
                        "apikey": self.api_key,
                        "Authorization": f"Bearer {self.api_key}",
                    },
                )
            except httpx.HTTPError as e:
                raise StorageError(f"Could not reach storage for {table}: {e}") from e

            # Handle rate limiting
            if response.status_code == 429:
                logger.warning(f"Storage rate limit hit reading {table}")
                raise RateLimitError(f"Too many requests reading {table}")

            if response.status_code != 200:
                logger.error(f"Storage API error reading {table}: {response.status_code}")
                raise StorageError(f"Storage API returned {response.status_code} for {table}")

            try:
                items = response.json() or []
            except ValueError as e:
                raise StorageError(f"Malformed response for {table}") from e
            if not isinstance(items, list):
                logger.error(f"Storage API returned a non-list body for {table}")
                raise StorageError(f"Unexpected response body for {table}")
            rows.extend(items)

            if len(items) < PAGE_SIZE:
                break
            offset += PAGE_SIZE

        return rows

    async def fetch_visits(self) -> list:
        return await self._select(VISITS_TABLE)

    async def fetch_legacy_edges(self) -> list:
        return await self._select(LEGACY_EDGES_TABLE, "country_id,family_member_id,family_members(name)")

    async def fetch_current_edges(self) -> list:
        return await self._select(CURRENT_EDGES_TABLE, "visit_id,family_member_id,family_members(name)")

    async def fetch_city_visits(self) -> list:
        return await self._select(CITY_VISITS_TABLE)

    async def fetch_countries(self) -> list:
        return await self._select(COUNTRIES_TABLE, order="name.asc")

    async def fetch_members(self) -> list:
        return await self._select(MEMBERS_TABLE, order="created_at.asc")

    async def fetch_snapshot(self) -> Snapshot:
        """Fetch every record type concurrently and build one snapshot."""
        visits, legacy, current, cities, countries, members = await asyncio.gather(
            self.fetch_visits(),
            self.fetch_legacy_edges(),
            self.fetch_current_edges(),
            self.fetch_city_visits(),
            self.fetch_countries(),
            self.fetch_members(),
        )
        logger.info(
            f"Fetched {len(visits)} visits, {len(legacy) + len(current)} membership edges, "
            f"{len(cities)} city visits"
        )
        return Snapshot.from_rows(
            visits=visits,
            legacy_edges=legacy,
            current_edges=current,
            city_visits=cities,
            countries=countries,
            members=members,
        )
