"""
Travel Tracker - A web service serving travel-history statistics for a family.
"""

import os
import logging
import time
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, Request

from storage import TravelStorage, WATCHED_TABLES
from store import TravelStore
from streaks import CURRENT_STREAK_LOOKBACK_YEARS

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Storage configuration
SUPABASE_URL = os.environ.get("SUPABASE_URL", "http://localhost:54321")
SUPABASE_KEY = os.environ.get("SUPABASE_KEY", "")

# Refresh configuration
REFRESH_DEBOUNCE_MS = int(os.environ.get("REFRESH_DEBOUNCE_MS", "300"))
STREAK_LOOKBACK_YEARS = int(os.environ.get("STREAK_LOOKBACK_YEARS", str(CURRENT_STREAK_LOOKBACK_YEARS)))


@asynccontextmanager
async def lifespan(app: FastAPI):
    storage = TravelStorage(SUPABASE_URL, SUPABASE_KEY)
    store = TravelStore(
        storage.fetch_snapshot,
        debounce_seconds=REFRESH_DEBOUNCE_MS / 1000,
        lookback=STREAK_LOOKBACK_YEARS,
    )
    app.state.store = store
    store.start()
    logger.info(f"Travel store started against {SUPABASE_URL}")

    yield

    await store.close()
    await storage.aclose()


app = FastAPI(title="Travel Tracker", lifespan=lifespan)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing info."""
    start_time = time.time()

    response = await call_next(request)

    # Calculate request duration
    duration_ms = (time.time() - start_time) * 1000

    logger.info(
        f"{request.method} {request.url.path} - {response.status_code} - {duration_ms:.0f}ms"
    )

    return response


def get_store(request: Request) -> TravelStore:
    return request.app.state.store


@app.get("/")
async def home(store: TravelStore = Depends(get_store)):
    """Load status."""
    return {
        "loading": store.loading,
        "last_refreshed": store.last_refreshed,
    }


@app.get("/api/summaries")
async def all_summaries(store: TravelStore = Depends(get_store)):
    """Per-country summaries for every country with visits or cities."""
    return store.get_all_summaries()


@app.get("/api/summaries/{country_id}")
async def country_summary(country_id: str, store: TravelStore = Depends(get_store)):
    return store.get_country_summary(country_id)


@app.get("/api/trips")
async def trip_stats(store: TravelStore = Depends(get_store)):
    return store.get_grouped_trip_stats()


@app.get("/api/membership")
async def membership(store: TravelStore = Depends(get_store)):
    """Who visited each country, and which countries each member visited."""
    return {
        "visited_by": {
            country_id: sorted(names) for country_id, names in store.visited_by.items()
        },
        "visited_countries": {
            member_id: sorted(countries) for member_id, countries in store.visited_countries.items()
        },
    }


@app.get("/api/stats")
async def stats(store: TravelStore = Depends(get_store)):
    """Streaks, records and time abroad as of today."""
    return store.travel_stats()


@app.post("/api/refetch")
async def refetch(store: TravelStore = Depends(get_store)):
    """Explicit refresh. Dropped if a refresh is already running."""
    refreshed = await store.refetch()
    return {"refreshed": refreshed}


@app.post("/api/changes", status_code=202)
async def changes(request: Request, store: TravelStore = Depends(get_store)):
    """Receive a database change notification and schedule a refetch."""
    try:
        payload = await request.json()
    except ValueError:
        payload = {}

    table = payload.get("table") if isinstance(payload, dict) else None
    if table in WATCHED_TABLES:
        store.notify(table)
        return {"scheduled": True}

    logger.info(f"Ignoring change notification for {table or 'unknown table'}")
    return {"scheduled": False}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
