"""
P4P MIS Backend — MongoDB Client Management
=============================================

What:  Async MongoDB client construction, lifecycle helpers, connection-event
       logging and the FastAPI dependency that hands the database to routes.
How:   The lifespan in main.py calls `open_database()` once at startup and
       `close_database()` at shutdown; the handle lives on `app.state`.
       Routes receive it through `Depends(get_database)`, which tests override.
Who:   main.py (lifecycle), routes (dependency), health route (ping).

Connection Pooling:
    AsyncMongoClient owns a connection pool (maxPoolSize from settings).
    One client per process; handlers never create or close connections.
"""

import logging
from typing import Any, Tuple

from fastapi import FastAPI, Request
from pymongo import AsyncMongoClient, monitoring
from pymongo.asynchronous.database import AsyncDatabase

from p4pmis.config import Settings

logger = logging.getLogger(__name__)


# ── Connection Event Logging ──────────────────────────────────────────────
class ConnectionEventLogger(monitoring.TopologyListener):
    """
    Logs when the deployment becomes reachable or unreachable.

    Registered on the client at construction; pymongo calls these from its
    monitor threads, so they only log.
    """

    def opened(self, event: monitoring.TopologyOpenedEvent) -> None:
        logger.debug("MongoDB topology opened: %s", event.topology_id)

    def description_changed(self, event: monitoring.TopologyDescriptionChangedEvent) -> None:
        was_reachable = event.previous_description.has_readable_server()
        is_reachable = event.new_description.has_readable_server()
        if is_reachable and not was_reachable:
            logger.info("MongoDB connected")
        elif was_reachable and not is_reachable:
            logger.error("MongoDB connection lost: no readable server available")

    def closed(self, event: monitoring.TopologyClosedEvent) -> None:
        logger.info("MongoDB disconnected")


# ── Client Construction ───────────────────────────────────────────────────
def create_client(settings: Settings) -> AsyncMongoClient:
    """Build the process-wide client. Does not block on connecting."""
    return AsyncMongoClient(
        settings.mongodb_uri,
        maxPoolSize=settings.mongodb_max_pool_size,
        tz_aware=True,
        event_listeners=[ConnectionEventLogger()],
    )


def select_database(client: AsyncMongoClient, settings: Settings) -> AsyncDatabase:
    """Database named in the URI, or `settings.mongodb_database` when it names none."""
    return client.get_default_database(default=settings.mongodb_database)


async def ping(db: AsyncDatabase) -> bool:
    """Round-trip a `ping` command. Returns False instead of raising."""
    try:
        await db.command("ping")
    except Exception as e:
        logger.warning("MongoDB ping failed: %s", str(e))
        return False
    return True


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def open_database(app: FastAPI, settings: Settings) -> Tuple[AsyncMongoClient, AsyncDatabase]:
    """
    What:  Creates the client, selects the database and stores both on app.state.
    When:  Called once during application startup (lifespan handler).

    An unreachable server is logged, not raised: the process keeps serving
    and affected requests fail with 500 until the server comes back.
    """
    client = create_client(settings)
    db = select_database(client, settings)
    app.state.mongo_client = client
    app.state.mongo_db = db

    if await ping(db):
        logger.info("MongoDB connected successfully (database=%s)", db.name)
    else:
        logger.error("MongoDB connection error: initial ping failed (database=%s)", db.name)
    return client, db


async def close_database(app: FastAPI) -> None:
    """Closes the pooled client, if one was opened."""
    client = getattr(app.state, "mongo_client", None)
    if client is None:
        return
    await client.close()
    app.state.mongo_client = None
    app.state.mongo_db = None


# ── Database Dependency ───────────────────────────────────────────────────
async def get_database(request: Request) -> Any:
    """
    FastAPI dependency returning the database handle opened by the lifespan.

    Example usage in a route:
        @router.get("/dealers")
        async def list_dealers(db=Depends(get_database)):
            ...
    """
    db = getattr(request.app.state, "mongo_db", None)
    if db is None:
        raise RuntimeError("MongoDB is not initialized. open_database() runs on startup.")
    return db
