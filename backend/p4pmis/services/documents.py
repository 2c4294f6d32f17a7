"""
P4P MIS Backend — Document Access Helpers
===========================================

What:  Thin wrappers over the async collection API shared by all services,
       plus the error translation every service operation runs inside.
How:   `fetch_all` / `fetch_one` return JSON-safe dicts (see coercion.to_jsonable).
       `query_errors()` turns any non-application exception into a DatabaseError
       carrying the operation's fixed, caller-safe message.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Type

from p4pmis.coercion import to_jsonable
from p4pmis.exceptions import DatabaseError, P4PError

logger = logging.getLogger(__name__)


async def fetch_all(db: Any, collection: str) -> List[Dict[str, Any]]:
    """Every document of `collection`, unfiltered and unpaginated."""
    documents = await db[collection].find({}).to_list(length=None)
    return to_jsonable(documents)


async def fetch_one(db: Any, collection: str) -> Optional[Dict[str, Any]]:
    """First document of `collection` in natural order, or None if it is empty."""
    document = await db[collection].find_one({})
    return to_jsonable(document) if document is not None else None


async def count(db: Any, collection: str) -> int:
    return await db[collection].count_documents({})


@contextmanager
def query_errors(
    operation: str,
    message: str = "Error fetching data",
    error_class: Type[DatabaseError] = DatabaseError,
) -> Iterator[None]:
    """
    Run a query-and-shape block, re-raising failures as `error_class`.

    Application errors (P4PError) pass through unchanged.

    Example:
        with query_errors("list_dealers", "Error fetching dealers"):
            return await fetch_all(db, Collections.DEALERS)
    """
    try:
        yield
    except P4PError:
        raise
    except Exception as e:
        logger.error("%s failed: %s", operation, str(e), exc_info=True)
        raise error_class(
            message=message,
            context={"operation": operation, "original_error": type(e).__name__},
        ) from e
