"""
P4P MIS Backend — Collection Service
======================================

What:  Backs GET /api/collections and GET /api/collections/{name}.
How:   Lists collection names, and reads a whole collection after checking
       its name against the configured allow-list.
Who:   Called by the collections route handlers.
"""

import logging
from typing import Any, FrozenSet, Optional

from p4pmis.config import settings
from p4pmis.exceptions import CollectionNotAllowedError
from p4pmis.schemas.dashboard import CollectionNamesResponse, DocumentListResponse
from p4pmis.services.documents import fetch_all, query_errors

logger = logging.getLogger(__name__)


class CollectionService:
    """
    Generic collection access.

    The allow-list is read from settings unless one is passed explicitly;
    `allowlist_enabled=False` makes every collection readable.
    """

    def __init__(
        self,
        allowed: Optional[FrozenSet[str]] = None,
        allowlist_enabled: Optional[bool] = None,
    ):
        self._allowed = allowed
        self._allowlist_enabled = allowlist_enabled

    @property
    def allowed(self) -> FrozenSet[str]:
        if self._allowed is None:
            return settings.allowed_collections_set
        return self._allowed

    @property
    def allowlist_enabled(self) -> bool:
        if self._allowlist_enabled is None:
            return settings.collection_allowlist_enabled
        return self._allowlist_enabled

    def ensure_allowed(self, collection: str) -> None:
        """Raise CollectionNotAllowedError unless `collection` may be read."""
        if self.allowlist_enabled and collection not in self.allowed:
            logger.warning("Rejected read of collection %r (not on allow-list)", collection)
            raise CollectionNotAllowedError(collection)

    async def list_names(self, db: Any) -> CollectionNamesResponse:
        with query_errors("list_collections", message="Error fetching collections"):
            names = await db.list_collection_names()
        return CollectionNamesResponse(collections=list(names))

    async def read_collection(self, db: Any, collection: str) -> DocumentListResponse:
        """
        Every document of `collection`, verbatim.

        Raises:
            CollectionNotAllowedError: the name is not on the allow-list
                (checked before any query is sent)
            DatabaseError: the query failed
        """
        self.ensure_allowed(collection)
        with query_errors("read_collection", message="Error fetching data"):
            data = await fetch_all(db, collection)
        return DocumentListResponse(data=data)


# Singleton instance
collection_service = CollectionService()
