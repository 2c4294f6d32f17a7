"""
P4P MIS Backend — Collection Route Handlers
=============================================

What:  GET /api/collections (names) and GET /api/collections/{name} (documents).
How:   Delegates to CollectionService; the named read is allow-list checked.
Who:   Called by the dashboard's data explorer view.
"""

from typing import Any

from fastapi import APIRouter, Depends

from p4pmis.database import get_database
from p4pmis.schemas.dashboard import (
    CollectionNamesResponse,
    DocumentListResponse,
    ErrorResponse,
)
from p4pmis.services.collection_service import collection_service

router = APIRouter(prefix="/api", tags=["Collections"])


@router.get(
    "/collections",
    response_model=CollectionNamesResponse,
    responses={500: {"description": "Error fetching collections", "model": ErrorResponse}},
    summary="List collection names",
)
async def list_collections(db: Any = Depends(get_database)) -> CollectionNamesResponse:
    return await collection_service.list_names(db)


@router.get(
    "/collections/{collection_name}",
    response_model=DocumentListResponse,
    responses={
        403: {"description": "Collection is not on the allow-list", "model": ErrorResponse},
        500: {"description": "Error fetching data", "model": ErrorResponse},
    },
    summary="Read every document of a collection",
    description=(
        "Returns the whole collection, unfiltered and unpaginated. "
        "Only allow-listed collections can be read (ALLOWED_COLLECTIONS)."
    ),
)
async def read_collection(
    collection_name: str,
    db: Any = Depends(get_database),
) -> DocumentListResponse:
    return await collection_service.read_collection(db, collection_name)
