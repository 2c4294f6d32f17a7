"""
P4P MIS Backend — Dashboard Service
=====================================

What:  Query-and-shape logic for the fixed dashboard routes.
How:   Each method issues the route's query (always a full collection read,
       a count, or a sample document) and reshapes the documents into the
       route's response model.
Who:   Called by the dashboard route handlers.

Shaping Overview:
    participants     → six fields coerced to string   (PARTICIPANT_SCHEMA)
    a2f / a2m        → eight / six fields to number   (A2F_SCHEMA / A2M_SCHEMA)
    leverages        → Amount summed per Entity + grand total
    market surveys   → six counts, queried concurrently
    productivity     → rows transposed into four parallel columns
    data structure   → key list of one sample document per profile collection
    dealers / coops  → verbatim
"""

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from p4pmis.coercion import FieldSpec, apply_schema, coerce_number, coerce_string
from p4pmis.exceptions import SchemaDiscoveryError
from p4pmis.models.records import (
    A2F_SCHEMA,
    A2M_SCHEMA,
    MARKET_SURVEY_COLLECTIONS,
    PARTICIPANT_SCHEMA,
    PRODUCTIVITY_COLUMNS,
    Collections,
)
from p4pmis.schemas.dashboard import (
    DataStructureResponse,
    DocumentListResponse,
    LeverageResponse,
    LeverageSummary,
    MarketSurveyCounts,
    MarketSurveyResponse,
    ProductivityResponse,
    ProductivitySeries,
)
from p4pmis.services.documents import count, fetch_all, fetch_one, query_errors

logger = logging.getLogger(__name__)


# ── Pure Shaping Functions ────────────────────────────────────────────────
# Kept free of I/O so they can be tested on plain lists of dicts.

def summarize_leverages(documents: Iterable[Mapping[str, Any]]) -> LeverageSummary:
    """Sum coerced Amount per Entity ('Unknown' when missing) and overall."""
    by_entity: Dict[str, Any] = {}
    total = 0
    for item in documents:
        entity = coerce_string(item.get("Entity"), default="Unknown")
        amount = coerce_number(item.get("Amount"))
        by_entity[entity] = by_entity.get(entity, 0) + amount
        total += amount
    return LeverageSummary(by_entity=by_entity, total_amount=total)


def transpose_productivity(documents: Iterable[Mapping[str, Any]]) -> ProductivitySeries:
    """Turn productivity rows into parallel column arrays, one entry per row."""
    columns: Dict[str, List[Any]] = {column: [] for column in PRODUCTIVITY_COLUMNS.values()}
    for item in documents:
        for field, column in PRODUCTIVITY_COLUMNS.items():
            columns[column].append(item.get(field))
    return ProductivitySeries(**columns)


def field_names(document: Optional[Mapping[str, Any]]) -> List[str]:
    return list(document.keys()) if document else []


def coerce_documents(
    documents: Iterable[Mapping[str, Any]],
    schema: Iterable[FieldSpec],
) -> List[Dict[str, Any]]:
    schema = tuple(schema)
    return [apply_schema(document, schema) for document in documents]


class DashboardService:
    """
    Stateless service; every method receives the database handle per call.

    Error Handling Strategy:
        Any failure while querying or shaping becomes a DatabaseError with the
        route's fixed message; /api/data-structure uses SchemaDiscoveryError.
    """

    async def _read_coerced(
        self,
        db: Any,
        collection: str,
        schema: Iterable[FieldSpec],
        operation: str,
    ) -> DocumentListResponse:
        with query_errors(operation):
            documents = await fetch_all(db, collection)
            return DocumentListResponse(data=coerce_documents(documents, schema))

    async def list_participants(self, db: Any) -> DocumentListResponse:
        return await self._read_coerced(
            db, Collections.PARTICIPANTS, PARTICIPANT_SCHEMA, "list_participants"
        )

    async def list_dealers(self, db: Any) -> DocumentListResponse:
        with query_errors("list_dealers", message="Error fetching dealers"):
            return DocumentListResponse(data=await fetch_all(db, Collections.DEALERS))

    async def list_cooperatives(self, db: Any) -> DocumentListResponse:
        with query_errors("list_cooperatives"):
            return DocumentListResponse(data=await fetch_all(db, Collections.COOPERATIVES))

    async def leverage_summary(self, db: Any) -> LeverageResponse:
        with query_errors("leverage_summary"):
            documents = await fetch_all(db, Collections.LEVERAGES)
            return LeverageResponse(data=summarize_leverages(documents))

    async def market_survey_counts(self, db: Any) -> MarketSurveyResponse:
        """
        Count every market survey collection concurrently.

        asyncio.gather propagates the first failure, so one failing count
        fails the whole response; there are no partial results.
        """
        with query_errors("market_survey_counts"):
            names = list(MARKET_SURVEY_COLLECTIONS)
            counts = await asyncio.gather(
                *(count(db, MARKET_SURVEY_COLLECTIONS[name]) for name in names)
            )
            return MarketSurveyResponse(data=MarketSurveyCounts(**dict(zip(names, counts))))

    async def productivity(self, db: Any) -> ProductivityResponse:
        with query_errors("productivity"):
            documents = await fetch_all(db, Collections.PRODUCTIVITY)
            return ProductivityResponse(data=transpose_productivity(documents))

    async def data_structure(self, db: Any) -> DataStructureResponse:
        """Key lists of the first participant, dealer and cooperative documents."""
        with query_errors(
            "data_structure",
            message="Error fetching data structure",
            error_class=SchemaDiscoveryError,
        ):
            participant = await fetch_one(db, Collections.PARTICIPANTS)
            dealer = await fetch_one(db, Collections.DEALERS)
            coop = await fetch_one(db, Collections.COOPERATIVES)
            return DataStructureResponse(
                participant=field_names(participant),
                dealer=field_names(dealer),
                coop=field_names(coop),
            )

    async def list_a2f(self, db: Any) -> DocumentListResponse:
        return await self._read_coerced(db, Collections.A2F, A2F_SCHEMA, "list_a2f")

    async def list_a2m(self, db: Any) -> DocumentListResponse:
        return await self._read_coerced(db, Collections.A2M, A2M_SCHEMA, "list_a2m")


# Singleton instance
dashboard_service = DashboardService()
