"""
P4P MIS Backend — Dashboard Response Schemas
==============================================

What:  Pydantic models defining the JSON returned by the read routes.
How:   Documents are already JSON-safe dicts by the time they reach these models
       (see coercion.to_jsonable), so `data` items are typed as plain dicts.

Envelope:
    Every body carries `success` plus one payload key (`data`, `collections`),
    except DataStructureResponse which is a bare key listing.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

Number = Union[int, float]


# ══════════════════════════════════════════════════════════════════════════
# Response Models: what the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class DocumentListResponse(BaseModel):
    """Full-collection read: every document, in natural order."""
    success: bool = True
    data: List[Dict[str, Any]] = Field(description="Documents of the collection")


class CollectionNamesResponse(BaseModel):
    success: bool = True
    collections: List[str] = Field(description="Names of all collections in the database")


class LeverageSummary(BaseModel):
    """
    What:  Leverage amounts summed per entity, plus the grand total.
    Serialized with camelCase keys (`byEntity`, `totalAmount`) for the dashboard.
    """
    model_config = {"populate_by_name": True}

    by_entity: Dict[str, Number] = Field(
        alias="byEntity",
        description="Entity name → summed Amount ('Unknown' when Entity is missing)",
    )
    total_amount: Number = Field(
        alias="totalAmount",
        description="Sum of Amount over all leverage records",
    )


class LeverageResponse(BaseModel):
    success: bool = True
    data: LeverageSummary


class MarketSurveyCounts(BaseModel):
    """Document count of each sector's market survey collection."""
    aqua: int
    cattle: int
    fh: int
    maize: int
    poultry: int
    qsr: int


class MarketSurveyResponse(BaseModel):
    success: bool = True
    data: MarketSurveyCounts


class ProductivitySeries(BaseModel):
    """
    What:  Productivity records transposed into four parallel arrays.
    How:   Index i of every array comes from the i-th document; the chart zips
           them back together. Missing fields appear as null.
    """
    sectors: List[Optional[Any]]
    baseline: List[Optional[Any]]
    earlyassessment: List[Optional[Any]]
    growth: List[Optional[Any]]


class ProductivityResponse(BaseModel):
    success: bool = True
    data: ProductivitySeries


class DataStructureResponse(BaseModel):
    """Field names of one sample document per profile collection."""
    participant: List[str]
    dealer: List[str]
    coop: List[str]


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Error body for every route except /api/data-structure.

    Example:
        {"success": false, "message": "Invalid credentials"}
    """
    success: bool = False
    message: str = Field(description="Human-readable error description")


class SchemaErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="MongoDB connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
