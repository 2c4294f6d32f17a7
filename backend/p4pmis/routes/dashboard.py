"""
P4P MIS Backend — Dashboard Route Handlers
============================================

What:  Fixed-collection read routes feeding the dashboard charts and tables.
How:   Each handler is one call into DashboardService.
Who:   Called by the dashboard frontend.

Route Inventory:
    GET /api/participants     ParticipantPROFILE, string-coerced fields
    GET /api/dealers          DealerPROFILE, verbatim
    GET /api/cooperatives     CoOpPROFILE, verbatim
    GET /api/leverages        Leverages, summed per entity
    GET /api/market-surveys   six MarketSurvey* counts
    GET /api/productivity     Productivity, transposed to columns
    GET /api/data-structure   field names of sample profile documents
    GET /api/a2f              A2F, number-coerced fields
    GET /api/a2m              A2M, number-coerced fields
"""

from typing import Any

from fastapi import APIRouter, Depends

from p4pmis.database import get_database
from p4pmis.schemas.dashboard import (
    DataStructureResponse,
    DocumentListResponse,
    ErrorResponse,
    LeverageResponse,
    MarketSurveyResponse,
    ProductivityResponse,
    SchemaErrorResponse,
)
from p4pmis.services.dashboard_service import dashboard_service

router = APIRouter(prefix="/api", tags=["Dashboard"])

_ERRORS = {500: {"description": "Error fetching data", "model": ErrorResponse}}


@router.get(
    "/participants",
    response_model=DocumentListResponse,
    responses=_ERRORS,
    summary="Participant profiles",
)
async def list_participants(db: Any = Depends(get_database)) -> DocumentListResponse:
    return await dashboard_service.list_participants(db)


@router.get(
    "/dealers",
    response_model=DocumentListResponse,
    responses={500: {"description": "Error fetching dealers", "model": ErrorResponse}},
    summary="Dealer profiles",
)
async def list_dealers(db: Any = Depends(get_database)) -> DocumentListResponse:
    return await dashboard_service.list_dealers(db)


@router.get(
    "/cooperatives",
    response_model=DocumentListResponse,
    responses=_ERRORS,
    summary="Cooperative profiles",
)
async def list_cooperatives(db: Any = Depends(get_database)) -> DocumentListResponse:
    return await dashboard_service.list_cooperatives(db)


@router.get(
    "/leverages",
    response_model=LeverageResponse,
    responses=_ERRORS,
    summary="Leverage amounts per entity",
)
async def leverage_summary(db: Any = Depends(get_database)) -> LeverageResponse:
    return await dashboard_service.leverage_summary(db)


@router.get(
    "/market-surveys",
    response_model=MarketSurveyResponse,
    responses=_ERRORS,
    summary="Market survey counts per sector",
)
async def market_survey_counts(db: Any = Depends(get_database)) -> MarketSurveyResponse:
    return await dashboard_service.market_survey_counts(db)


@router.get(
    "/productivity",
    response_model=ProductivityResponse,
    responses=_ERRORS,
    summary="Productivity series for the sector chart",
)
async def productivity(db: Any = Depends(get_database)) -> ProductivityResponse:
    return await dashboard_service.productivity(db)


@router.get(
    "/data-structure",
    response_model=DataStructureResponse,
    responses={500: {"description": "Error fetching data structure", "model": SchemaErrorResponse}},
    summary="Field names of sample profile documents",
)
async def data_structure(db: Any = Depends(get_database)) -> DataStructureResponse:
    return await dashboard_service.data_structure(db)


@router.get(
    "/a2f",
    response_model=DocumentListResponse,
    responses=_ERRORS,
    summary="Access-to-finance records",
)
async def list_a2f(db: Any = Depends(get_database)) -> DocumentListResponse:
    return await dashboard_service.list_a2f(db)


@router.get(
    "/a2m",
    response_model=DocumentListResponse,
    responses=_ERRORS,
    summary="Access-to-market records",
)
async def list_a2m(db: Any = Depends(get_database)) -> DocumentListResponse:
    return await dashboard_service.list_a2m(db)
