"""
P4P MIS Backend — Login Route Handler
=======================================

What:  Handles POST /api/login.
How:   Validates the JSON body, delegates to AuthService, returns the user profile.
Who:   Called by the dashboard login form.

Error responses (handled by global exception handlers):
    HTTP 401: no credential record matches, or the body is missing, not JSON,
              or carries non-string username/password
    HTTP 500: credential query failed ("Server error")
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends

from p4pmis.database import get_database
from p4pmis.schemas.auth import LoginRequest, LoginResponse
from p4pmis.schemas.dashboard import ErrorResponse
from p4pmis.services.auth_service import auth_service

router = APIRouter(prefix="/api", tags=["Auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        401: {"description": "Invalid credentials", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Check a username/password pair",
)
async def login(
    payload: Optional[LoginRequest] = None,
    db: Any = Depends(get_database),
) -> LoginResponse:
    if payload is None:
        payload = LoginRequest()
    return await auth_service.login(db, payload.username, payload.password)
