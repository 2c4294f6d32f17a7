"""
P4P MIS Backend — Login Request/Response Schemas
==================================================

What:  Pydantic models for POST /api/login.
How:   LoginRequest accepts any JSON value for each field; AuthService rejects
       missing or non-string credentials with 401 before any query runs.
"""

from typing import Any

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """
    Credentials submitted by the dashboard login form.

    Fields are typed loosely so a malformed body answers like a failed login.
    Operator objects such as {"$ne": null} are refused by AuthService and
    never reach the query.
    """
    username: Any = Field(default=None, description="Account username")
    password: Any = Field(default=None, description="Account password")


class LoginUser(BaseModel):
    """
    What:  Public profile of the authenticated account.
    Why these fields: the dashboard shows `name` and gates views on `role`.
    """
    username: str
    role: str = Field(description="Stored role, or 'user' when absent")
    name: str = Field(description="Stored display name, or the username when absent")


class LoginResponse(BaseModel):
    success: bool = True
    user: LoginUser
