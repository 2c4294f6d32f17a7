"""
P4P MIS Backend — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the few error kinds the API reports.
How:   Each exception carries a caller-safe message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return JSON error bodies with the matching HTTP status code.
Who:   Raised by services; caught by global handlers.

Exception Hierarchy:
    P4PError (base)
    ├── AuthenticationError          → 401 Unauthorized
    ├── CollectionNotAllowedError    → 403 Forbidden
    └── DatabaseError                → 500 Internal Server Error
        └── SchemaDiscoveryError     → 500 (body uses the `error` key)

`message` is returned to the client verbatim. `context` is logged only.
"""

from typing import Any, Dict, Optional


class P4PError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "Server error",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class AuthenticationError(P4PError):
    """
    Raised when a username/password pair matches no credential record.

    HTTP:    401 Unauthorized
    The message is the same whether the username or the password was wrong.
    """

    def __init__(
        self,
        message: str = "Invalid credentials",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class CollectionNotAllowedError(P4PError):
    """
    Raised when the generic collection route is asked for a collection that
    is not on the configured allow-list.

    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        collection: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["collection"] = collection
        super().__init__(message="Collection not available", context=ctx)
        self.collection = collection


class DatabaseError(P4PError):
    """
    Raised when a query, or shaping its result, fails.

    HTTP:    500 Internal Server Error
    Each operation passes its own fixed message ("Error fetching data",
    "Error fetching collections", ...). The driver error is recorded in
    `context` and never returned to the client.
    """

    def __init__(
        self,
        message: str = "Error fetching data",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class SchemaDiscoveryError(DatabaseError):
    """
    DatabaseError raised by GET /api/data-structure.

    That route's body has no `success` flag, so its error body is
    `{"error": message}` instead of the usual envelope.
    """

    def __init__(
        self,
        message: str = "Error fetching data structure",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
