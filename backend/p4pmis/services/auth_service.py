"""
P4P MIS Backend — Auth Service
================================

What:  Credential check behind POST /api/login.
How:   Looks up UsersMIS records by username and verifies the submitted password
       against each candidate (bcrypt hash or plaintext, see security.py).
Who:   Called by the login route handler.

No session or token is issued; the dashboard keeps the returned user profile
client-side.
"""

import logging
from typing import Any, Dict, Optional

from p4pmis.config import settings
from p4pmis.exceptions import AuthenticationError
from p4pmis.models.records import Collections
from p4pmis.schemas.auth import LoginResponse, LoginUser
from p4pmis.services.documents import query_errors
from p4pmis.services.security import verify_password

logger = logging.getLogger(__name__)


class AuthService:
    """
    Stateless login logic.

    Error Handling Strategy:
        Missing or non-string   → AuthenticationError (401, "Invalid credentials")
        No matching record      → AuthenticationError (401, "Invalid credentials")
        Query failure           → DatabaseError (500, "Server error")
    """

    def __init__(self, allow_plaintext: Optional[bool] = None):
        self._allow_plaintext = allow_plaintext

    @property
    def allow_plaintext(self) -> bool:
        if self._allow_plaintext is None:
            return settings.allow_plaintext_passwords
        return self._allow_plaintext

    async def find_user(self, db: Any, username: str, password: str) -> Optional[Dict[str, Any]]:
        """First credential record for `username` whose password verifies, else None."""
        cursor = db[Collections.USERS].find({"username": username})
        async for candidate in cursor:
            if verify_password(
                password,
                candidate.get("password"),
                allow_plaintext=self.allow_plaintext,
            ):
                return candidate
        return None

    async def login(self, db: Any, username: Any, password: Any) -> LoginResponse:
        """
        Verify a username/password pair.

        Returns:
            LoginResponse with the stored role (default "user") and display
            name (default: the username).

        Raises:
            AuthenticationError: a credential is missing or not a string, or
                no record matches the pair
            DatabaseError: the credential query failed
        """
        if not isinstance(username, str) or not isinstance(password, str):
            logger.info("Login rejected: malformed credentials")
            raise AuthenticationError(context={"reason": "malformed credentials"})

        with query_errors("login", message="Server error"):
            user = await self.find_user(db, username, password)

        if user is None:
            logger.info("Login rejected for username=%r", username)
            raise AuthenticationError(context={"username": username})

        stored_username = user.get("username") or username
        logger.info("Login succeeded for username=%r", stored_username)
        return LoginResponse(
            user=LoginUser(
                username=str(stored_username),
                role=str(user.get("role") or "user"),
                name=str(user.get("name") or stored_username),
            ),
        )


# Singleton instance
auth_service = AuthService()
