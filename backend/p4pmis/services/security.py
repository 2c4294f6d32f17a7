"""
P4P MIS Backend — Credential Verification
===========================================

What:  Password checks for UsersMIS records.
How:   Stored values starting with a bcrypt prefix ($2a$, $2b$, $2y$) are
       verified with bcrypt; anything else is a plaintext password compared
       in constant time, when plaintext is allowed.
Who:   AuthService (login); hash_password for producing bcrypt values.
"""

import hmac

import bcrypt

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def is_bcrypt_hash(stored: str) -> bool:
    return stored.startswith(BCRYPT_PREFIXES)


def hash_password(plain_password: str) -> str:
    """
    Salted bcrypt hash of a password.

    Helper only: nothing in the service writes to UsersMIS. Use it from a
    shell or script to produce the value stored on a record.
    """
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise ValueError("Password is empty.")
    return bcrypt.hashpw(password, bcrypt.gensalt()).decode("utf-8")


def verify_password(
    plain_password: str,
    stored_password: object,
    *,
    allow_plaintext: bool = True,
) -> bool:
    """
    Check a submitted password against the value stored on a credential record.

    bcrypt hashes are verified with bcrypt; anything else is treated as a
    plaintext password and compared in constant time, unless plaintext is
    disallowed.
    """
    if not isinstance(stored_password, str) or not isinstance(plain_password, str):
        return False

    if is_bcrypt_hash(stored_password):
        if not plain_password:
            return False
        try:
            return bcrypt.checkpw(plain_password.encode("utf-8"), stored_password.encode("utf-8"))
        except ValueError:
            # Malformed hash
            return False

    if not allow_plaintext:
        return False
    return hmac.compare_digest(plain_password.encode("utf-8"), stored_password.encode("utf-8"))
