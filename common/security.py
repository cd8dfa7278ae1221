"""
SpareLink - Security Utilities
================================
Identity-provider token verification.

The external identity provider signs a JWT per session; its `sub` claim is
the external user id that maps onto `users.external_id`. The token arrives
either as `Authorization: Bearer <token>` or in the session cookie.
"""

import logging
from datetime import timedelta
from typing import Optional

from fastapi import Request
from jose import jwt, JWTError

from config.settings import (
    IDENTITY_SECRET_KEY, IDENTITY_ALGORITHM, IDENTITY_ISSUER,
    IDENTITY_TOKEN_EXPIRE_MINUTES, AUTH_COOKIE_NAME,
)
from common.helpers import now_utc

logger = logging.getLogger("sparelink.security")


# ==========================================
# JWT Tokens
# ==========================================

def create_identity_token(external_id: str, **claims) -> str:
    """Mint an identity token (local development, seeding and tests)."""
    to_encode = dict(claims)
    to_encode["sub"] = external_id
    to_encode["exp"] = now_utc() + timedelta(minutes=IDENTITY_TOKEN_EXPIRE_MINUTES)
    if IDENTITY_ISSUER:
        to_encode["iss"] = IDENTITY_ISSUER
    return jwt.encode(to_encode, IDENTITY_SECRET_KEY, algorithm=IDENTITY_ALGORITHM)


def decode_identity_token(token: str) -> Optional[dict]:
    """Verify an identity token. Returns payload or None."""
    options = {}
    kwargs = {}
    if IDENTITY_ISSUER:
        kwargs["issuer"] = IDENTITY_ISSUER
    else:
        options["verify_iss"] = False
    try:
        return jwt.decode(
            token, IDENTITY_SECRET_KEY,
            algorithms=[IDENTITY_ALGORITHM],
            options=options, **kwargs,
        )
    except JWTError as e:
        logger.debug("Rejected identity token: %s", e)
        return None


# ==========================================
# Request helpers
# ==========================================

def get_request_token(request: Request) -> Optional[str]:
    """Raw token from the Authorization header, falling back to the session cookie."""
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        token = header[7:].strip()
        if token:
            return token
    return request.cookies.get(AUTH_COOKIE_NAME) or None


def get_caller_external_id(request: Request) -> Optional[str]:
    """External id of the caller, or None when no valid token is present."""
    token = get_request_token(request)
    if not token:
        return None
    payload = decode_identity_token(token)
    if not payload:
        return None
    return payload.get("sub") or None
