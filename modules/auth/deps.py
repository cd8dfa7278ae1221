"""
Auth Module - Dependencies
===========================
FastAPI dependencies for caller identification and authorization.
These are injected into route handlers via Depends().

The identity provider owns authentication; here we only verify its token
and map the external id onto a local User row.
"""

from typing import Optional

from fastapi import Request, Depends
from sqlalchemy.orm import Session

from config.database import get_db
from common.exceptions import AuthenticationError, AuthorizationError, NotFoundError
from common.security import get_caller_external_id
from modules.user.models import User
from modules.user.service import user_service


def get_caller_identity(request: Request) -> Optional[str]:
    """External id from the identity token, or None."""
    return get_caller_external_id(request)


def require_identity(external_id: Optional[str] = Depends(get_caller_identity)) -> str:
    """Require a valid identity token. Raises 401 if missing."""
    if not external_id:
        raise AuthenticationError("Unauthorized")
    return external_id


def get_current_user(
    external_id: Optional[str] = Depends(get_caller_identity),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """
    Identify the current user from the identity token.
    Returns User object or None.
    """
    if not external_id:
        return None
    return user_service.get_by_external_id(db, external_id)


def require_user(
    external_id: str = Depends(require_identity),
    db: Session = Depends(get_db),
) -> User:
    """Require an identity that maps onto a local user (401 / 404)."""
    user = user_service.get_by_external_id(db, external_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def require_admin(
    external_id: str = Depends(require_identity),
    db: Session = Depends(get_db),
) -> User:
    """Only allow ADMIN users. 401 without identity, 403 otherwise."""
    user = user_service.get_by_external_id(db, external_id)
    if not user or not user.is_admin:
        raise AuthorizationError("Forbidden")
    return user
