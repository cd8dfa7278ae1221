"""
User Module - API Routes
==========================
Identity-provider callback, onboarding and role lookup.

Endpoints:
  POST /api/auth/callback — create the local user on first sign-in
  POST /api/onboarding    — save profile + role
  GET  /api/role          — role of a user (dashboard switches on it)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from config.database import get_db
from common.exceptions import ValidationError, NotFoundError
from modules.auth.deps import require_identity
from modules.user.service import user_service


router = APIRouter(prefix="/api", tags=["users"])


# ==========================================
# Schemas
# ==========================================

class IdentityCallback(BaseModel):
    email: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    imageUrl: Optional[str] = None


class OnboardingRequest(BaseModel):
    externalId: Optional[str] = None
    email: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[str] = None


# ==========================================
# POST /api/auth/callback
# ==========================================

@router.post("/auth/callback")
async def identity_callback(
    body: IdentityCallback,
    external_id: str = Depends(require_identity),
    db: Session = Depends(get_db),
):
    """Called after the identity provider signs a user in."""
    user = user_service.sync_identity(
        db, external_id,
        email=body.email,
        first_name=body.firstName,
        last_name=body.lastName,
        image_url=body.imageUrl,
    )
    db.commit()
    return {
        "success": True,
        "userId": user.id,
        "hasCompletedOnboarding": user.has_completed_onboarding,
    }


# ==========================================
# POST /api/onboarding
# ==========================================

@router.post("/onboarding")
async def onboarding(
    body: OnboardingRequest,
    db: Session = Depends(get_db),
):
    user = user_service.complete_onboarding(db, body.model_dump())
    db.commit()
    return {"success": True, "user": user.contact()}


# ==========================================
# GET /api/role
# ==========================================

@router.get("/role")
async def get_role(
    externalId: str = Query(None),
    db: Session = Depends(get_db),
):
    if not externalId:
        raise ValidationError("Missing user ID")
    role = user_service.get_role(db, externalId)
    if role is None:
        raise NotFoundError("User not found")
    return {"role": role}
