"""Endpoints describing the authenticated caller."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from src.api.deps import get_current_user
from src.db.models.user import User
from src.schemas.user import UserRead


router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=UserRead)
async def me(user: User = Depends(get_current_user)):
    return user
