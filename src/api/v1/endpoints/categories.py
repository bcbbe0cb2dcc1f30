"""Endpoints for shared categories."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_db_session, require_admin
from src.db.models.user import User
from src.schemas.category import CategoryCreate, CategoryRead
from src.services.categories import CategoryService


router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=List[CategoryRead])
async def list_categories(db: AsyncSession = Depends(get_db_session)):
    return await CategoryService(db).list_categories()


@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
async def create_category(
    body: CategoryCreate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
):
    created = await CategoryService(db).create_category(admin, body)
    await db.commit()
    return created
