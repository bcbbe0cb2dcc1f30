"""Admin endpoints for managing users."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_db_session, require_admin
from src.schemas.user import UserRead, UserRoleUpdate
from src.services.users import UserService


router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(require_admin)])


@router.get("", response_model=List[UserRead])
async def list_users(db: AsyncSession = Depends(get_db_session)):
    return await UserService(db).list_users()


@router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: str, db: AsyncSession = Depends(get_db_session)):
    return await UserService(db).get_user(user_id)


@router.put("/{user_id}/role", response_model=UserRead)
async def update_user_role(
    user_id: str,
    body: UserRoleUpdate,
    db: AsyncSession = Depends(get_db_session),
):
    user = await UserService(db).update_role(user_id, body.role)
    await db.commit()
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: str, db: AsyncSession = Depends(get_db_session)):
    await UserService(db).delete_user(user_id)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
