"""Pydantic schemas for User resources"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from src.db.models.enums import UserRole
from src.schemas.common import CamelModel


class UserRead(CamelModel):
    """Schema returned when reading a user."""

    id: UUID
    email: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    role: UserRole
    created_at: Optional[datetime] = None


class UserRoleUpdate(CamelModel):
    role: str = Field(..., description="ADMIN or USER")
