"""Pydantic schemas for Category resources"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from src.schemas.common import CamelModel


class CategoryCreate(CamelModel):
    """Schema for creating a category."""

    name: Optional[str] = Field(default=None, description="Unique category name")
    color: Optional[str] = Field(default=None, description="Display colour, e.g. #FF6B6B")
    icon: Optional[str] = Field(default=None, description="Icon identifier")


class CategoryRead(CamelModel):
    """Schema returned when reading a category."""

    id: UUID
    name: str
    color: Optional[str] = None
    icon: Optional[str] = None
    created_at: Optional[datetime] = None
