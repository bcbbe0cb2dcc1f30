"""Repository for category records."""
from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models.category import Category


class CategoryRepo:
    """Data-access helpers for :class:`Category`."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_all(self) -> list[Category]:
        result = await self.session.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())

    async def get_by_name(self, name: str) -> Category | None:
        result = await self.session.execute(select(Category).where(Category.name == name))
        return result.scalar_one_or_none()

    async def create(
        self, name: str, color: Optional[str] = None, icon: Optional[str] = None
    ) -> Category:
        category = Category(name=name, color=color, icon=icon)
        self.session.add(category)
        await self.session.flush()
        await self.session.refresh(category)
        return category
