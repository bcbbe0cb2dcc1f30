"""Category operations."""
from __future__ import annotations

import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import ForbiddenError, ValidationError
from src.db.models.user import User
from src.repositories.category_repo import CategoryRepo
from src.schemas.category import CategoryCreate, CategoryRead


logger = logging.getLogger(__name__)


class CategoryService:
    """Reads are open to everyone, creation is reserved for admins."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.repo = CategoryRepo(session)

    async def list_categories(self) -> List[CategoryRead]:
        return [CategoryRead.model_validate(c) for c in await self.repo.list_all()]

    async def create_category(self, actor: User | None, data: CategoryCreate) -> CategoryRead:
        if actor is None or not actor.is_admin:
            raise ForbiddenError()

        name = (data.name or "").strip()
        if not name:
            raise ValidationError("Category name is required")
        if await self.repo.get_by_name(name) is not None:
            raise ValidationError("Category name already exists")

        try:
            # A concurrent create can still win the race on the unique index.
            async with self.session.begin_nested():
                category = await self.repo.create(name=name, color=data.color, icon=data.icon)
        except IntegrityError:
            raise ValidationError("Category name already exists") from None
        logger.info(f"Category {name!r} created by {actor.id}")
        return CategoryRead.model_validate(category)
