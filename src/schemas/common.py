"""Shared schema building blocks."""
from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


T = TypeVar("T")


class CamelModel(BaseModel):
    """Base schema exchanging camelCase keys on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PaginationMeta(CamelModel):
    """Position of a page within the full result set."""

    page: int = Field(..., description="1-based page number")
    limit: int = Field(..., description="Page size")
    total: int = Field(..., description="Records matching the filter")
    total_pages: int = Field(..., description="ceil(total / limit)")


class Page(CamelModel, Generic[T]):
    """One page of results plus its pagination envelope."""

    data: List[T]
    pagination: PaginationMeta
