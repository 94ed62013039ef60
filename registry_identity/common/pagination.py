"""Page-based pagination helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from fastapi import Query
from pydantic import BaseModel, Field
from sqlalchemy import Select
from sqlalchemy.orm import Session

from registry_identity.core.config import settings

T = TypeVar("T")

MAX_PER_PAGE = 100


class PaginationParams(BaseModel):
    """Page-based pagination (1-based page number)."""

    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=10, ge=1, le=MAX_PER_PAGE)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


@dataclass
class Page(Generic[T]):
    """One page of results and whether the following page has any rows."""

    items: list[T]
    more: bool


def pagination_params(
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    per_page: int | None = Query(
        None, ge=1, le=MAX_PER_PAGE, description=f"Page size (max {MAX_PER_PAGE})"
    ),
) -> PaginationParams:
    """Dependency for page-based pagination."""
    return PaginationParams(page=page, per_page=per_page or settings.UPDATES_PER_PAGE)


def paginate(db: Session, stmt: Select, params: PaginationParams) -> Page[Any]:
    """Execute ``stmt`` for one page.

    One extra row is fetched so ``more`` is true exactly when the next page
    would be non-empty.
    """
    rows = db.execute(stmt.offset(params.offset).limit(params.per_page + 1)).all()
    return Page(items=list(rows[: params.per_page]), more=len(rows) > params.per_page)
