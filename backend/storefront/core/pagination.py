"""
Page-number pagination over SQLAlchemy select statements.
"""

from dataclasses import dataclass
from math import ceil
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of results plus the total row count."""

    items: list[T]
    total: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return ceil(self.total / self.size)

    def to_dict(self, serialize: Any) -> dict[str, Any]:
        return {
            "items": [serialize(item) for item in self.items],
            "page": self.page,
            "size": self.size,
            "totalElements": self.total,
            "totalPages": self.total_pages,
        }


async def paginate(db: AsyncSession, query: Select, page: int, size: int) -> Page:
    """
    Execute ``query`` for a single zero-based page.

    Args:
        db: Database session
        query: Ordered select statement
        page: Zero-based page number
        size: Page size

    Returns:
        Page with items and total count
    """
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar_one()

    result = await db.execute(query.limit(size).offset(page * size))
    return Page(
        items=list(result.scalars().unique().all()),
        total=total,
        page=page,
        size=size,
    )
