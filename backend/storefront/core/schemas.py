"""
Shared request schema pieces.
"""

from fastapi import Query
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from storefront.core.config import settings


class CamelModel(BaseModel):
    """Request body accepting camelCase keys as well as field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PageParams:
    """Zero-based ``page`` and ``size`` query parameters."""

    def __init__(
        self,
        page: int = Query(0, ge=0, description="Zero-based page number"),
        size: int = Query(
            settings.default_page_size,
            ge=1,
            le=settings.max_page_size,
            description="Page size",
        ),
    ) -> None:
        self.page = page
        self.size = size
