"""
Comment API Endpoints.
"""

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.v1.serializers import comment_to_dict
from storefront.core.database import get_db
from storefront.core.schemas import CamelModel, PageParams
from storefront.modules.community.comments import CommentService

router = APIRouter()


# ==================== Schemas ====================


class CreateCommentRequest(CamelModel):
    """Add comment to product."""

    text: str
    rating: int
    author_name: str
    author_email: str | None = None
    starred: bool = False


class UpdateCommentRequest(CamelModel):
    """Update comment."""

    text: str
    rating: int
    starred: bool = False


# ==================== Endpoints ====================


@router.get("/product/{product_id}")
async def get_comments(
    product_id: int,
    paging: PageParams = Depends(),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Get product comments, newest first."""
    comments = CommentService(db)
    page = await comments.get_comments(product_id, paging.page, paging.size)
    return page.to_dict(comment_to_dict)


@router.get("/product/{product_id}/starred")
async def get_starred_comments(
    product_id: int,
    paging: PageParams = Depends(),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Get starred product comments, newest first."""
    comments = CommentService(db)
    page = await comments.get_starred_comments(product_id, paging.page, paging.size)
    return page.to_dict(comment_to_dict)


@router.post("/product/{product_id}")
async def add_comment(
    product_id: int,
    request: CreateCommentRequest,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    comments = CommentService(db)
    comment = await comments.add_comment(
        product_id,
        text=request.text,
        rating=request.rating,
        author_name=request.author_name,
        author_email=request.author_email,
        starred=request.starred,
    )
    return comment_to_dict(comment)


@router.put("/{comment_id}")
async def update_comment(
    comment_id: int,
    request: UpdateCommentRequest,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    comments = CommentService(db)
    comment = await comments.update_comment(
        comment_id,
        text=request.text,
        rating=request.rating,
        starred=request.starred,
    )
    return comment_to_dict(comment)


@router.patch("/{comment_id}/toggle-star")
async def toggle_starred_comment(
    comment_id: int,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Flip the star flag of a comment."""
    comments = CommentService(db)
    comment = await comments.toggle_starred(comment_id)
    return comment_to_dict(comment)


@router.delete("/{comment_id}")
async def delete_comment(
    comment_id: int,
    db: AsyncSession = Depends(get_db),
) -> dict[str, str]:
    comments = CommentService(db)
    await comments.delete_comment(comment_id)
    return {"status": "deleted"}
