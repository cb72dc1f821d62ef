"""
Comment Service - Product comments with ratings.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.exceptions import NotFoundError, ValidationFailedError
from storefront.core.pagination import Page, paginate
from storefront.models.community import Comment
from storefront.models.shop import Product


def _validate_comment(text: str | None, rating: int | None) -> None:
    if not text or not text.strip():
        raise ValidationFailedError("Comment text is required")
    if len(text) > 1000:
        raise ValidationFailedError("Comment text must be at most 1000 characters")
    if rating is None or not 1 <= rating <= 5:
        raise ValidationFailedError("Rating must be between 1 and 5")


class CommentService:
    """
    Service for product comments.

    Usage:
        comments = CommentService(db_session)
        page = await comments.get_comments(product_id, page=0, size=10)
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize comment service with database session."""
        self.db = db

    async def get_comments(
        self,
        product_id: int,
        page: int = 0,
        size: int = 10,
    ) -> Page[Comment]:
        """Get comments on a product, newest first."""
        query = (
            select(Comment)
            .where(Comment.product_id == product_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        )
        return await paginate(self.db, query, page, size)

    async def get_starred_comments(
        self,
        product_id: int,
        page: int = 0,
        size: int = 10,
    ) -> Page[Comment]:
        query = (
            select(Comment)
            .where(Comment.product_id == product_id, Comment.starred == True)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        )
        return await paginate(self.db, query, page, size)

    async def get_comment(self, comment_id: int) -> Comment:
        comment = await self.db.get(Comment, comment_id)
        if not comment:
            raise NotFoundError(f"Comment not found with id: {comment_id}")
        return comment

    async def add_comment(
        self,
        product_id: int,
        text: str,
        rating: int,
        author_name: str,
        author_email: str | None = None,
        starred: bool = False,
    ) -> Comment:
        """
        Add comment to a product.

        Args:
            product_id: Commented product
            text: Comment body
            rating: 1-5 stars
            author_name: Display name of the author
            author_email: Optional contact email
            starred: Highlight the comment

        Returns:
            Created comment
        """
        if not await self.db.get(Product, product_id):
            raise NotFoundError(f"Product not found with id: {product_id}")
        _validate_comment(text, rating)
        if not author_name or not author_name.strip():
            raise ValidationFailedError("Author name is required")

        comment = Comment(
            product_id=product_id,
            text=text,
            rating=rating,
            author_name=author_name,
            author_email=author_email,
            starred=starred,
        )
        self.db.add(comment)
        await self.db.flush()
        return comment

    async def update_comment(
        self,
        comment_id: int,
        text: str,
        rating: int,
        starred: bool,
    ) -> Comment:
        """Update comment text, rating and star flag."""
        comment = await self.get_comment(comment_id)
        _validate_comment(text, rating)

        comment.text = text
        comment.rating = rating
        comment.starred = starred

        await self.db.flush()
        return comment

    async def toggle_starred(self, comment_id: int) -> Comment:
        """Flip the comment's star flag."""
        comment = await self.get_comment(comment_id)
        comment.starred = not comment.starred
        await self.db.flush()
        return comment

    async def delete_comment(self, comment_id: int) -> None:
        comment = await self.get_comment(comment_id)
        await self.db.delete(comment)
        await self.db.flush()
