"""
Product Question Service - Moderated Q&A on product pages.

Questions are public until reported often enough and are never removed
from the database; deletion only clears the ``active`` flag.
"""

from datetime import datetime

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.config import settings
from storefront.core.exceptions import NotFoundError, ValidationFailedError
from storefront.core.pagination import Page, paginate
from storefront.models.community import ProductQuestion
from storefront.models.shop import Product
from storefront.modules.accounts.service import UserService

SORTABLE_FIELDS = {
    "askedAt": ProductQuestion.asked_at,
    "helpfulVotes": ProductQuestion.helpful_votes,
    "answeredAt": ProductQuestion.answered_at,
}


class ProductQuestionService:
    """
    Service for product questions, votes and reports.

    Usage:
        questions = ProductQuestionService(db_session)
        await questions.report_question(question_id)
    """

    def __init__(self, db: AsyncSession, report_threshold: int | None = None) -> None:
        """Initialize product question service with database session."""
        self.db = db
        self.users = UserService(db)
        if report_threshold is None:
            report_threshold = settings.question_report_threshold
        self.report_threshold = report_threshold

    # ==================== Queries ====================

    async def get_product_questions(
        self,
        product_id: int,
        page: int = 0,
        size: int = 10,
        sort_by: str = "askedAt",
        descending: bool = True,
    ) -> Page[ProductQuestion]:
        """Get visible questions on a product."""
        column = SORTABLE_FIELDS.get(sort_by)
        if column is None:
            raise ValidationFailedError(f"Cannot sort questions by: {sort_by}")

        query = (
            select(ProductQuestion)
            .where(
                ProductQuestion.product_id == product_id,
                ProductQuestion.public_question == True,
                ProductQuestion.active == True,
            )
            .order_by(column.desc() if descending else column.asc(), ProductQuestion.id)
        )
        return await paginate(self.db, query, page, size)

    async def get_user_questions(
        self,
        user_id: int,
        page: int = 0,
        size: int = 10,
    ) -> Page[ProductQuestion]:
        query = (
            select(ProductQuestion)
            .where(ProductQuestion.user_id == user_id, ProductQuestion.active == True)
            .order_by(ProductQuestion.asked_at.desc(), ProductQuestion.id.desc())
        )
        return await paginate(self.db, query, page, size)

    async def get_unanswered_questions(
        self,
        page: int = 0,
        size: int = 10,
    ) -> Page[ProductQuestion]:
        """Get open questions across all products, oldest first."""
        query = (
            select(ProductQuestion)
            .where(ProductQuestion.answered == False, ProductQuestion.active == True)
            .order_by(ProductQuestion.asked_at.asc(), ProductQuestion.id)
        )
        return await paginate(self.db, query, page, size)

    async def get_most_helpful_questions(
        self,
        product_id: int,
        page: int = 0,
        size: int = 5,
    ) -> Page[ProductQuestion]:
        return await self.get_product_questions(
            product_id, page, size, sort_by="helpfulVotes", descending=True
        )

    async def get_question(self, question_id: int) -> ProductQuestion:
        question = await self.db.get(ProductQuestion, question_id)
        if not question:
            raise NotFoundError("Question not found")
        return question

    # ==================== Commands ====================

    async def ask_question(
        self,
        product_id: int,
        user_id: int,
        question_text: str,
    ) -> ProductQuestion:
        if not await self.db.get(Product, product_id):
            raise NotFoundError("Product not found")
        user = await self.users.get_user(user_id)
        if not question_text or not question_text.strip():
            raise ValidationFailedError("Question text is required")

        question = ProductQuestion(
            product_id=product_id,
            user_id=user.id,
            question=question_text,
            answered=False,
            public_question=True,
            active=True,
            helpful_votes=0,
            report_count=0,
        )
        self.db.add(question)
        await self.db.flush()
        return question

    async def answer_question(
        self,
        question_id: int,
        answerer_id: int,
        answer_text: str,
    ) -> ProductQuestion:
        """Record an answer; a later answer replaces the earlier one."""
        question = await self.get_question(question_id)
        answerer = await self.users.get_user(answerer_id)
        if not answer_text or not answer_text.strip():
            raise ValidationFailedError("Answer text is required")

        question.answer = answer_text
        question.answered_by_id = answerer.id
        question.answered_at = datetime.utcnow()
        question.answered = True

        await self.db.flush()
        return question

    async def vote_helpful(self, question_id: int) -> ProductQuestion:
        question = await self.get_question(question_id)
        question.helpful_votes += 1
        await self.db.flush()
        return question

    async def report_question(self, question_id: int) -> ProductQuestion:
        """
        Count a report against a question.

        Reaching the report threshold hides the question from product pages.
        """
        question = await self.get_question(question_id)
        question.report_count += 1

        if question.report_count >= self.report_threshold and question.public_question:
            question.public_question = False
            logger.warning(
                f"Product question {question_id} hidden after {question.report_count} reports"
            )

        await self.db.flush()
        return question

    async def delete_question(self, question_id: int) -> None:
        question = await self.get_question(question_id)
        question.active = False
        await self.db.flush()
