"""
Question Service - General product questions answered by admins.
"""

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from storefront.core.exceptions import (
    NotFoundError,
    UnauthorizedError,
    ValidationFailedError,
)
from storefront.core.pagination import Page, paginate
from storefront.models.community import Answer, Question
from storefront.models.shop import Product
from storefront.models.user import User
from storefront.modules.accounts.service import UserService


class QuestionService:
    """
    Service for general questions and their single admin answer.

    Usage:
        questions = QuestionService(db_session)
        question = await questions.ask_question(product_id, user_id, "Waterproof?")
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize question service with database session."""
        self.db = db
        self.users = UserService(db)

    def _question_query(self):
        return select(Question).options(selectinload(Question.answer))

    # ==================== Queries ====================

    async def get_questions(
        self,
        product_id: int,
        page: int = 0,
        size: int = 10,
    ) -> Page[Question]:
        query = (
            self._question_query()
            .where(Question.product_id == product_id)
            .order_by(Question.created_at.desc(), Question.id.desc())
        )
        return await paginate(self.db, query, page, size)

    async def get_all_questions(self, product_id: int) -> list[Question]:
        """Get every question on a product, newest first."""
        query = (
            self._question_query()
            .where(Question.product_id == product_id)
            .order_by(Question.created_at.desc(), Question.id.desc())
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_user_questions(
        self,
        user_id: int,
        page: int = 0,
        size: int = 10,
    ) -> Page[Question]:
        query = (
            self._question_query()
            .where(Question.user_id == user_id)
            .order_by(Question.created_at.desc(), Question.id.desc())
        )
        return await paginate(self.db, query, page, size)

    async def get_question(self, question_id: int) -> Question:
        result = await self.db.execute(
            self._question_query().where(Question.id == question_id)
        )
        question = result.scalar_one_or_none()
        if not question:
            raise NotFoundError(f"Question not found with id: {question_id}")
        return question

    # ==================== Questions ====================

    async def ask_question(self, product_id: int, user_id: int, text: str) -> Question:
        """Ask a question about a product."""
        user = await self.users.get_user(user_id)
        if not await self.db.get(Product, product_id):
            raise NotFoundError(f"Product not found with id: {product_id}")
        if not text or not text.strip():
            raise ValidationFailedError("Question text is required")

        question = Question(product_id=product_id, user_id=user.id, text=text, answer=None)
        self.db.add(question)
        await self.db.flush()
        return question

    async def delete_question(self, question_id: int, user_id: int) -> None:
        """
        Delete a question and its answer.

        Only the author or an admin may delete.
        """
        question = await self.get_question(question_id)
        user = await self.users.get_user(user_id)

        if not user.is_admin and question.user_id != user.id:
            raise UnauthorizedError("Not authorized to delete this question")

        if question.answer:
            await self.db.delete(question.answer)
        await self.db.delete(question)
        await self.db.flush()
        logger.info(f"Question {question_id} deleted by user {user_id}")

    # ==================== Answers ====================

    async def _get_admin(self, admin_id: int, action: str) -> User:
        try:
            admin = await self.users.get_user(admin_id)
        except NotFoundError:
            raise NotFoundError(f"Admin not found with id: {admin_id}") from None
        if not admin.is_admin:
            raise UnauthorizedError(f"Only admins can {action}")
        return admin

    async def answer_question(self, question_id: int, admin_id: int, text: str) -> Answer:
        """
        Answer a question as an admin.

        Raises:
            UnauthorizedError: user is not an admin
            ValidationFailedError: question already answered
        """
        admin = await self._get_admin(admin_id, "answer questions")
        question = await self.get_question(question_id)

        if question.answer is not None:
            raise ValidationFailedError("Question already has an answer")
        if not text or not text.strip():
            raise ValidationFailedError("Answer text is required")

        answer = Answer(question_id=question.id, admin_id=admin.id, text=text)
        self.db.add(answer)
        question.answer = answer
        await self.db.flush()
        return answer

    async def update_answer(self, answer_id: int, text: str, admin_id: int) -> Answer:
        await self._get_admin(admin_id, "update answers")

        answer = await self.db.get(Answer, answer_id)
        if not answer:
            raise NotFoundError(f"Answer not found with id: {answer_id}")
        if not text or not text.strip():
            raise ValidationFailedError("Answer text is required")

        answer.text = text
        await self.db.flush()
        return answer
