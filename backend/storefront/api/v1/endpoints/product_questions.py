"""
Product Question API Endpoints.

Moderated Q&A with helpful votes and reports.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.v1.serializers import product_question_to_dict
from storefront.core.database import get_db
from storefront.core.schemas import CamelModel, PageParams
from storefront.modules.community.product_questions import ProductQuestionService

router = APIRouter()


# ==================== Schemas ====================


class AskQuestionRequest(CamelModel):
    """Ask a product question."""

    product_id: int
    user_id: int
    question: str


class AnswerQuestionRequest(CamelModel):
    """Answer a product question."""

    answerer_id: int
    answer: str


# ==================== Queries ====================


@router.get("/product/{product_id}")
async def get_product_questions(
    product_id: int,
    paging: PageParams = Depends(),
    sort_by: str = Query("askedAt", alias="sortBy"),
    sort_direction: str = Query("DESC", alias="sortDirection", pattern="^(ASC|DESC|asc|desc)$"),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Get visible questions on a product."""
    questions = ProductQuestionService(db)
    page = await questions.get_product_questions(
        product_id,
        paging.page,
        paging.size,
        sort_by=sort_by,
        descending=sort_direction.upper() == "DESC",
    )
    return page.to_dict(product_question_to_dict)


@router.get("/product/{product_id}/helpful")
async def get_most_helpful_questions(
    product_id: int,
    page: int = Query(0, ge=0),
    size: int = Query(5, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Get visible questions with the most helpful votes first."""
    questions = ProductQuestionService(db)
    result = await questions.get_most_helpful_questions(product_id, page, size)
    return result.to_dict(product_question_to_dict)


@router.get("/user/{user_id}")
async def get_user_questions(
    user_id: int,
    paging: PageParams = Depends(),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    questions = ProductQuestionService(db)
    page = await questions.get_user_questions(user_id, paging.page, paging.size)
    return page.to_dict(product_question_to_dict)


@router.get("/unanswered")
async def get_unanswered_questions(
    paging: PageParams = Depends(),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Get open questions, oldest first."""
    questions = ProductQuestionService(db)
    page = await questions.get_unanswered_questions(paging.page, paging.size)
    return page.to_dict(product_question_to_dict)


# ==================== Commands ====================


@router.post("/ask")
async def ask_question(
    request: AskQuestionRequest,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    questions = ProductQuestionService(db)
    question = await questions.ask_question(
        request.product_id,
        request.user_id,
        request.question,
    )
    return product_question_to_dict(question)


@router.post("/{question_id}/answer")
async def answer_question(
    question_id: int,
    request: AnswerQuestionRequest,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    questions = ProductQuestionService(db)
    question = await questions.answer_question(
        question_id,
        request.answerer_id,
        request.answer,
    )
    return product_question_to_dict(question)


@router.post("/{question_id}/vote")
async def vote_helpful(
    question_id: int,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    questions = ProductQuestionService(db)
    question = await questions.vote_helpful(question_id)
    return product_question_to_dict(question)


@router.post("/{question_id}/report")
async def report_question(
    question_id: int,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Report a question; enough reports hide it."""
    questions = ProductQuestionService(db)
    question = await questions.report_question(question_id)
    return product_question_to_dict(question)


@router.delete("/{question_id}")
async def delete_question(
    question_id: int,
    db: AsyncSession = Depends(get_db),
) -> dict[str, str]:
    questions = ProductQuestionService(db)
    await questions.delete_question(question_id)
    return {"message": "Question deleted successfully"}
