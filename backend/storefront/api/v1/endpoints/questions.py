"""
General Question API Endpoints.

Questions about products with a single admin answer.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.v1.serializers import answer_to_dict, question_to_dict
from storefront.core.database import get_db
from storefront.core.schemas import CamelModel, PageParams
from storefront.modules.community.questions import QuestionService

router = APIRouter()


# ==================== Schemas ====================


class TextRequest(CamelModel):
    """Question or answer text."""

    text: str


# ==================== Questions ====================


@router.get("/product/{product_id}")
async def get_questions(
    product_id: int,
    paging: PageParams = Depends(),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    questions = QuestionService(db)
    page = await questions.get_questions(product_id, paging.page, paging.size)
    return page.to_dict(question_to_dict)


@router.get("/product/{product_id}/all")
async def get_all_questions(
    product_id: int,
    db: AsyncSession = Depends(get_db),
) -> list[dict[str, Any]]:
    """Get every question on a product, newest first."""
    questions = QuestionService(db)
    return [question_to_dict(q) for q in await questions.get_all_questions(product_id)]


@router.get("/user/{user_id}")
async def get_user_questions(
    user_id: int,
    paging: PageParams = Depends(),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    questions = QuestionService(db)
    page = await questions.get_user_questions(user_id, paging.page, paging.size)
    return page.to_dict(question_to_dict)


@router.post("/product/{product_id}")
async def ask_question(
    product_id: int,
    request: TextRequest,
    user_id: int = Query(..., alias="userId"),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    questions = QuestionService(db)
    question = await questions.ask_question(product_id, user_id, request.text)
    return question_to_dict(question)


@router.delete("/{question_id}")
async def delete_question(
    question_id: int,
    user_id: int = Query(..., alias="userId"),
    db: AsyncSession = Depends(get_db),
) -> dict[str, str]:
    """Delete question; allowed for its author and admins."""
    questions = QuestionService(db)
    await questions.delete_question(question_id, user_id)
    return {"status": "deleted"}


# ==================== Answers ====================


@router.post("/{question_id}/answer")
async def answer_question(
    question_id: int,
    request: TextRequest,
    admin_id: int = Query(..., alias="adminId"),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Answer a question (admins only, once per question)."""
    questions = QuestionService(db)
    answer = await questions.answer_question(question_id, admin_id, request.text)
    return answer_to_dict(answer)


@router.put("/answer/{answer_id}")
async def update_answer(
    answer_id: int,
    request: TextRequest,
    admin_id: int = Query(..., alias="adminId"),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    questions = QuestionService(db)
    answer = await questions.update_answer(answer_id, request.text, admin_id)
    return answer_to_dict(answer)
