"""
Payment API Endpoints.

Card payments for orders and payment history.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.v1.serializers import payment_to_dict
from storefront.core.database import get_db
from storefront.core.schemas import CamelModel, PageParams
from storefront.modules.shop.payment import (
    PaymentService,
    StripeGateway,
    get_payment_gateway,
)

router = APIRouter()


# ==================== Schemas ====================


class ProcessPaymentRequest(CamelModel):
    """Pay for an order with a card payment method."""

    order_id: int
    card_token: str


# ==================== Endpoints ====================


@router.post("/process")
async def process_payment(
    request: ProcessPaymentRequest,
    user_id: int = Query(..., alias="userId"),
    db: AsyncSession = Depends(get_db),
    gateway: StripeGateway = Depends(get_payment_gateway),
) -> dict[str, Any]:
    """
    Charge an order through Stripe.

    On success the order is marked PAID and the payment is returned.
    """
    payments = PaymentService(db, gateway)
    payment = await payments.process_payment(request.order_id, request.card_token, user_id)
    return payment_to_dict(payment)


@router.get("")
async def get_user_payments(
    user_id: int = Query(..., alias="userId"),
    db: AsyncSession = Depends(get_db),
    gateway: StripeGateway = Depends(get_payment_gateway),
) -> list[dict[str, Any]]:
    """Get user's payments, newest first."""
    payments = PaymentService(db, gateway)
    return [payment_to_dict(p) for p in await payments.get_user_payments(user_id)]


@router.get("/paged")
async def get_user_payments_paged(
    user_id: int = Query(..., alias="userId"),
    paging: PageParams = Depends(),
    db: AsyncSession = Depends(get_db),
    gateway: StripeGateway = Depends(get_payment_gateway),
) -> dict[str, Any]:
    payments = PaymentService(db, gateway)
    page = await payments.get_user_payments_paged(user_id, paging.page, paging.size)
    return page.to_dict(payment_to_dict)


@router.get("/{payment_id}")
async def get_payment(
    payment_id: int,
    user_id: int = Query(..., alias="userId"),
    db: AsyncSession = Depends(get_db),
    gateway: StripeGateway = Depends(get_payment_gateway),
) -> dict[str, Any]:
    """Get payment if it belongs to ``userId``."""
    payments = PaymentService(db, gateway)
    payment = await payments.get_payment_by_id(payment_id, user_id)
    return payment_to_dict(payment)
