"""
Payment Service - Stripe integration.

Handles:
- Charging an order's total through a confirmed payment intent
- Recording the payment and marking the order paid
- Payment history per user
"""

from dataclasses import dataclass
from datetime import datetime

import stripe
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.config import settings
from storefront.core.exceptions import (
    NotFoundError,
    PaymentError,
    UnauthorizedError,
    ValidationFailedError,
)
from storefront.core.pagination import Page, paginate
from storefront.models.shop import (
    Order,
    OrderStatus,
    Payment,
    PaymentMethod,
    PaymentStatus,
)
from storefront.models.user import User
from storefront.modules.accounts.service import UserService
from storefront.modules.shop.orders import OrderService


@dataclass
class ChargeResult:
    """Outcome of a successful charge."""

    transaction_reference: str
    card_last4: str


def mask_card_number(last4: str) -> str:
    return f"xxxx-xxxx-xxxx-{last4}"


class StripeGateway:
    """
    Stripe payment connector.

    Usage:
        gateway = StripeGateway()
        result = await gateway.charge(order, "pm_card_visa", user)
    """

    def __init__(self, api_key: str | None = None) -> None:
        """Initialize Stripe with API key."""
        stripe.api_key = api_key or settings.stripe_secret_key

    async def charge(self, order: Order, card_token: str, user: User) -> ChargeResult:
        """
        Charge the order total to a card payment method.

        Args:
            order: Order to charge
            card_token: Stripe payment method ID
            user: Paying user, receives the receipt

        Returns:
            Transaction reference and card's last four digits

        Raises:
            PaymentError: Stripe rejected the charge
        """
        try:
            # Stripe expects amount in cents
            amount_cents = int((order.total * 100).to_integral_value())

            intent = stripe.PaymentIntent.create(
                amount=amount_cents,
                currency=settings.shop_currency.lower(),
                receipt_email=user.email,
                description=f"Order #{order.id}",
                payment_method=card_token,
                payment_method_types=["card"],
                confirm=True,
            )
            if intent.status != "succeeded":
                raise PaymentError(f"Payment not completed, status: {intent.status}")

            payment_method = stripe.PaymentMethod.retrieve(card_token)
            return ChargeResult(
                transaction_reference=intent.id,
                card_last4=payment_method.card.last4,
            )

        except stripe.StripeError as e:
            logger.error(f"Stripe error charging order {order.id}: {e}")
            raise PaymentError(e.user_message or str(e)) from e


# Singleton instance
_gateway: StripeGateway | None = None


def get_payment_gateway() -> StripeGateway:
    """Get or create payment gateway singleton."""
    global _gateway
    if _gateway is None:
        _gateway = StripeGateway()
    return _gateway


class PaymentService:
    """
    Service for payments on orders.

    Usage:
        payments = PaymentService(db_session, get_payment_gateway())
        payment = await payments.process_payment(order_id, card_token, user_id)
    """

    def __init__(self, db: AsyncSession, gateway: StripeGateway) -> None:
        """Initialize payment service with database session and gateway."""
        self.db = db
        self.gateway = gateway
        self.users = UserService(db)
        self.orders = OrderService(db)

    async def process_payment(
        self,
        order_id: int,
        card_token: str,
        user_id: int,
    ) -> Payment:
        """
        Charge an order and mark it paid.

        The charge happens before anything is written locally. If the
        write fails afterwards the charge stands without a payment row.

        Returns:
            Recorded payment
        """
        if not card_token or not card_token.strip():
            raise ValidationFailedError("Card token is required")

        order = await self.orders.get_order(order_id)
        user = await self.users.get_user(user_id)

        charge = await self.gateway.charge(order, card_token, user)

        now = datetime.utcnow()
        payment = Payment(
            user_id=user.id,
            amount=order.total,
            status=PaymentStatus.COMPLETED,
            method=PaymentMethod.CREDIT_CARD,
            transaction_reference=charge.transaction_reference,
            masked_card_number=mask_card_number(charge.card_last4),
            processed_at=now,
        )
        self.db.add(payment)
        await self.db.flush()

        order.payment = payment
        order.status = OrderStatus.PAID
        order.updated_at = now
        await self.db.flush()

        logger.info(
            f"Payment {payment.id} captured for order {order.id}: "
            f"{payment.amount} ({charge.transaction_reference})"
        )
        return payment

    async def get_user_payments(self, user_id: int) -> list[Payment]:
        """Get all payments of a user, newest first."""
        query = (
            select(Payment)
            .where(Payment.user_id == user_id)
            .order_by(Payment.created_at.desc(), Payment.id.desc())
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_user_payments_paged(
        self,
        user_id: int,
        page: int = 0,
        size: int = 10,
    ) -> Page[Payment]:
        query = (
            select(Payment)
            .where(Payment.user_id == user_id)
            .order_by(Payment.created_at.desc(), Payment.id.desc())
        )
        return await paginate(self.db, query, page, size)

    async def get_payment_by_id(self, payment_id: int, user_id: int) -> Payment:
        """Get payment owned by ``user_id``."""
        payment = await self.db.get(Payment, payment_id)
        if not payment:
            raise NotFoundError(f"Payment not found with id: {payment_id}")
        if payment.user_id != user_id:
            logger.warning(f"User {user_id} tried to read payment {payment_id}")
            raise UnauthorizedError("Unauthorized access to payment")
        return payment
