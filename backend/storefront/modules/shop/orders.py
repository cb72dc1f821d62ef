"""
Order Service - Order placement and tracking.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from storefront.core.exceptions import (
    InsufficientStockError,
    NotFoundError,
    OrderCreationError,
    StorefrontError,
    UnauthorizedError,
    ValidationFailedError,
)
from storefront.core.pagination import Page, paginate
from storefront.models.shop import Order, OrderItem, OrderStatus
from storefront.modules.accounts.service import UserService
from storefront.modules.shop.catalog import CatalogService


class OrderService:
    """
    Service for creating and reading orders.

    Usage:
        orders = OrderService(db_session)
        order = await orders.create_order(user_id, {product_id: 2}, shipping_info)
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize order service with database session."""
        self.db = db
        self.users = UserService(db)
        self.catalog = CatalogService(db)

    def _order_query(self):
        return select(Order).options(
            selectinload(Order.items),
            selectinload(Order.payment),
        )

    # ==================== Queries ====================

    async def get_user_orders(self, user_id: int) -> list[Order]:
        """Get all orders of a user, newest first."""
        query = (
            self._order_query()
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_user_orders_paged(
        self,
        user_id: int,
        page: int = 0,
        size: int = 10,
    ) -> Page[Order]:
        query = (
            self._order_query()
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        return await paginate(self.db, query, page, size)

    async def get_order(self, order_id: int) -> Order:
        """Get order by ID or raise NotFoundError."""
        result = await self.db.execute(self._order_query().where(Order.id == order_id))
        order = result.scalar_one_or_none()
        if not order:
            raise NotFoundError(f"Order not found with id: {order_id}")
        return order

    async def get_order_by_id(self, order_id: int, user_id: int) -> Order:
        """
        Get order owned by ``user_id``.

        Ownership is checked against the caller-supplied user ID.

        Raises:
            NotFoundError: order does not exist
            UnauthorizedError: order belongs to another user
        """
        order = await self.get_order(order_id)
        if order.user_id != user_id:
            logger.warning(f"User {user_id} tried to read order {order_id}")
            raise UnauthorizedError("Unauthorized access to order")
        return order

    # ==================== Commands ====================

    async def create_order(
        self,
        user_id: int,
        cart_items: dict[int, int],
        shipping_info: dict[str, Any],
    ) -> Order:
        """
        Create order from a cart and take the ordered units out of stock.

        The whole operation is one unit: if any item fails, the session
        is rolled back and no stock change survives.

        Args:
            user_id: Customer user ID
            cart_items: Mapping of product ID to quantity
            shipping_info: name, address, city, state, zip, country

        Returns:
            Created order with items and total

        Raises:
            OrderCreationError: wraps the user, product, stock or
                validation error that stopped the order
        """
        try:
            order = await self._place_order(user_id, cart_items, shipping_info)
        except StorefrontError as e:
            await self.db.rollback()
            logger.warning(f"Order creation failed for user {user_id}: {e.message}")
            raise OrderCreationError(e.message) from e

        logger.info(
            f"Created order {order.id} for user {user_id}: "
            f"{len(order.items)} items, total {order.total}"
        )
        return order

    async def _place_order(
        self,
        user_id: int,
        cart_items: dict[int, int],
        shipping_info: dict[str, Any],
    ) -> Order:
        user = await self.users.get_user(user_id)

        if not cart_items:
            raise ValidationFailedError("Cart is empty")

        order = Order(
            user_id=user.id,
            status=OrderStatus.PENDING,
            total=Decimal("0"),
            shipping_name=shipping_info.get("name"),
            shipping_address=shipping_info.get("address"),
            shipping_city=shipping_info.get("city"),
            shipping_state=shipping_info.get("state"),
            shipping_zip=shipping_info.get("zip"),
            shipping_country=shipping_info.get("country"),
            items=[],
            payment=None,
        )
        self.db.add(order)
        await self.db.flush()

        for product_id, quantity in cart_items.items():
            if quantity <= 0:
                raise ValidationFailedError(
                    f"Quantity must be positive for product: {product_id}"
                )

            product = await self.catalog.get_product(product_id)
            if product.stock_quantity < quantity:
                raise InsufficientStockError(product.name, product.stock_quantity, quantity)

            # Stock may have moved since the read above
            if not await self.catalog.decrement_stock(product, quantity):
                raise InsufficientStockError(product.name, product.stock_quantity, quantity)

            order.items.append(
                OrderItem(
                    product_id=product.id,
                    quantity=quantity,
                    price=product.price,
                    product_name=product.name,
                    product_image_url=product.main_image_url,
                )
            )

        order.calculate_total()
        await self.db.flush()
        return order

    async def update_order_status(
        self,
        order_id: int,
        status: OrderStatus | str,
    ) -> Order:
        """
        Overwrite order status.

        Any known status is accepted from any current status; transitions
        are not checked.
        """
        try:
            new_status = OrderStatus(status)
        except ValueError:
            raise ValidationFailedError(f"Unknown order status: {status}") from None

        order = await self.get_order(order_id)
        order.status = new_status
        order.updated_at = datetime.utcnow()

        await self.db.flush()
        logger.info(f"Order {order_id} status set to {new_status.value}")
        return order
