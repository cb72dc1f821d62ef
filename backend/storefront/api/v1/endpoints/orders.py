"""
Order API Endpoints.

Order placement, history and status updates.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.v1.serializers import order_to_dict
from storefront.core.database import get_db
from storefront.core.schemas import CamelModel, PageParams
from storefront.modules.shop.orders import OrderService

router = APIRouter()


# ==================== Schemas ====================


class CreateOrderRequest(CamelModel):
    """Create order from cart."""

    user_id: int
    cart_items: dict[int, int]
    shipping_name: str | None = None
    shipping_address: str | None = None
    shipping_city: str | None = None
    shipping_state: str | None = None
    shipping_zip: str | None = None
    shipping_country: str | None = None

    def shipping_info(self) -> dict[str, Any]:
        return {
            "name": self.shipping_name,
            "address": self.shipping_address,
            "city": self.shipping_city,
            "state": self.shipping_state,
            "zip": self.shipping_zip,
            "country": self.shipping_country,
        }


class UpdateStatusRequest(CamelModel):
    """Set order status."""

    status: str


# ==================== Endpoints ====================


@router.get("")
async def get_user_orders(
    user_id: int = Query(..., alias="userId"),
    db: AsyncSession = Depends(get_db),
) -> list[dict[str, Any]]:
    """Get user's orders, newest first."""
    orders = OrderService(db)
    return [order_to_dict(order) for order in await orders.get_user_orders(user_id)]


@router.get("/paged")
async def get_user_orders_paged(
    user_id: int = Query(..., alias="userId"),
    paging: PageParams = Depends(),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Get a page of user's orders, newest first."""
    orders = OrderService(db)
    page = await orders.get_user_orders_paged(user_id, paging.page, paging.size)
    return page.to_dict(order_to_dict)


@router.get("/{order_id}")
async def get_order(
    order_id: int,
    user_id: int = Query(..., alias="userId"),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Get order details if it belongs to ``userId``."""
    orders = OrderService(db)
    order = await orders.get_order_by_id(order_id, user_id)
    return order_to_dict(order)


@router.post("")
async def create_order(
    request: CreateOrderRequest,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """
    Place an order.

    Stock of every ordered product is reduced in the same transaction.
    """
    orders = OrderService(db)
    order = await orders.create_order(
        user_id=request.user_id,
        cart_items=request.cart_items,
        shipping_info=request.shipping_info(),
    )
    return order_to_dict(order)


@router.patch("/{order_id}/status")
async def update_order_status(
    order_id: int,
    request: UpdateStatusRequest,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Set order status."""
    orders = OrderService(db)
    order = await orders.update_order_status(order_id, request.status)
    return order_to_dict(order)
