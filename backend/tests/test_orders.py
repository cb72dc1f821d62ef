"""
Order placement, stock deduction and order reads.
"""

from decimal import Decimal

import pytest
from sqlalchemy import func, select

from storefront.core.exceptions import (
    InsufficientStockError,
    NotFoundError,
    OrderCreationError,
    UnauthorizedError,
    ValidationFailedError,
)
from storefront.models.shop import Order, OrderItem, OrderStatus, Product
from storefront.modules.shop.orders import OrderService

from conftest import SHIPPING


@pytest.fixture
async def customer(make_user):
    return await make_user("ada")


async def test_create_order_computes_total_and_reduces_stock(db, customer, make_product):
    drill = await make_product("Drill", "10.00", stock=5)
    saw = await make_product("Saw", "25.00", stock=1)

    order = await OrderService(db).create_order(
        customer.id, {drill.id: 2, saw.id: 1}, SHIPPING
    )
    await db.commit()

    assert order.status == OrderStatus.PENDING
    assert order.total == Decimal("45.00")
    assert order.total == sum(item.price * item.quantity for item in order.items)
    assert [item.product_name for item in order.items] == ["Drill", "Saw"]
    assert order.shipping_city == "London"
    assert order.payment is None

    await db.refresh(drill, attribute_names=["stock_quantity"])
    await db.refresh(saw, attribute_names=["stock_quantity"])
    assert drill.stock_quantity == 3
    assert saw.stock_quantity == 0


async def test_order_items_snapshot_price(db, customer, make_product):
    lamp = await make_product("Lamp", "19.99", stock=3)

    order = await OrderService(db).create_order(customer.id, {lamp.id: 3}, SHIPPING)

    [item] = order.items
    assert item.price == Decimal("19.99")
    assert item.subtotal == Decimal("59.97")
    assert order.total == Decimal("59.97")


async def test_insufficient_stock_rolls_back_every_item(
    db, session_factory, customer, make_product
):
    first = await make_product("First", "10.00", stock=5)
    second = await make_product("Second", "25.00", stock=1)
    customer_id, first_id, second_id = customer.id, first.id, second.id

    with pytest.raises(OrderCreationError) as exc_info:
        await OrderService(db).create_order(
            customer_id, {first_id: 2, second_id: 3}, SHIPPING
        )

    assert isinstance(exc_info.value.__cause__, InsufficientStockError)
    assert exc_info.value.message == (
        "Error creating order: Not enough stock for product: Second"
    )

    async with session_factory() as fresh:
        assert (await fresh.get(Product, first_id)).stock_quantity == 5
        assert (await fresh.get(Product, second_id)).stock_quantity == 1
        assert (await fresh.execute(select(func.count(Order.id)))).scalar_one() == 0
        assert (await fresh.execute(select(func.count(OrderItem.id)))).scalar_one() == 0


async def test_unknown_product_is_wrapped(db, customer, make_product):
    widget = await make_product(stock=5)
    customer_id, widget_id = customer.id, widget.id

    with pytest.raises(OrderCreationError) as exc_info:
        await OrderService(db).create_order(
            customer_id, {widget_id: 1, 9999: 1}, SHIPPING
        )

    assert isinstance(exc_info.value.__cause__, NotFoundError)
    assert exc_info.value.status_code == 400
    assert (await db.get(Product, widget_id)).stock_quantity == 5


async def test_unknown_user_is_wrapped(db, make_product):
    widget = await make_product()

    with pytest.raises(OrderCreationError) as exc_info:
        await OrderService(db).create_order(4242, {widget.id: 1}, SHIPPING)

    assert exc_info.value.reason == "User not found with id: 4242"


@pytest.mark.parametrize("cart", [{}, {1: 0}, {1: -2}])
async def test_empty_cart_and_bad_quantities_rejected(db, customer, make_product, cart):
    await make_product()

    with pytest.raises(OrderCreationError) as exc_info:
        await OrderService(db).create_order(customer.id, cart, SHIPPING)

    assert isinstance(exc_info.value.__cause__, ValidationFailedError)


async def test_order_can_take_the_last_unit(db, customer, make_product):
    widget = await make_product(stock=1)

    order = await OrderService(db).create_order(customer.id, {widget.id: 1}, SHIPPING)

    assert order.total == Decimal("10.00")
    await db.refresh(widget, attribute_names=["stock_quantity"])
    assert widget.stock_quantity == 0


async def test_get_order_by_id_checks_owner(db, customer, make_user, make_product):
    other = await make_user("grace")
    widget = await make_product()
    orders = OrderService(db)
    order = await orders.create_order(customer.id, {widget.id: 1}, SHIPPING)
    await db.commit()

    assert (await orders.get_order_by_id(order.id, customer.id)).id == order.id

    with pytest.raises(UnauthorizedError, match="Unauthorized access to order"):
        await orders.get_order_by_id(order.id, other.id)

    with pytest.raises(NotFoundError):
        await orders.get_order_by_id(order.id + 100, customer.id)


async def test_user_orders_listed_newest_first(db, customer, make_product):
    widget = await make_product(stock=10)
    orders = OrderService(db)
    first = await orders.create_order(customer.id, {widget.id: 1}, SHIPPING)
    second = await orders.create_order(customer.id, {widget.id: 2}, SHIPPING)
    await db.commit()

    listed = await orders.get_user_orders(customer.id)
    assert [o.id for o in listed] == [second.id, first.id]

    page = await orders.get_user_orders_paged(customer.id, page=0, size=1)
    assert page.total == 2
    assert page.total_pages == 2
    assert [o.id for o in page.items] == [second.id]


async def test_status_overwrite_is_unrestricted(db, customer, make_product):
    widget = await make_product()
    orders = OrderService(db)
    order = await orders.create_order(customer.id, {widget.id: 1}, SHIPPING)

    await orders.update_order_status(order.id, OrderStatus.DELIVERED)
    updated = await orders.update_order_status(order.id, "PENDING")

    assert updated.status == OrderStatus.PENDING
    assert updated.updated_at is not None


async def test_unknown_status_rejected(db, customer, make_product):
    widget = await make_product()
    orders = OrderService(db)
    order = await orders.create_order(customer.id, {widget.id: 1}, SHIPPING)

    with pytest.raises(ValidationFailedError, match="Unknown order status"):
        await orders.update_order_status(order.id, "LOST")


async def test_lost_stock_race_fails_without_overselling(
    db, session_factory, customer, make_product
):
    widget = await make_product("Widget", "10.00", stock=1)
    customer_id, widget_id = customer.id, widget.id

    # db still holds the product with one unit in stock
    assert widget.stock_quantity == 1

    async with session_factory() as other:
        await OrderService(other).create_order(customer_id, {widget_id: 1}, SHIPPING)
        await other.commit()

    with pytest.raises(OrderCreationError) as exc_info:
        await OrderService(db).create_order(customer_id, {widget_id: 1}, SHIPPING)

    assert isinstance(exc_info.value.__cause__, InsufficientStockError)
    async with session_factory() as fresh:
        assert (await fresh.get(Product, widget_id)).stock_quantity == 0
        assert (await fresh.execute(select(func.count(Order.id)))).scalar_one() == 1
