"""
Catalog: categories, product validation, search and deletion.
"""

from decimal import Decimal

import pytest
from sqlalchemy import select

from storefront.core.exceptions import NotFoundError, ValidationFailedError
from storefront.models.community import Comment, ProductQuestion
from storefront.models.shop import OrderItem
from storefront.modules.community.comments import CommentService
from storefront.modules.community.product_questions import ProductQuestionService
from storefront.modules.shop.catalog import CatalogService
from storefront.modules.shop.orders import OrderService

from conftest import SHIPPING


async def test_create_category_slugifies_name(db):
    catalog = CatalogService(db)

    category = await catalog.create_category("Power Tools", "Drills and saws")

    assert category.slug == "power-tools"
    with pytest.raises(ValidationFailedError, match="already exists"):
        await catalog.create_category("power tools")


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"name": " "}, "name is required"),
        ({"description": ""}, "description is required"),
        ({"price": Decimal("0")}, "price must be greater than 0"),
        ({"stock_quantity": -1}, "cannot be negative"),
        ({"price": Decimal("100000000.00")}, "price cannot exceed"),
        ({"price": Decimal("9.999")}, "more than 2 decimal places"),
        ({"stock_quantity": 2**31}, "stock quantity cannot exceed"),
    ],
)
async def test_product_validation(db, overrides, message):
    fields = {
        "name": "Drill",
        "description": "Cordless drill",
        "price": Decimal("49.90"),
        "stock_quantity": 3,
    }
    fields.update(overrides)

    with pytest.raises(ValidationFailedError, match=message):
        await CatalogService(db).create_product(**fields)


async def test_create_product_with_category_and_images(db):
    catalog = CatalogService(db)
    category = await catalog.create_category("Garden")

    product = await catalog.create_product(
        name="  Hose  ",
        description="Twenty metres",
        price=Decimal("15.50"),
        stock_quantity=0,
        category_id=category.id,
        image_urls=["https://img.example.com/a.jpg", " ", "https://img.example.com/b.jpg "],
    )

    assert product.name == "Hose"
    assert product.category.name == "Garden"
    assert product.image_urls == [
        "https://img.example.com/a.jpg",
        "https://img.example.com/b.jpg",
    ]
    assert not product.is_in_stock


async def test_create_product_with_unknown_category(db):
    with pytest.raises(NotFoundError):
        await CatalogService(db).create_product(
            name="Hose",
            description="Twenty metres",
            price=Decimal("15.50"),
            stock_quantity=1,
            category_id=77,
        )


async def test_search_by_name_and_category(db, make_product):
    catalog = CatalogService(db)
    tools = await catalog.create_category("Tools")
    await make_product("Hammer Drill", "80.00", category_id=tools.id)
    await make_product("Drill Bits", "12.00")
    await make_product("Hammer", "20.00", category_id=tools.id)

    by_name = await catalog.search_products(name="drill")
    assert [p.name for p in by_name.items] == ["Drill Bits", "Hammer Drill"]

    by_both = await catalog.search_products(name="hammer", category_id=tools.id)
    assert [p.name for p in by_both.items] == ["Hammer", "Hammer Drill"]
    assert by_both.total == 2


async def test_products_sorting(db, make_product):
    catalog = CatalogService(db)
    await make_product("Cheap", "1.00")
    await make_product("Pricey", "99.00")

    page = await catalog.get_products(sort="price,desc")
    assert [p.name for p in page.items] == ["Pricey", "Cheap"]

    with pytest.raises(ValidationFailedError):
        await catalog.get_products(sort="password")


async def test_featured_products(db, make_product):
    await make_product("Plain")
    await make_product("Star", is_featured=True)

    page = await CatalogService(db).get_featured_products()

    assert [p.name for p in page.items] == ["Star"]


async def test_update_product_replaces_fields(db, make_product):
    product = await make_product("Old", "5.00", stock=1, image_urls=["https://x/1.jpg"])

    updated = await CatalogService(db).update_product(
        product.id,
        name="New",
        description="Fresh",
        price=Decimal("6.00"),
        stock_quantity=9,
        is_featured=True,
    )

    assert updated.name == "New"
    assert updated.stock_quantity == 9
    assert updated.is_featured
    assert updated.image_urls == []


async def test_delete_product_removes_community_content_and_keeps_order_history(
    db, make_user, make_product
):
    customer = await make_user("ada")
    product = await make_product("Kettle", "30.00", stock=4)
    product_id = product.id

    await CommentService(db).add_comment(product_id, "Boils fast", 5, "Ada")
    await ProductQuestionService(db).ask_question(product_id, customer.id, "Is it loud?")
    order = await OrderService(db).create_order(customer.id, {product_id: 1}, SHIPPING)
    await db.commit()

    await CatalogService(db).delete_product(product_id)
    await db.commit()

    assert await CatalogService(db).find_product(product_id) is None
    assert (await db.execute(select(Comment))).scalars().all() == []
    assert (await db.execute(select(ProductQuestion))).scalars().all() == []

    item = (
        await db.execute(select(OrderItem).where(OrderItem.order_id == order.id))
    ).scalar_one()
    await db.refresh(item)
    assert item.product_id is None
    assert item.product_name == "Kettle"
    assert item.price == Decimal("30.00")
