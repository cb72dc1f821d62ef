"""
Catalog Service - Category and product management.
"""

from decimal import Decimal

from loguru import logger
from slugify import slugify
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from storefront.core.exceptions import NotFoundError, ValidationFailedError
from storefront.core.pagination import Page, paginate
from storefront.models.community import Answer, Comment, ProductQuestion, Question
from storefront.models.shop import Category, OrderItem, Product, ProductImage

SORTABLE_FIELDS = {
    "name": Product.name,
    "price": Product.price,
    "stockQuantity": Product.stock_quantity,
    "createdAt": Product.created_at,
    "id": Product.id,
}

# Column limits: Numeric(10, 2) price, 32-bit Integer stock
MAX_PRICE = Decimal("99999999.99")
MAX_STOCK = 2**31 - 1


def _validate_product(
    name: str | None,
    description: str | None,
    price: Decimal | None,
    stock_quantity: int | None,
) -> None:
    if not name or not name.strip():
        raise ValidationFailedError("Product name is required")
    if not description or not description.strip():
        raise ValidationFailedError("Product description is required")
    if price is None:
        raise ValidationFailedError("Product price is required")
    if price <= 0:
        raise ValidationFailedError("Product price must be greater than 0")
    if price > MAX_PRICE:
        raise ValidationFailedError(f"Product price cannot exceed {MAX_PRICE}")
    if price.as_tuple().exponent < -2:
        raise ValidationFailedError("Product price cannot have more than 2 decimal places")
    if stock_quantity is None:
        raise ValidationFailedError("Product stock quantity is required")
    if stock_quantity < 0:
        raise ValidationFailedError("Product stock quantity cannot be negative")
    if stock_quantity > MAX_STOCK:
        raise ValidationFailedError(f"Product stock quantity cannot exceed {MAX_STOCK}")


def _image_rows(image_urls: list[str] | None) -> list[ProductImage]:
    """Build image rows, trimming URLs and dropping blanks."""
    return [
        ProductImage(image_url=url.strip())
        for url in image_urls or []
        if url and url.strip()
    ]


class CatalogService:
    """
    Service for managing categories and products.

    Usage:
        catalog = CatalogService(db_session)
        page = await catalog.search_products(name="drill", page=0, size=10)
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize catalog service with database session."""
        self.db = db

    # ==================== Categories ====================

    async def get_categories(self) -> list[Category]:
        """Get all categories ordered by name."""
        result = await self.db.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())

    async def get_category(self, category_id: int) -> Category:
        category = await self.db.get(Category, category_id)
        if not category:
            raise NotFoundError(f"Category not found with id: {category_id}")
        return category

    async def create_category(
        self,
        name: str,
        description: str | None = None,
    ) -> Category:
        """Create new category with a slug derived from its name."""
        if not name or not name.strip():
            raise ValidationFailedError("Category name is required")

        slug = slugify(name)[:100]
        existing = await self.db.execute(select(Category).where(Category.slug == slug))
        if existing.scalar_one_or_none():
            raise ValidationFailedError(f"Category already exists: {name}")

        category = Category(name=name.strip(), slug=slug, description=description)
        self.db.add(category)
        await self.db.flush()
        return category

    # ==================== Products ====================

    def _product_query(self):
        return select(Product).options(
            selectinload(Product.category),
            selectinload(Product.images),
        )

    async def get_products(
        self,
        page: int = 0,
        size: int = 10,
        sort: str | None = None,
    ) -> Page[Product]:
        """
        Get a page of all products.

        Args:
            page: Zero-based page number
            size: Page size
            sort: ``field`` or ``field,direction``; defaults to name ascending

        Returns:
            Page of products
        """
        query = self._product_query().order_by(*self._ordering(sort))
        return await paginate(self.db, query, page, size)

    async def get_featured_products(self, page: int = 0, size: int = 10) -> Page[Product]:
        query = (
            self._product_query()
            .where(Product.is_featured == True)
            .order_by(Product.name, Product.id)
        )
        return await paginate(self.db, query, page, size)

    async def search_products(
        self,
        name: str | None = None,
        category_id: int | None = None,
        page: int = 0,
        size: int = 10,
    ) -> Page[Product]:
        """Search by case-insensitive name fragment and/or category."""
        query = self._product_query()

        if name:
            query = query.where(Product.name.ilike(f"%{name}%"))
        if category_id is not None:
            query = query.where(Product.category_id == category_id)

        query = query.order_by(Product.name, Product.id)
        return await paginate(self.db, query, page, size)

    async def find_product(self, product_id: int) -> Product | None:
        query = self._product_query().where(Product.id == product_id)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_product(self, product_id: int) -> Product:
        """Get product by ID or raise NotFoundError."""
        product = await self.find_product(product_id)
        if not product:
            raise NotFoundError(f"Product not found with id: {product_id}")
        return product

    async def create_product(
        self,
        name: str,
        description: str,
        price: Decimal,
        stock_quantity: int,
        category_id: int | None = None,
        is_featured: bool = False,
        main_image_url: str | None = None,
        image_urls: list[str] | None = None,
    ) -> Product:
        """Validate and create a product."""
        _validate_product(name, description, price, stock_quantity)
        category = await self.get_category(category_id) if category_id is not None else None

        product = Product(
            name=name.strip(),
            description=description,
            price=price,
            stock_quantity=stock_quantity,
            category=category,
            is_featured=is_featured,
            main_image_url=main_image_url,
            images=_image_rows(image_urls),
        )
        self.db.add(product)
        await self.db.flush()

        logger.info(f"Created product {product.id}: {product.name}")
        return product

    async def update_product(
        self,
        product_id: int,
        name: str,
        description: str,
        price: Decimal,
        stock_quantity: int,
        category_id: int | None = None,
        is_featured: bool = False,
        main_image_url: str | None = None,
        image_urls: list[str] | None = None,
    ) -> Product:
        """Replace all editable fields of a product."""
        product = await self.get_product(product_id)
        _validate_product(name, description, price, stock_quantity)
        category = await self.get_category(category_id) if category_id is not None else None

        product.name = name.strip()
        product.description = description
        product.price = price
        product.stock_quantity = stock_quantity
        product.category = category
        product.is_featured = is_featured
        product.main_image_url = main_image_url
        product.images = _image_rows(image_urls)

        await self.db.flush()
        return product

    async def delete_product(self, product_id: int) -> None:
        """
        Delete a product and everything attached to it.

        Comments, general questions with their answers, product questions
        and images are removed. Order items keep their snapshot and lose
        the product reference.
        """
        product = await self.get_product(product_id)

        question_ids = select(Question.id).where(Question.product_id == product_id)
        await self.db.execute(delete(Answer).where(Answer.question_id.in_(question_ids)))
        await self.db.execute(delete(Question).where(Question.product_id == product_id))
        await self.db.execute(
            delete(ProductQuestion).where(ProductQuestion.product_id == product_id)
        )
        await self.db.execute(delete(Comment).where(Comment.product_id == product_id))
        await self.db.execute(
            update(OrderItem)
            .where(OrderItem.product_id == product_id)
            .values(product_id=None)
        )

        await self.db.delete(product)
        await self.db.flush()
        logger.info(f"Deleted product {product_id}")

    async def decrement_stock(self, product: Product, quantity: int) -> bool:
        """
        Atomically take ``quantity`` units out of stock.

        The update only applies while enough stock remains, so concurrent
        orders cannot push stock below zero.

        Returns:
            True if the stock was decremented
        """
        result = await self.db.execute(
            update(Product)
            .where(Product.id == product.id, Product.stock_quantity >= quantity)
            .values(stock_quantity=Product.stock_quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False

        await self.db.refresh(product, attribute_names=["stock_quantity"])
        return True

    @staticmethod
    def _ordering(sort: str | None) -> list:
        if not sort:
            return [Product.name, Product.id]

        field, _, direction = sort.partition(",")
        column = SORTABLE_FIELDS.get(field.strip())
        if column is None:
            raise ValidationFailedError(f"Cannot sort products by: {field}")

        if direction.strip().lower() == "desc":
            return [column.desc(), Product.id]
        return [column.asc(), Product.id]
