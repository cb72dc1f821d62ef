"""
Catalog, order and payment models.

Tables:
- categories, products, product_images
- orders, order_items
- payments

Relationships only point from owner to owned rows; the owned side keeps a
plain foreign key. All relationships are ``lazy="raise"`` so every load
has to be requested with ``selectinload``.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum as PyEnum

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.core.database import Base


class OrderStatus(str, PyEnum):
    """Order processing status."""

    PENDING = "PENDING"
    PAID = "PAID"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, PyEnum):
    """Payment outcome."""

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class PaymentMethod(str, PyEnum):
    """Payment instrument."""

    CREDIT_CARD = "CREDIT_CARD"
    PAYPAL = "PAYPAL"


class Category(Base):
    """Product category."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)
    slug: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    description: Mapped[str | None] = mapped_column(Text)

    def __repr__(self) -> str:
        return f"<Category {self.name}>"


class Product(Base):
    """Product for sale."""

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), index=True)
    description: Mapped[str] = mapped_column(Text)

    # Pricing
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))

    # Inventory
    stock_quantity: Mapped[int] = mapped_column(Integer, default=0)

    is_featured: Mapped[bool] = mapped_column(Boolean, default=False)

    # Media
    main_image_url: Mapped[str | None] = mapped_column(String(1000))

    # Category
    category_id: Mapped[int | None] = mapped_column(ForeignKey("categories.id"))

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    category: Mapped["Category | None"] = relationship(lazy="raise")
    images: Mapped[list["ProductImage"]] = relationship(
        cascade="all, delete-orphan",
        order_by="ProductImage.id",
        lazy="raise",
    )

    @property
    def is_in_stock(self) -> bool:
        return self.stock_quantity > 0

    @property
    def image_urls(self) -> list[str]:
        return [image.image_url for image in self.images]

    def __repr__(self) -> str:
        return f"<Product {self.id}: {self.name}>"


class ProductImage(Base):
    """Additional product image."""

    __tablename__ = "product_images"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id"))
    image_url: Mapped[str] = mapped_column(String(1000))


class Payment(Base):
    """Captured payment for an order."""

    __tablename__ = "payments"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)

    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus), default=PaymentStatus.PENDING
    )
    method: Mapped[PaymentMethod] = mapped_column(
        Enum(PaymentMethod), default=PaymentMethod.CREDIT_CARD
    )

    # Only the last four digits are stored
    masked_card_number: Mapped[str | None] = mapped_column(String(19))
    transaction_reference: Mapped[str | None] = mapped_column(String(255))

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    processed_at: Mapped[datetime | None] = mapped_column(DateTime)

    def __repr__(self) -> str:
        return f"<Payment {self.id}: {self.status.value}>"


class Order(Base):
    """Customer order."""

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)

    # Status
    status: Mapped[OrderStatus] = mapped_column(
        Enum(OrderStatus), default=OrderStatus.PENDING
    )

    # Pricing
    total: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))

    # Payment
    payment_id: Mapped[int | None] = mapped_column(ForeignKey("payments.id"))

    # Shipping
    shipping_name: Mapped[str | None] = mapped_column(String(255))
    shipping_address: Mapped[str | None] = mapped_column(Text)
    shipping_city: Mapped[str | None] = mapped_column(String(100))
    shipping_state: Mapped[str | None] = mapped_column(String(100))
    shipping_zip: Mapped[str | None] = mapped_column(String(20))
    shipping_country: Mapped[str | None] = mapped_column(String(100))

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime)

    # Relationships
    items: Mapped[list["OrderItem"]] = relationship(
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
        lazy="raise",
    )
    payment: Mapped["Payment | None"] = relationship(lazy="raise")

    def calculate_total(self) -> Decimal:
        """Recompute ``total`` from the line items."""
        self.total = sum(
            (item.subtotal for item in self.items),
            Decimal("0"),
        )
        return self.total

    def __repr__(self) -> str:
        return f"<Order {self.id}: {self.status.value}>"


class OrderItem(Base):
    """Line item in an order."""

    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.id"), index=True)
    product_id: Mapped[int | None] = mapped_column(
        ForeignKey("products.id", ondelete="SET NULL")
    )

    quantity: Mapped[int] = mapped_column(Integer)

    # Snapshot at time of order
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    product_name: Mapped[str] = mapped_column(String(255))
    product_image_url: Mapped[str | None] = mapped_column(String(1000))

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity
