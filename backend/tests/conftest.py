"""
Shared fixtures.

Each test gets its own SQLite database file, a session for service-level
tests, and an HTTP client whose requests run against the same database.
"""

from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from storefront.core.database import Base, get_db
from storefront.core.exceptions import PaymentError
from storefront.main import app
from storefront.models import community, shop, user  # noqa: F401
from storefront.modules.accounts.service import UserService
from storefront.modules.shop.catalog import CatalogService
from storefront.modules.shop.payment import ChargeResult, get_payment_gateway

SHIPPING = {
    "name": "Ada Lovelace",
    "address": "12 St James's Square",
    "city": "London",
    "state": "Greater London",
    "zip": "SW1Y 4JH",
    "country": "UK",
}


class FakeGateway:
    """Payment gateway double recording charges instead of calling Stripe."""

    def __init__(self) -> None:
        self.charges: list[tuple[int, str, Decimal]] = []
        self.decline = False

    async def charge(self, order, card_token, user) -> ChargeResult:
        if self.decline:
            raise PaymentError("Your card was declined.")
        self.charges.append((order.id, card_token, order.total))
        return ChargeResult(
            transaction_reference=f"pi_test_{order.id}",
            card_last4="4242",
        )


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
async def client(session_factory, gateway):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    async def _make_user(username: str = "ada", is_admin: bool = False):
        user = await UserService(db).register_user(
            username=username,
            email=f"{username}@example.com",
            password="secret-pass",
            full_name=username.title(),
            is_admin=is_admin,
        )
        await db.commit()
        return user

    return _make_user


@pytest.fixture
def make_product(db):
    async def _make_product(
        name: str = "Widget",
        price: str = "10.00",
        stock: int = 5,
        **kwargs,
    ):
        product = await CatalogService(db).create_product(
            name=name,
            description=f"{name} description",
            price=Decimal(price),
            stock_quantity=stock,
            **kwargs,
        )
        await db.commit()
        return product

    return _make_product
