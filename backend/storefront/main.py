"""
Storefront Backend Application.

Catalog, checkout with stock reservation, Stripe card payments,
and product comments and Q&A behind one versioned JSON API.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.v1 import router as api_v1_router
from storefront.core.config import settings
from storefront.core.database import close_db, engine, get_db, init_db
from storefront.core.exceptions import StorefrontError

RESOURCES = (
    "auth",
    "categories",
    "products",
    "orders",
    "payments",
    "comments",
    "general-questions",
    "questions",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create tables on startup, release the connection pool on exit."""
    logger.info(f"Starting {settings.app_name} {settings.app_version}")

    await init_db()
    logger.info(f"Schema ready on {engine.dialect.name} database")

    if not settings.stripe_secret_key:
        logger.warning("STRIPE_SECRET_KEY is empty, card payments will be rejected")

    yield

    logger.info(f"Stopping {settings.app_name}")
    await close_db()
    logger.info("Database connections closed")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Storefront API

    - **Catalog**: categories, products, featured items and search
    - **Orders**: checkout reduces stock for every ordered product in one transaction
    - **Payments**: card payments confirmed through Stripe
    - **Community**: star-rated comments, admin-answered questions, moderated Q&A

    Errors are returned as `{"error": "<message>"}` with a matching status code.
    """,
    openapi_url=f"{settings.api_v1_prefix}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)

app.include_router(api_v1_router, prefix=settings.api_v1_prefix)


@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError) -> ORJSONResponse:
    """Map domain errors to their HTTP status."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    elif settings.debug:
        logger.debug(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return ORJSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.get("/health", tags=["System"])
async def health_check(db: AsyncSession = Depends(get_db)) -> ORJSONResponse:
    """Report whether the database answers."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        return ORJSONResponse(
            status_code=503,
            content={"status": "unavailable", "database": "down"},
        )
    return ORJSONResponse(
        content={"status": "healthy", "database": "up", "version": settings.app_version}
    )


@app.get("/", tags=["System"])
async def root() -> dict:
    """Service name and where each resource lives."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "resources": {
            name: f"{settings.api_v1_prefix}/{name}" for name in RESOURCES
        },
    }
