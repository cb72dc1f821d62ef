"""
Catalog API Endpoints.

Categories and products.
"""

from decimal import Decimal
from typing import Any

from fastapi import APIRouter, Depends, Query
from loguru import logger
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.v1.serializers import category_to_dict, product_to_dict
from storefront.core.database import get_db
from storefront.core.schemas import CamelModel, PageParams
from storefront.modules.shop.catalog import CatalogService

router = APIRouter()


# ==================== Schemas ====================


class CategoryRequest(CamelModel):
    """Create category."""

    name: str
    description: str | None = None


class ProductRequest(CamelModel):
    """Create or replace product."""

    name: str = Field(max_length=255)
    description: str
    price: Decimal
    stock_quantity: int
    category_id: int | None = None
    featured: bool = False
    main_image_url: str | None = None
    additional_images: list[str] = []


# ==================== Categories ====================


@router.get("/categories")
async def get_categories(
    db: AsyncSession = Depends(get_db),
) -> list[dict[str, Any]]:
    """Get all product categories."""
    catalog = CatalogService(db)
    categories = await catalog.get_categories()
    return [category_to_dict(category) for category in categories]


@router.post("/categories")
async def create_category(
    request: CategoryRequest,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Create a product category."""
    catalog = CatalogService(db)
    category = await catalog.create_category(request.name, request.description)
    return category_to_dict(category)


# ==================== Products ====================


@router.get("/products")
async def get_products(
    paging: PageParams = Depends(),
    sort: str | None = Query(None, description="field[,asc|desc]"),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Get all products, sorted by name unless ``sort`` says otherwise."""
    catalog = CatalogService(db)
    products = await catalog.get_products(paging.page, paging.size, sort)
    logger.debug(f"Listed {len(products.items)} of {products.total} products")
    return products.to_dict(product_to_dict)


@router.get("/products/featured")
async def get_featured_products(
    paging: PageParams = Depends(),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Get featured products."""
    catalog = CatalogService(db)
    products = await catalog.get_featured_products(paging.page, paging.size)
    return products.to_dict(product_to_dict)


@router.get("/products/search")
async def search_products(
    name: str | None = Query(None, description="Name fragment"),
    category_id: int | None = Query(None, alias="categoryId"),
    paging: PageParams = Depends(),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """
    Search products by name and/or category.

    Without criteria returns all products.
    """
    catalog = CatalogService(db)
    products = await catalog.search_products(
        name=name,
        category_id=category_id,
        page=paging.page,
        size=paging.size,
    )
    return products.to_dict(product_to_dict)


@router.get("/products/{product_id}")
async def get_product(
    product_id: int,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Get product details."""
    catalog = CatalogService(db)
    product = await catalog.get_product(product_id)
    return product_to_dict(product)


@router.post("/products")
async def create_product(
    request: ProductRequest,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Create product."""
    catalog = CatalogService(db)
    product = await catalog.create_product(
        name=request.name,
        description=request.description,
        price=request.price,
        stock_quantity=request.stock_quantity,
        category_id=request.category_id,
        is_featured=request.featured,
        main_image_url=request.main_image_url,
        image_urls=request.additional_images,
    )
    return product_to_dict(product)


@router.put("/products/{product_id}")
async def update_product(
    product_id: int,
    request: ProductRequest,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Replace product fields."""
    catalog = CatalogService(db)
    product = await catalog.update_product(
        product_id,
        name=request.name,
        description=request.description,
        price=request.price,
        stock_quantity=request.stock_quantity,
        category_id=request.category_id,
        is_featured=request.featured,
        main_image_url=request.main_image_url,
        image_urls=request.additional_images,
    )
    return product_to_dict(product)


@router.delete("/products/{product_id}")
async def delete_product(
    product_id: int,
    db: AsyncSession = Depends(get_db),
) -> dict[str, str]:
    """Delete product with its comments and questions."""
    catalog = CatalogService(db)
    await catalog.delete_product(product_id)
    return {"status": "deleted"}
