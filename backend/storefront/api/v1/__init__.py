"""
API Version 1 Router.

Combines all API endpoints under /api/v1 prefix.
"""

from fastapi import APIRouter

from storefront.api.v1.endpoints import (
    auth,
    catalog,
    comments,
    orders,
    payments,
    product_questions,
    questions,
)

router = APIRouter()

# Include endpoint routers
router.include_router(auth.router, prefix="/auth", tags=["Auth"])
router.include_router(catalog.router, tags=["Catalog"])
router.include_router(orders.router, prefix="/orders", tags=["Orders"])
router.include_router(payments.router, prefix="/payments", tags=["Payments"])
router.include_router(comments.router, prefix="/comments", tags=["Comments"])
router.include_router(
    questions.router, prefix="/general-questions", tags=["General Questions"]
)
router.include_router(
    product_questions.router, prefix="/questions", tags=["Product Questions"]
)
