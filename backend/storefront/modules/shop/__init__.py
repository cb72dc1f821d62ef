"""
Shop Module - E-commerce functionality.

Features:
- Product catalog with categories
- Order placement with inventory deduction
- Card payments with Stripe
"""

from storefront.modules.shop.catalog import CatalogService
from storefront.modules.shop.orders import OrderService
from storefront.modules.shop.payment import PaymentService, StripeGateway

__all__ = [
    "CatalogService",
    "OrderService",
    "PaymentService",
    "StripeGateway",
]
