"""
Shared infrastructure for the storefront backend.

This package contains code used across the storefront services:
- Settings (environment-sourced configuration)
- Record models (Product, Review, StoreUser, Order)
- Database client for the hosted storefront tables
- Static asset paths
"""

from shared.config import Settings, get_settings
from shared.models import (
    Product,
    Review,
    StoreUser,
    Order,
    OrderStatus,
)
from shared.data_store import StorefrontDatabase, DatabaseError
from shared.assets import ProductImage, asset_url, image_urls

__all__ = [
    "Settings",
    "get_settings",
    "Product",
    "Review",
    "StoreUser",
    "Order",
    "OrderStatus",
    "StorefrontDatabase",
    "DatabaseError",
    "ProductImage",
    "asset_url",
    "image_urls",
]
