"""
Storefront record models.

These mirror the rows stored in the hosted database (products, reviews,
users, orders). They are passive data contracts: the database client parses
rows into them and nothing here talks to the network.

Design decisions:
- Using Pydantic for validation and serialization
- Field names match the database columns (snake_case)
- Order line items and shipping address are stored as JSON columns, so they
  stay loosely typed here
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class OrderStatus(str, Enum):
    """Order lifecycle states as stored in the order_status column."""
    PENDING = "pending"           # Placed, not yet picked
    PROCESSING = "processing"     # Being packed
    SHIPPED = "shipped"           # Handed to the courier
    DELIVERED = "delivered"       # Received by the customer
    CANCELLED = "cancelled"


# =============================================================================
# Catalog
# =============================================================================

class Product(BaseModel):
    """
    A product in the storefront catalog.

    Prices are stored in rupees. count_in_stock drives the storefront's
    "out of stock" badge.
    """
    id: str = Field(..., description="Product identifier")
    name: str = Field(..., description="Display name")
    image: str = Field(..., description="Image path relative to the asset base URL")
    brand: str = Field(default="")
    category: str = Field(..., description="Catalog category")
    description: str = Field(default="")
    price: float = Field(..., ge=0, description="Unit price")
    count_in_stock: int = Field(default=0, ge=0)
    rating: float = Field(default=0, ge=0, le=5)
    num_reviews: int = Field(default=0, ge=0)
    created_at: Optional[datetime] = None

    def in_stock(self) -> bool:
        """True if at least one unit can be ordered."""
        return self.count_in_stock > 0


class Review(BaseModel):
    """A customer review of a product."""
    id: str
    product_id: str
    user_id: str
    name: str = Field(..., description="Reviewer display name")
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(default="")
    created_at: Optional[datetime] = None


# =============================================================================
# Customers and Orders
# =============================================================================

class StoreUser(BaseModel):
    """A registered storefront user."""
    id: str
    email: str
    name: str
    is_admin: bool = False
    created_at: Optional[datetime] = None


class Order(BaseModel):
    """
    An order as persisted after checkout.

    items_price + shipping_price is expected to equal total_price, but the
    checkout writes all three and nothing here recomputes them. order_status
    is kept as a plain string so a status added on the database side does
    not make the row unreadable.
    """
    id: str = Field(..., description="Order identifier")
    user_id: str = Field(..., description="Owning user")
    order_items: list[dict[str, Any]] = Field(default_factory=list)
    shipping_address: dict[str, Any] = Field(default_factory=dict)
    payment_method: str
    items_price: float = Field(..., ge=0)
    shipping_price: float = Field(..., ge=0)
    total_price: float = Field(..., ge=0)
    is_paid: bool = False
    paid_at: Optional[datetime] = None
    is_delivered: bool = False
    delivered_at: Optional[datetime] = None
    order_status: str = Field(default=OrderStatus.PENDING.value, description="Usually an OrderStatus value")
    created_at: Optional[datetime] = None

    def is_settled(self) -> bool:
        """An order is settled once it is both paid and delivered."""
        return self.is_paid and self.is_delivered

    def item_count(self) -> int:
        """Total units across all line items."""
        return sum(int(item.get("quantity", 0)) for item in self.order_items)
