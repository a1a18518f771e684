"""
Read-side client for the hosted storefront database.

The database is exposed through a PostgREST-style REST API: every table is
available under {SUPABASE_URL}/rest/v1/<table>, filtered with query
parameters such as id=eq.<value>. This module wraps those reads and returns
typed records from shared.models.

Design decisions:
- Synchronous httpx client, injectable for tests
- Missing rows return None; any non-2xx response, or a row that does not
  fit its model, raises DatabaseError
- Missing credentials only log a warning so the rest of the app still boots
"""

import logging
from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from shared.config import Settings
from shared.models import Order, Product, Review, StoreUser

logger = logging.getLogger("storefront.db")

Record = TypeVar("Record", bound=BaseModel)


class DatabaseError(Exception):
    """The database API rejected a request or returned an unreadable row."""

    def __init__(self, status_code: Optional[int], message: str):
        super().__init__(f"{status_code}: {message}" if status_code else message)
        self.status_code = status_code
        self.message = message


class StorefrontDatabase:
    """
    Typed access to the storefront tables.

    Each method maps to one REST query. Results are ordered newest first where
    the storefront lists them that way.
    """

    PRODUCTS = "products"
    REVIEWS = "reviews"
    USERS = "users"
    ORDERS = "orders"

    def __init__(self, settings: Settings, http_client: Optional[httpx.Client] = None):
        """
        Initialize the client.

        Args:
            settings: Provides supabase_url and supabase_anon_key
            http_client: Preconfigured httpx client (tests pass a MockTransport)
        """
        if not settings.supabase_url or not settings.supabase_anon_key:
            logger.warning(
                "Supabase credentials not found. Set SUPABASE_URL and SUPABASE_ANON_KEY."
            )
        self.base_url = f"{settings.supabase_url.rstrip('/')}/rest/v1"
        self.headers = {
            "apikey": settings.supabase_anon_key,
            "Authorization": f"Bearer {settings.supabase_anon_key}",
            "Accept": "application/json",
        }
        self.http = http_client or httpx.Client(timeout=10.0)

    # =========================================================================
    # Query plumbing
    # =========================================================================

    def _select(self, table: str, params: dict[str, str]) -> list[dict[str, Any]]:
        """Run a select against a table and return the decoded rows."""
        query = {"select": "*", **params}
        response = self.http.get(f"{self.base_url}/{table}", params=query, headers=self.headers)
        if not response.is_success:
            try:
                message = response.json().get("message", response.text)
            except ValueError:
                message = response.text
            logger.error(f"Query on {table} failed with {response.status_code}: {message}")
            raise DatabaseError(response.status_code, message)
        return response.json()

    def _select_one(self, table: str, row_id: str) -> Optional[dict[str, Any]]:
        rows = self._select(table, {"id": f"eq.{row_id}", "limit": "1"})
        return rows[0] if rows else None

    def _parse(self, model: type[Record], row: dict[str, Any]) -> Record:
        """Build a record from a row, reporting schema drift as DatabaseError."""
        try:
            return model(**row)
        except ValidationError as e:
            message = f"Unreadable {model.__name__} row {row.get('id')}: {e.errors()[0]['msg']}"
            logger.error(message)
            raise DatabaseError(None, message) from e

    # =========================================================================
    # Products and Reviews
    # =========================================================================

    def get_products(self, category: Optional[str] = None) -> list[Product]:
        """List catalog products, optionally restricted to one category."""
        params = {"order": "created_at.desc"}
        if category:
            params["category"] = f"eq.{category}"
        return [self._parse(Product, row) for row in self._select(self.PRODUCTS, params)]

    def get_product(self, product_id: str) -> Optional[Product]:
        """Get a product by ID."""
        row = self._select_one(self.PRODUCTS, product_id)
        return self._parse(Product, row) if row else None

    def get_reviews(self, product_id: str) -> list[Review]:
        """Reviews for a product, newest first."""
        rows = self._select(self.REVIEWS, {
            "product_id": f"eq.{product_id}",
            "order": "created_at.desc",
        })
        return [self._parse(Review, row) for row in rows]

    # =========================================================================
    # Users and Orders
    # =========================================================================

    def get_user(self, user_id: str) -> Optional[StoreUser]:
        """Get a user by ID."""
        row = self._select_one(self.USERS, user_id)
        return self._parse(StoreUser, row) if row else None

    def get_order(self, order_id: str) -> Optional[Order]:
        """Get an order by ID."""
        row = self._select_one(self.ORDERS, order_id)
        return self._parse(Order, row) if row else None

    def get_orders_by_user(self, user_id: str) -> list[Order]:
        """All orders placed by a user, newest first."""
        rows = self._select(self.ORDERS, {
            "user_id": f"eq.{user_id}",
            "order": "created_at.desc",
        })
        return [self._parse(Order, row) for row in rows]

    def close(self) -> None:
        self.http.close()
