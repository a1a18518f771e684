"""
Models for the order-confirmation notifier.

The request models accept the checkout payload exactly as the storefront
sends it (camelCase JSON) while exposing snake_case attributes in Python.

Design decisions:
- Request models are frozen: one notification attempt never mutates its input
- total is NOT checked against subtotal + shipping_cost; the checkout owns
  that arithmetic
- Outcome and aggregate types are plain dataclasses, they never leave the
  process except through as_dict()
"""

from dataclasses import dataclass, field
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator


# =============================================================================
# Inbound request
# =============================================================================

class _CheckoutModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, coerce_numbers_to_str=True)


class OrderItem(_CheckoutModel):
    """One purchased product line."""
    name: str
    quantity: int = Field(..., ge=0)
    price: float = Field(..., ge=0, description="Unit price")
    image: Optional[str] = None

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class ShippingAddress(_CheckoutModel):
    """Delivery address captured at checkout."""
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    address: str
    city: str
    postal_code: str = Field(..., alias="postalCode")
    phone: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class NotificationRequest(_CheckoutModel):
    """
    Order-notification request posted by the storefront after checkout.

    send_admin_copy is opt-out: None (omitted) and True both produce an
    administrator copy, only a literal JSON false suppresses it.
    """
    to: str = Field(..., description="Customer email address")
    order_id: str = Field(..., alias="orderId")
    customer_name: str = Field(..., alias="customerName")
    order_items: list[OrderItem] = Field(default_factory=list, alias="orderItems")
    shipping_address: ShippingAddress = Field(..., alias="shippingAddress")
    shipping_method: str = Field(..., alias="shippingMethod")
    payment_method: str = Field(..., alias="paymentMethod")
    subtotal: float = Field(..., ge=0)
    shipping_cost: float = Field(..., ge=0, alias="shippingCost")
    total: float = Field(..., ge=0)
    send_admin_copy: Optional[StrictBool] = Field(default=None, alias="sendAdminCopy")

    @field_validator("send_admin_copy", mode="before")
    @classmethod
    def only_booleans_opt_out(cls, value: Any) -> Optional[bool]:
        # "false", 0 and friends count as omitted, not as False
        return value if isinstance(value, bool) else None


# =============================================================================
# Outbound message
# =============================================================================

class EmailMessage(BaseModel):
    """Body of one send call to the email provider."""
    model_config = ConfigDict(populate_by_name=True)

    sender: str = Field(..., alias="from")
    to: list[str]
    subject: str
    html: str

    def to_payload(self) -> dict[str, Any]:
        """JSON body in the provider's field names."""
        return self.model_dump(by_alias=True)


# =============================================================================
# Results
# =============================================================================

@dataclass
class DispatchOutcome:
    """
    Result of one dispatch (1 to max_attempts outbound calls).

    data is the provider's response payload on success; error is set on
    failure.
    """
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    attempts: int = 0


@dataclass
class AggregateResult:
    """Customer and admin outcomes for one request, plus collected errors."""
    customer: Optional[Any] = None
    admin: Optional[Any] = None
    errors: list[str] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        """Serialise, leaving out audiences that produced no payload."""
        result: dict[str, Any] = {}
        if self.customer is not None:
            result["customer"] = self.customer
        if self.admin is not None:
            result["admin"] = self.admin
        result["errors"] = list(self.errors)
        return result


@dataclass
class NotificationResponse:
    """What the endpoint reports back to the storefront."""
    success: bool
    message: str
    data: AggregateResult

    def as_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "data": self.data.as_dict(),
        }
