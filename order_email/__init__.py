"""
Order-confirmation email notifier.

Validates a checkout payload, renders the customer and admin emails, and
sends them through the email provider with bounded retry.
"""

from order_email.models import (
    AggregateResult,
    DispatchOutcome,
    EmailMessage,
    NotificationRequest,
    NotificationResponse,
    OrderItem,
    ShippingAddress,
)
from order_email.notifier import OrderNotifier
from order_email.transport import EmailDispatcher, ResendClient
from order_email.validation import InvalidOrderRequest, parse_request, validate_request

__all__ = [
    "AggregateResult",
    "DispatchOutcome",
    "EmailMessage",
    "NotificationRequest",
    "NotificationResponse",
    "OrderItem",
    "ShippingAddress",
    "OrderNotifier",
    "EmailDispatcher",
    "ResendClient",
    "InvalidOrderRequest",
    "parse_request",
    "validate_request",
]
