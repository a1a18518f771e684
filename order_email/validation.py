"""
Validation of incoming order-notification payloads.

Two stages:
- validate_request() checks the fields the notifier cannot work without and
  returns the payload untouched
- parse_request() builds the typed NotificationRequest from it

Both raise InvalidOrderRequest, which the endpoint turns into HTTP 400.
"""

import re
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from order_email.models import NotificationRequest


REQUIRED_FIELDS = ("to", "orderId", "customerName")

# local-part @ domain-with-dot, no whitespace anywhere (checked with fullmatch)
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


class ValidationErrorKind(str, Enum):
    MISSING_FIELD = "missing_required_field"
    MALFORMED_ADDRESS = "malformed_address"
    INVALID_PAYLOAD = "invalid_payload"


class InvalidOrderRequest(Exception):
    """A notification request was rejected before any email was sent."""

    def __init__(self, kind: ValidationErrorKind, field: Optional[str], message: str):
        super().__init__(message)
        self.kind = kind
        self.field = field
        self.message = message


def is_valid_email(address: Any) -> bool:
    return isinstance(address, str) and EMAIL_PATTERN.fullmatch(address) is not None


def validate_request(raw: Any) -> Mapping[str, Any]:
    """
    Check required fields and the recipient address.

    Args:
        raw: Decoded JSON body

    Returns:
        The same object, unmodified

    Raises:
        InvalidOrderRequest: missing_required_field or malformed_address
    """
    payload = raw if isinstance(raw, Mapping) else {}

    for name in REQUIRED_FIELDS:
        if not payload.get(name):
            raise InvalidOrderRequest(
                ValidationErrorKind.MISSING_FIELD,
                name,
                f"Missing required field '{name}' (required: {', '.join(REQUIRED_FIELDS)})",
            )

    if not is_valid_email(payload["to"]):
        raise InvalidOrderRequest(
            ValidationErrorKind.MALFORMED_ADDRESS,
            "to",
            "Invalid email address format",
        )

    return raw


def parse_request(raw: Any) -> NotificationRequest:
    """Validate and convert a decoded JSON body into a NotificationRequest."""
    payload = validate_request(raw)
    try:
        return NotificationRequest.model_validate(payload)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise InvalidOrderRequest(
            ValidationErrorKind.INVALID_PAYLOAD,
            location,
            f"Invalid order payload: {location}: {first['msg']}",
        ) from e
