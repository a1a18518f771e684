"""
FastAPI application for the storefront backend.

This application provides:
1. The order-confirmation endpoint (POST /send-order-email)
2. Its CORS preflight (OPTIONS /send-order-email)
3. A health check (/health)

Run with:
    uvicorn api.main:app --reload

Then visit http://localhost:8000/docs for interactive API documentation.

Design decisions:
- The storefront calls this endpoint straight from the browser, so every
  response carries permissive CORS headers
- Error bodies are {"error": ...} rather than FastAPI's {"detail": ...}; the
  storefront reads that field
- The notifier blocks (HTTP call, retry sleep), so it runs in the threadpool
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.concurrency import run_in_threadpool

from order_email.notifier import OrderNotifier
from order_email.validation import InvalidOrderRequest, parse_request
from shared.config import get_settings

# Configure logging
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s | %(name)-24s | %(levelname)-5s | %(message)s",
    datefmt="%H:%M:%S",
)

logger = logging.getLogger("order_email.api")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

ORDER_EMAIL_PATH = "/send-order-email"


# Module-level instance (created on first request)
_notifier: Optional[OrderNotifier] = None


def get_notifier() -> OrderNotifier:
    """Get the order notifier instance."""
    global _notifier
    if _notifier is None:
        _notifier = OrderNotifier(get_settings())
    return _notifier


def reset_api_state(notifier: Optional[OrderNotifier] = None) -> None:
    """Reset API state (for testing)."""
    global _notifier
    _notifier = notifier


def _json(body: dict, status_code: int) -> JSONResponse:
    return JSONResponse(body, status_code=status_code, headers=CORS_HEADERS)


# Application lifespan
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    logging.info("Starting storefront order notifications API")
    yield
    logging.info("Shutting down")


# Create the FastAPI app
app = FastAPI(
    title="Storefront Order Notifications",
    description="""
    Sends order-confirmation emails after checkout.

    - `POST /send-order-email` - confirm an order to the customer and notify the admin
    - `GET /health` - liveness check
    """,
    version="1.0.0",
    lifespan=lifespan,
)


# =============================================================================
# Health Check
# =============================================================================

@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "storefront-order-notifications"}


# =============================================================================
# Order Confirmation
# =============================================================================

@app.options(ORDER_EMAIL_PATH, tags=["Orders"])
def order_email_preflight():
    """CORS preflight."""
    return PlainTextResponse("ok", headers=CORS_HEADERS)


@app.post(ORDER_EMAIL_PATH, tags=["Orders"])
async def send_order_email(
    request: Request,
    notifier: OrderNotifier = Depends(get_notifier),
) -> JSONResponse:
    """
    Send the order confirmation for a completed checkout.

    Responds 400 before anything is sent when a required field is missing,
    the address is malformed or a field has the wrong shape. Otherwise 200
    when the customer email went out and 500 when it did not (or on an
    unexpected error such as an unparsable body).
    """
    try:
        payload = await request.json()
        order = parse_request(payload)

        logger.info(f"Order email request for order #{order.order_id}")
        response = await run_in_threadpool(notifier.notify, order)

        return _json(response.as_dict(), 200 if response.success else 500)

    except InvalidOrderRequest as e:
        logger.info(f"Rejected order email request ({e.kind.value}, field={e.field}): {e.message}")
        return _json({"error": e.message}, 400)

    except Exception as e:
        logger.exception("Order email handler error")
        return _json({"error": str(e) or "Unknown error occurred"}, 500)
