"""
HTTP surface of the storefront backend.

This package provides a single FastAPI application that exposes:
- The order-confirmation email endpoint
- Its CORS preflight
- A health check
"""

from api.main import app

__all__ = ["app"]
