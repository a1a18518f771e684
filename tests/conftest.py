"""
Shared pytest fixtures for the storefront backend tests.

The email provider and the database API are replaced with httpx
MockTransport stubs, and retry sleeps are recorded instead of waited on.
"""

import json
from datetime import datetime
from typing import Callable, Union

import httpx
import pytest

from order_email.models import NotificationRequest
from order_email.notifier import OrderNotifier
from order_email.transport import EmailDispatcher, ResendClient
from shared.config import Settings


Step = Union[httpx.Response, Exception]


class ScriptedProvider:
    """
    Stand-in for the email provider.

    Plays back a script of responses (or exceptions to raise), one per call.
    Once the script runs out the last step repeats. Every request is recorded.
    """

    def __init__(self, *steps: Step):
        self.steps = list(steps) or [httpx.Response(200, json={"id": "email-1"})]
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests), len(self.steps)) - 1
        step = self.steps[index]
        if isinstance(step, Exception):
            raise step
        return step

    @property
    def calls(self) -> int:
        return len(self.requests)

    def sent_bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]

    def recipients(self) -> list[str]:
        return [body["to"][0] for body in self.sent_bodies()]


class SleepRecorder:
    """No-op sleep that remembers the delays it was asked for."""

    def __init__(self):
        self.delays: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def settings() -> Settings:
    """Settings with an admin mailbox and a fake API key."""
    return Settings(
        resend_api_key="re_test_key",
        admin_email="admin@skarduorganic.com",
        site_url="https://shop.example.com",
        supabase_url="https://db.example.com",
        supabase_anon_key="anon-key",
    )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 10, 19, 15, 45)


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_provider() -> Callable[..., ScriptedProvider]:
    return ScriptedProvider


@pytest.fixture
def make_dispatcher(sleep_recorder: SleepRecorder):
    """Build an EmailDispatcher whose HTTP calls go to a ScriptedProvider."""
    def _make(provider: ScriptedProvider, max_attempts: int = 3, base_delay: float = 1.0) -> EmailDispatcher:
        client = ResendClient(
            api_key="re_test_key",
            http_client=httpx.Client(transport=httpx.MockTransport(provider)),
        )
        return EmailDispatcher(client, max_attempts=max_attempts, base_delay=base_delay, sleep=sleep_recorder)
    return _make


@pytest.fixture
def make_notifier(settings: Settings, make_dispatcher, fixed_now: datetime):
    """Build an OrderNotifier backed by a ScriptedProvider."""
    def _make(provider: ScriptedProvider, notifier_settings: Settings = None) -> OrderNotifier:
        return OrderNotifier(
            notifier_settings or settings,
            dispatcher=make_dispatcher(provider),
            clock=lambda: fixed_now,
        )
    return _make


# =============================================================================
# Request Fixtures
# =============================================================================

@pytest.fixture
def order_payload() -> dict:
    """A checkout payload as the storefront posts it."""
    return {
        "to": "buyer@example.com",
        "orderId": "1001",
        "customerName": "A. Buyer",
        "orderItems": [{"name": "Shilajit 20g", "quantity": 2, "price": 1500}],
        "shippingAddress": {
            "address": "1 Main St",
            "city": "Islamabad",
            "postalCode": "44000",
            "phone": "0300-0000000",
        },
        "shippingMethod": "Standard",
        "paymentMethod": "COD",
        "subtotal": 3000,
        "shippingCost": 0,
        "total": 3000,
    }


@pytest.fixture
def order_request(order_payload: dict) -> NotificationRequest:
    return NotificationRequest.model_validate(order_payload)
