"""
Tests for the email transport and its retry policy.

The provider is a scripted MockTransport; sleeps are recorded, not waited on.
"""

import logging

import httpx
import pytest

from order_email.models import EmailMessage
from order_email.transport import EmailDispatcher, ResendClient


@pytest.fixture
def message() -> EmailMessage:
    return EmailMessage(
        sender="Skardu Organics <orders@skarduorganic.com>",
        to=["buyer@example.com"],
        subject="Order Confirmed",
        html="<p>Thanks</p>",
    )


def rate_limited() -> httpx.Response:
    return httpx.Response(429, json={"message": "Too many requests"})


def sent(email_id: str = "email-1") -> httpx.Response:
    return httpx.Response(200, json={"id": email_id})


class TestResendClient:
    """Tests for the single-call provider client."""

    def test_posts_bearer_authenticated_json(self, make_provider, message):
        """Test the request shape sent to the provider."""
        provider = make_provider(sent())
        client = ResendClient(
            api_key="re_secret",
            http_client=httpx.Client(transport=httpx.MockTransport(provider)),
        )

        response = client.post_email(message)

        assert response.status_code == 200
        request = provider.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://api.resend.com/emails"
        assert request.headers["Authorization"] == "Bearer re_secret"
        assert provider.sent_bodies()[0] == {
            "from": "Skardu Organics <orders@skarduorganic.com>",
            "to": ["buyer@example.com"],
            "subject": "Order Confirmed",
            "html": "<p>Thanks</p>",
        }

    def test_custom_base_url(self, make_provider, message):
        provider = make_provider(sent())
        client = ResendClient(
            api_key="k",
            base_url="http://localhost:9000/",
            http_client=httpx.Client(transport=httpx.MockTransport(provider)),
        )

        client.post_email(message)

        assert str(provider.requests[0].url) == "http://localhost:9000/emails"


class TestEmailDispatcherSuccess:
    """Tests for sends that succeed."""

    def test_first_attempt_success(self, make_provider, make_dispatcher, sleep_recorder, message):
        """Test that a 2xx response returns immediately with the payload."""
        provider = make_provider(sent("abc"))
        dispatcher = make_dispatcher(provider)

        outcome = dispatcher.send(message)

        assert outcome.success is True
        assert outcome.data == {"id": "abc"}
        assert outcome.error is None
        assert outcome.attempts == 1
        assert provider.calls == 1
        assert sleep_recorder.delays == []

    def test_rate_limited_twice_then_success(self, make_provider, make_dispatcher, sleep_recorder, message):
        """Test linear backoff: waits 1x then 2x the base delay."""
        provider = make_provider(rate_limited(), rate_limited(), sent())
        dispatcher = make_dispatcher(provider)

        outcome = dispatcher.send(message)

        assert outcome.success is True
        assert outcome.attempts == 3
        assert provider.calls == 3
        assert sleep_recorder.delays == [1.0, 2.0]

    def test_backoff_scales_with_base_delay(self, make_provider, make_dispatcher, sleep_recorder, message):
        provider = make_provider(rate_limited(), sent())
        dispatcher = make_dispatcher(provider, base_delay=0.25)

        dispatcher.send(message)

        assert sleep_recorder.delays == [0.25]

    def test_recovers_from_transport_fault(self, make_provider, make_dispatcher, sleep_recorder, message):
        """Test that a connection error is retried with the same backoff."""
        provider = make_provider(httpx.ConnectError("connection refused"), sent())
        dispatcher = make_dispatcher(provider)

        outcome = dispatcher.send(message)

        assert outcome.success is True
        assert outcome.attempts == 2
        assert sleep_recorder.delays == [1.0]

    def test_non_json_success_body(self, make_provider, make_dispatcher, message):
        provider = make_provider(httpx.Response(200, text="accepted"))
        dispatcher = make_dispatcher(provider)

        outcome = dispatcher.send(message)

        assert outcome.success is True
        assert outcome.data == {}


class TestEmailDispatcherFailure:
    """Tests for sends that fail."""

    def test_always_rate_limited(self, make_provider, make_dispatcher, sleep_recorder, message):
        """Test that exhaustion stops at exactly max_attempts."""
        provider = make_provider(rate_limited())
        dispatcher = make_dispatcher(provider)

        outcome = dispatcher.send(message)

        assert outcome.success is False
        assert "max retries exceeded" in outcome.error.lower()
        assert outcome.attempts == 3
        assert provider.calls == 3
        # No wait after the final attempt
        assert sleep_recorder.delays == [1.0, 2.0]

    @pytest.mark.parametrize("status", [400, 401, 403, 422, 500, 503])
    def test_non_retryable_status(self, make_provider, make_dispatcher, sleep_recorder, message, status):
        """Test that non-429 errors fail after a single attempt."""
        provider = make_provider(httpx.Response(status, json={"message": "API key is invalid"}))
        dispatcher = make_dispatcher(provider)

        outcome = dispatcher.send(message)

        assert outcome.success is False
        assert outcome.error == "API key is invalid"
        assert outcome.attempts == 1
        assert provider.calls == 1
        assert sleep_recorder.delays == []

    def test_non_retryable_without_message(self, make_provider, make_dispatcher, message):
        provider = make_provider(httpx.Response(500, text="Internal Server Error"))
        dispatcher = make_dispatcher(provider)

        outcome = dispatcher.send(message)

        assert outcome.error == "Failed to send email"

    def test_persistent_transport_fault(self, make_provider, make_dispatcher, sleep_recorder, message):
        """Test that the final fault's description is returned."""
        provider = make_provider(httpx.ReadTimeout("timed out"))
        dispatcher = make_dispatcher(provider)

        outcome = dispatcher.send(message)

        assert outcome.success is False
        assert outcome.error == "timed out"
        assert provider.calls == 3
        assert sleep_recorder.delays == [1.0, 2.0]

    def test_rate_limit_then_rejection(self, make_provider, make_dispatcher, message):
        provider = make_provider(rate_limited(), httpx.Response(422, json={"message": "Invalid `to` field"}))
        dispatcher = make_dispatcher(provider)

        outcome = dispatcher.send(message)

        assert outcome.success is False
        assert outcome.error == "Invalid `to` field"
        assert outcome.attempts == 2

    def test_single_attempt_policy(self, make_provider, make_dispatcher, sleep_recorder, message):
        provider = make_provider(rate_limited())
        dispatcher = make_dispatcher(provider, max_attempts=1)

        outcome = dispatcher.send(message)

        assert outcome.success is False
        assert provider.calls == 1
        assert sleep_recorder.delays == []

    def test_rejects_zero_attempts(self):
        client = ResendClient(api_key="k", http_client=httpx.Client())
        with pytest.raises(ValueError):
            EmailDispatcher(client, max_attempts=0)


class TestFromSettings:
    """Tests for building the dispatcher from Settings."""

    def test_uses_configured_policy(self, settings):
        settings = settings.model_copy(update={"email_max_attempts": 5, "email_retry_base_delay": 0.5})

        dispatcher = EmailDispatcher.from_settings(settings)

        assert dispatcher.max_attempts == 5
        assert dispatcher.base_delay == 0.5
        assert dispatcher.client.api_key == "re_test_key"
        assert dispatcher.client.endpoint == "https://api.resend.com/emails"


class TestEmailDispatcherRetryPolicy:
    """Tests for what the retry policy does and does not retry."""

    def test_unexpected_error_is_not_retried(self, make_provider, make_dispatcher, sleep_recorder, message):
        """Test that only transport faults are retried; other errors propagate."""
        provider = make_provider(RuntimeError("boom"))
        dispatcher = make_dispatcher(provider)

        with pytest.raises(RuntimeError):
            dispatcher.send(message)

        assert provider.calls == 1
        assert sleep_recorder.delays == []

    def test_backoff_is_logged(self, make_provider, make_dispatcher, message, caplog):
        provider = make_provider(rate_limited(), httpx.ConnectError("refused"), sent())
        dispatcher = make_dispatcher(provider)

        with caplog.at_level(logging.WARNING, logger="order_email.transport"):
            outcome = dispatcher.send(message)

        assert outcome.success is True
        warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
        assert "Rate limited sending to buyer@example.com (attempt 1), backing off" in warnings
        assert "Transport error sending to buyer@example.com (attempt 2): refused" in warnings
