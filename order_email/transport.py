"""
Email provider transport with bounded retry.

ResendClient performs exactly one outbound call. EmailDispatcher wraps it in
a tenacity retry policy:

- 2xx                      -> success, stop
- 429 with attempts left   -> sleep attempt * base_delay, retry
- any other non-2xx        -> failure, no retry (payload/auth problems do
                              not fix themselves)
- transport fault          -> same backoff as 429; on the last attempt the
                              fault's description is returned
- 429 on the last attempt  -> "Max retries exceeded"

Backoff is linear (wait_incrementing), not exponential: the caller is a
synchronous request handler with its own deadline.
"""

import logging
import time
from typing import Any, Callable, Optional

import httpx
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_incrementing,
)

from order_email.models import DispatchOutcome, EmailMessage
from shared.config import Settings

logger = logging.getLogger("order_email.transport")

RATE_LIMITED = 429
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 1.0


class ResendClient:
    """Thin client for the Resend send-email endpoint."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.resend.com",
        timeout: float = 10.0,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        Args:
            api_key: Provider API key; sends are rejected by the provider without it
            base_url: Provider API root
            timeout: Per-call timeout in seconds
            http_client: Preconfigured httpx client (tests pass a MockTransport)
        """
        if not api_key:
            logger.warning("RESEND_API_KEY not set, the provider will reject sends")
        self.api_key = api_key
        self.endpoint = f"{base_url.rstrip('/')}/emails"
        self.http = http_client or httpx.Client(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ResendClient":
        return cls(
            api_key=settings.resend_api_key,
            base_url=settings.resend_api_url,
            timeout=settings.email_timeout,
        )

    def post_email(self, message: EmailMessage) -> httpx.Response:
        """
        Issue one send call.

        Raises:
            httpx.TransportError: connection failures and timeouts
        """
        return self.http.post(
            self.endpoint,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            json=message.to_payload(),
        )

    def close(self) -> None:
        self.http.close()


def _response_payload(response: httpx.Response) -> dict[str, Any]:
    """Decoded JSON body, or {} when the provider sent something else."""
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {"data": payload}


def _is_rate_limited(response: httpx.Response) -> bool:
    return response.status_code == RATE_LIMITED


def _fault_description(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


class EmailDispatcher:
    """
    Sends one rendered message with bounded, linear-backoff retry.

    The sleep function is injectable so tests can record delays instead of
    waiting for them.
    """

    def __init__(
        self,
        client: ResendClient,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        base_delay: float = DEFAULT_BASE_DELAY,
        sleep: Callable[[float], Any] = time.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.client = client
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.sleep = sleep

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        client: Optional[ResendClient] = None,
        sleep: Callable[[float], Any] = time.sleep,
    ) -> "EmailDispatcher":
        return cls(
            client or ResendClient.from_settings(settings),
            max_attempts=settings.email_max_attempts,
            base_delay=settings.email_retry_base_delay,
            sleep=sleep,
        )

    def send(self, message: EmailMessage) -> DispatchOutcome:
        """
        Deliver a message, retrying rate limits and transport faults.

        Returns:
            DispatchOutcome; never raises for provider or network failures
        """
        recipients = ", ".join(message.to)
        attempts = 0

        def post() -> httpx.Response:
            nonlocal attempts
            attempts += 1
            return self.client.post_email(message)

        def log_backoff(state: RetryCallState) -> None:
            if state.outcome.failed:
                reason = _fault_description(state.outcome.exception())
                logger.warning(f"Transport error sending to {recipients} (attempt {state.attempt_number}): {reason}")
            else:
                logger.warning(f"Rate limited sending to {recipients} (attempt {state.attempt_number}), backing off")

        def give_up(state: RetryCallState) -> DispatchOutcome:
            if state.outcome.failed:
                reason = _fault_description(state.outcome.exception())
                logger.error(f"Send to {recipients} failed after {state.attempt_number} attempts: {reason}")
                return DispatchOutcome(success=False, error=reason, attempts=state.attempt_number)
            logger.error(f"Giving up on {recipients}: still rate limited after {state.attempt_number} attempts")
            return DispatchOutcome(success=False, error="Max retries exceeded", attempts=state.attempt_number)

        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_incrementing(start=self.base_delay, increment=self.base_delay),
            retry=retry_if_exception_type(httpx.TransportError) | retry_if_result(_is_rate_limited),
            sleep=self.sleep,
            before_sleep=log_backoff,
            retry_error_callback=give_up,
        )
        result = retrying(post)

        if isinstance(result, DispatchOutcome):
            return result

        payload = _response_payload(result)

        if result.is_success:
            logger.info(f"Email sent to {recipients} on attempt {attempts}")
            return DispatchOutcome(success=True, data=payload, attempts=attempts)

        error = payload.get("message") or "Failed to send email"
        logger.error(f"Provider rejected email to {recipients} with {result.status_code}: {error}")
        return DispatchOutcome(success=False, error=error, attempts=attempts)
