"""
Order-confirmation orchestration.

Sequence for one request:
1. Render and send the customer confirmation (always)
2. Render and send the admin copy, if an admin mailbox is configured and the
   request did not opt out with sendAdminCopy=false
3. Report success iff the customer email went out

The two sends are sequential. An admin failure is recorded in the error list
but never changes the overall result.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from order_email.models import AggregateResult, NotificationRequest, NotificationResponse
from order_email.templates import render_admin_email, render_customer_email
from order_email.transport import EmailDispatcher
from shared.config import Settings

logger = logging.getLogger("order_email")

SUCCESS_MESSAGE = "Order confirmation email sent successfully"
FAILURE_MESSAGE = "Failed to send emails"


class OrderNotifier:
    """Sends the customer and admin emails for a checkout."""

    def __init__(
        self,
        settings: Settings,
        dispatcher: Optional[EmailDispatcher] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.settings = settings
        self.dispatcher = dispatcher or EmailDispatcher.from_settings(settings)
        self.clock = clock

    def wants_admin_copy(self, request: NotificationRequest) -> bool:
        return bool(self.settings.admin_email) and request.send_admin_copy is not False

    def notify(self, request: NotificationRequest) -> NotificationResponse:
        """Run both dispatches for a validated request and aggregate the outcomes."""
        now = self.clock()
        results = AggregateResult()

        customer_message = render_customer_email(request, self.settings, now=now)
        customer = self.dispatcher.send(customer_message)
        if customer.success:
            results.customer = customer.data if customer.data is not None else {}
            logger.info(f"Customer email sent to {request.to} for order #{request.order_id}")
        else:
            results.errors.append(f"Customer email failed: {customer.error}")
            logger.error(f"Customer email failed for order #{request.order_id}: {customer.error}")

        if self.wants_admin_copy(request):
            admin_message = render_admin_email(request, self.settings, now=now)
            admin = self.dispatcher.send(admin_message)
            if admin.success:
                results.admin = admin.data if admin.data is not None else {}
                logger.info(f"Admin notification sent for order #{request.order_id}")
            else:
                results.errors.append(f"Admin email failed: {admin.error}")
                logger.warning(f"Admin email failed for order #{request.order_id}: {admin.error}")

        success = results.customer is not None
        return NotificationResponse(
            success=success,
            message=SUCCESS_MESSAGE if success else FAILURE_MESSAGE,
            data=results,
        )
