"""
Temporal activities — thin wrappers delegating to the service layer.

Every side-effect of a recovery check happens here: the Shopify order
lookup, discount creation, the Twilio send and the reminder log write.
The workflow runs each of them with a single attempt, so an activity that
raises ends that cart's check.

Domain errors are re-raised as non-retryable ApplicationErrors whose `type`
is the domain error's class name (e.g. "MissingContactError"); that name is
what the workflow reports back in RecoveryResult.error.
"""

import logging
from collections.abc import Awaitable
from typing import TypeVar

from temporalio import activity
from temporalio.exceptions import ApplicationError

from cart_recovery.domain.errors import CartRecoveryError
from cart_recovery.domain.models import DiscountCode, ReminderInput, ReminderLogEntry, SendResult
from cart_recovery.services.factory import ServiceFactory

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _run(call: Awaitable[T]) -> T:
    try:
        return await call
    except CartRecoveryError as exc:
        raise ApplicationError(str(exc), type=type(exc).__name__, non_retryable=True) from exc


@activity.defn
async def find_orders_for_cart(cart_id: str) -> list[str]:
    """Return the ids of all orders (any status) that reference the cart."""
    logger.info("Activity find_orders_for_cart started for cart %s", cart_id)
    return await _run(ServiceFactory.get_order_service().find_orders(cart_id))


@activity.defn
async def create_discount() -> DiscountCode:
    """Mint a fresh percentage-off code via DiscountService."""
    logger.info("Activity create_discount started")
    return await _run(ServiceFactory.get_discount_service().create_discount())


@activity.defn
async def send_reminder(input: ReminderInput) -> SendResult:
    """Text the recovery offer via NotificationService."""
    logger.info("Activity send_reminder started with code %s", input.code)
    return await _run(
        ServiceFactory.get_notification_service().send_reminder(
            input.contact, input.recovery_url, input.code, input.name
        )
    )


@activity.defn
async def record_reminder(entry: ReminderLogEntry) -> None:
    """Append the sent reminder to the cart_logs table."""
    logger.info("Activity record_reminder started for cart %s", entry.cart_id)
    await _run(
        ServiceFactory.get_reminder_log().record(entry.cart_id, entry.contact, entry.discount_code, entry.sent_at)
    )


ALL_ACTIVITIES = [find_orders_for_cart, create_discount, send_reminder, record_reminder]
