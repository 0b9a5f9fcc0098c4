"""
Temporal workflow — CartRecoveryWorkflow.

One execution per created cart. The workflow sleeps on a durable timer for
the configured delay, then checks whether the cart turned into an order and,
if not, texts the customer a freshly minted discount code.

The Temporal server persists workflow state at every `await`, so a pending
check survives worker restarts; that is the whole reason the delay is a
workflow timer rather than an in-process callback.

Key constraints inside a workflow:
  - Must be **deterministic**: no I/O, no randomness, no system clock.
    (Side-effects live in activities; use `workflow.now()` for time.)
  - Use `workflow.logger` instead of the stdlib `logging` module.
"""

import asyncio
from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy
from temporalio.exceptions import ActivityError, ApplicationError

# Pydantic and our own modules use constructs the sandbox would flag, so they
# bypass the sandbox's import interception. Nothing here has import-time
# side-effects.
with workflow.unsafe.imports_passed_through():
    from cart_recovery.activities import create_discount, find_orders_for_cart, record_reminder, send_reminder
    from cart_recovery.domain.models import (
        RecoveryRequest,
        RecoveryResult,
        RecoveryState,
        RecoveryStatus,
        ReminderInput,
        ReminderLogEntry,
    )

# A failed step is terminal for the cart: no retries of any activity.
NO_RETRY = RetryPolicy(maximum_attempts=1)


@workflow.defn
class CartRecoveryWorkflow:
    """Deferred abandonment check for a single cart.

    Execution flow:
        1. Wait `delay_seconds` (durable timer, interrupted by cancel_check)
        2. find_orders_for_cart  → OrderService      (any order → CONVERTED)
        3. no phone on the cart  → FAILED (MissingContactError)
        4. create_discount       → DiscountService
        5. send_reminder         → NotificationService
        6. record_reminder       → ReminderLog        → REMINDED

    Supports:
        - **Signal** `cancel_check`: withdraws the check while it is still
          waiting. Once the timer has fired the check runs to completion.
        - **Query** `get_status`: live view of the check's progress.
    """

    def __init__(self) -> None:
        self.state = RecoveryState()
        self.request: RecoveryRequest | None = None
        self.message_sid: str | None = None

    @workflow.signal
    async def cancel_check(self) -> None:
        if not self.state.checked:
            self.state.cancelled = True

    @workflow.query
    def get_status(self) -> dict:
        return {
            "cart_id": self.request.snapshot.cart_id if self.request else None,
            "due_at": self.state.due_at.isoformat() if self.state.due_at else None,
            "cancelled": self.state.cancelled,
            "checked": self.state.checked,
            "orders_found": self.state.orders_found,
            "discount_code": self.state.discount_code,
            "reminder_sent": self.state.reminder_sent,
            "logged": self.state.logged,
        }

    def _result(self, status: RecoveryStatus, error: str | None = None) -> RecoveryResult:
        return RecoveryResult(
            cart_id=self.request.snapshot.cart_id if self.request else "",
            status=status,
            discount_code=self.state.discount_code,
            message_sid=self.message_sid,
            error=error,
        )

    async def _wait_for_due_time(self, delay: timedelta) -> None:
        if delay <= timedelta(0):
            return
        try:
            await workflow.wait_condition(lambda: self.state.cancelled, timeout=delay)
        except asyncio.TimeoutError:
            pass

    @workflow.run
    async def run(self, req: RecoveryRequest) -> RecoveryResult:
        self.request = req
        snapshot = req.snapshot
        delay = timedelta(seconds=req.delay_seconds)
        self.state.due_at = workflow.now() + delay
        activity_opts = {
            "start_to_close_timeout": timedelta(seconds=req.activity_timeout_seconds),
            "retry_policy": NO_RETRY,
        }

        workflow.logger.info("Recovery check for cart %s due at %s", snapshot.cart_id, self.state.due_at)
        await self._wait_for_due_time(delay)

        if self.state.cancelled:
            workflow.logger.info("Recovery check for cart %s cancelled", snapshot.cart_id)
            return self._result(RecoveryStatus.CANCELLED)
        self.state.checked = True

        try:
            order_ids = await workflow.execute_activity(find_orders_for_cart, snapshot.cart_id, **activity_opts)
            self.state.orders_found = len(order_ids)
            if order_ids:
                workflow.logger.info("Cart %s converted (%d order(s)), no reminder", snapshot.cart_id, len(order_ids))
                return self._result(RecoveryStatus.CONVERTED)

            # Checked before minting so that guest carts never burn a code.
            if not snapshot.customer_contact:
                workflow.logger.warning("Cart %s abandoned but has no phone number on file", snapshot.cart_id)
                return self._result(RecoveryStatus.FAILED, error="MissingContactError")

            discount = await workflow.execute_activity(create_discount, **activity_opts)
            self.state.discount_code = discount.code

            sent = await workflow.execute_activity(
                send_reminder,
                ReminderInput(
                    contact=snapshot.customer_contact,
                    recovery_url=snapshot.checkout_url,
                    code=discount.code,
                    name=snapshot.customer_name,
                ),
                **activity_opts,
            )
            self.state.reminder_sent = True
            self.message_sid = sent.sid

            await workflow.execute_activity(
                record_reminder,
                ReminderLogEntry(
                    cart_id=snapshot.cart_id,
                    contact=snapshot.customer_contact,
                    discount_code=discount.code,
                    sent_at=workflow.now(),
                ),
                **activity_opts,
            )
            self.state.logged = True

        except ActivityError as exc:
            cause = exc.cause
            error = cause.type if isinstance(cause, ApplicationError) and cause.type else type(cause).__name__
            workflow.logger.error("Recovery check for cart %s failed: %s (%s)", snapshot.cart_id, error, cause)
            return self._result(RecoveryStatus.FAILED, error=error)

        workflow.logger.info("Recovery text sent for cart %s with code %s", snapshot.cart_id, discount.code)
        return self._result(RecoveryStatus.REMINDED)
