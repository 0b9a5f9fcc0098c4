"""
Recovery scheduler — the workflow starter.

`schedule_check` starts one CartRecoveryWorkflow per cart and returns as
soon as the Temporal server has accepted it; the webhook response never
waits for the check. The workflow id is derived from the cart id, which
gives cancellation and status lookups a handle to find the pending check
by cart alone.
"""

import logging

from temporalio.client import Client, WorkflowHandle
from temporalio.contrib.pydantic import pydantic_data_converter
from temporalio.exceptions import WorkflowAlreadyStartedError
from temporalio.service import RPCError, RPCStatusCode

from cart_recovery.config import Settings
from cart_recovery.domain.models import CartSnapshot, RecoveryRequest
from cart_recovery.workflows import CartRecoveryWorkflow

logger = logging.getLogger(__name__)


def workflow_id_for(cart_id: str) -> str:
    return f"cart-recovery-{cart_id}"


async def connect(settings: Settings) -> Client:
    """Connect to Temporal with the Pydantic-aware converter the worker uses."""
    return await Client.connect(settings.TEMPORAL_ADDRESS, data_converter=pydantic_data_converter)


class RecoveryScheduler:
    def __init__(
        self,
        client: Client,
        task_queue: str,
        delay_seconds: int = 60 * 60,
        activity_timeout_seconds: int = 600,
    ) -> None:
        self.client = client
        self.task_queue = task_queue
        self.delay_seconds = delay_seconds
        self.activity_timeout_seconds = activity_timeout_seconds

    @classmethod
    def from_settings(cls, client: Client, settings: Settings) -> "RecoveryScheduler":
        return cls(
            client,
            settings.TASK_QUEUE,
            delay_seconds=settings.RECOVERY_DELAY_SECONDS,
            activity_timeout_seconds=settings.ACTIVITY_TIMEOUT_SECONDS,
        )

    async def schedule_check(self, snapshot: CartSnapshot) -> str:
        """Arrange a single deferred check of the cart. Returns the workflow id."""
        workflow_id = workflow_id_for(snapshot.cart_id)
        request = RecoveryRequest(
            snapshot=snapshot,
            delay_seconds=self.delay_seconds,
            activity_timeout_seconds=self.activity_timeout_seconds,
        )
        try:
            await self.client.start_workflow(
                CartRecoveryWorkflow.run,
                request,
                id=workflow_id,
                task_queue=self.task_queue,
            )
        except WorkflowAlreadyStartedError:
            logger.info("Recovery check for cart %s already pending", snapshot.cart_id)
            return workflow_id
        logger.info("Scheduled recovery check %s in %ds", workflow_id, self.delay_seconds)
        return workflow_id

    def _handle(self, cart_id: str) -> WorkflowHandle:
        return self.client.get_workflow_handle_for(CartRecoveryWorkflow.run, workflow_id_for(cart_id))

    async def cancel_check(self, cart_id: str) -> bool:
        """Withdraw a pending check. Returns False when there is nothing to cancel."""
        try:
            await self._handle(cart_id).signal(CartRecoveryWorkflow.cancel_check)
        except RPCError as exc:
            if exc.status == RPCStatusCode.NOT_FOUND:
                logger.info("No running recovery check for cart %s", cart_id)
                return False
            raise
        logger.info("Cancelled recovery check for cart %s", cart_id)
        return True

    async def get_status(self, cart_id: str) -> dict | None:
        """Live status of the cart's check, or None if it was never scheduled."""
        try:
            return await self._handle(cart_id).query(CartRecoveryWorkflow.get_status)
        except RPCError as exc:
            if exc.status == RPCStatusCode.NOT_FOUND:
                return None
            raise
