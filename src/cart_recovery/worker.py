"""
Temporal worker — polls the cart recovery task queue.

A **worker** is a long-running process that connects to the Temporal server
and polls a **task queue** for work. It registers:
  - **Workflows** it can execute (here: CartRecoveryWorkflow)
  - **Activities** it can run (order lookup, discount creation, text
    message send, reminder log write)

Pending checks live on the Temporal server, not in this process, so the
worker can be restarted at any time without losing scheduled checks.

Run with:
    python -m cart_recovery.worker
"""

import asyncio
import logging

from temporalio.worker import Worker

from cart_recovery.activities import ALL_ACTIVITIES
from cart_recovery.config import LOG_FORMAT, get_settings
from cart_recovery.scheduler import connect
from cart_recovery.services.factory import ServiceFactory
from cart_recovery.workflows import CartRecoveryWorkflow


async def run_worker() -> None:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    logger = logging.getLogger(__name__)

    settings = get_settings()
    ServiceFactory.configure(settings)
    # The reminder log table must exist before the first record_reminder.
    await ServiceFactory.get_reminder_log().init_schema()

    # Same pydantic_data_converter as the scheduler, or payloads won't decode.
    client = await connect(settings)
    logger.info("Connected to Temporal — starting worker on queue %r", settings.TASK_QUEUE)

    worker = Worker(
        client,
        task_queue=settings.TASK_QUEUE,
        workflows=[CartRecoveryWorkflow],
        activities=ALL_ACTIVITIES,
    )
    try:
        await worker.run()
    finally:
        await ServiceFactory.get_engine().dispose()


def main() -> None:
    asyncio.run(run_worker())


if __name__ == "__main__":
    main()
