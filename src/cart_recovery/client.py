"""
CLI client — schedules, inspects or cancels a cart recovery check.

Usage:
    # Schedule a check from a saved cart webhook payload:
    python -m cart_recovery.client schedule --payload cart.json

    # Override the delay (seconds), handy for manual testing:
    python -m cart_recovery.client schedule --payload cart.json --delay 30 --wait

    # Inspect or withdraw a pending check:
    python -m cart_recovery.client status --cart-id 123
    python -m cart_recovery.client cancel --cart-id 123
"""

import argparse
import asyncio
import json
import logging
from pathlib import Path

from cart_recovery.config import LOG_FORMAT, get_settings
from cart_recovery.domain.models import CartSnapshot
from cart_recovery.scheduler import RecoveryScheduler, connect
from cart_recovery.workflows import CartRecoveryWorkflow


async def run_client(args: argparse.Namespace) -> None:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    logger = logging.getLogger(__name__)

    settings = get_settings()
    client = await connect(settings)
    scheduler = RecoveryScheduler.from_settings(client, settings)

    if args.command == "schedule":
        snapshot = CartSnapshot.from_webhook(json.loads(Path(args.payload).read_text()))
        if args.delay is not None:
            scheduler.delay_seconds = args.delay
        workflow_id = await scheduler.schedule_check(snapshot)
        logger.info("Scheduled %s", workflow_id)
        if args.wait:
            result = await client.get_workflow_handle_for(CartRecoveryWorkflow.run, workflow_id).result()
            print(result.model_dump_json(indent=2))

    elif args.command == "status":
        status = await scheduler.get_status(args.cart_id)
        if status is None:
            logger.info("No recovery check for cart %s", args.cart_id)
        else:
            print(json.dumps(status, indent=2))

    elif args.command == "cancel":
        cancelled = await scheduler.cancel_check(args.cart_id)
        logger.info("Cancel %s for cart %s", "sent" if cancelled else "skipped", args.cart_id)


def main() -> None:
    parser = argparse.ArgumentParser(description="Manage abandoned cart recovery checks")
    sub = parser.add_subparsers(dest="command", required=True)

    schedule = sub.add_parser("schedule", help="Schedule a recovery check for a cart")
    schedule.add_argument("--payload", required=True, help="Path to a Shopify cart webhook JSON payload")
    schedule.add_argument("--delay", type=int, default=None, help="Seconds to wait before checking")
    schedule.add_argument("--wait", action="store_true", help="Block until the check finishes and print the result")

    for name, help_text in (("status", "Query a check's status"), ("cancel", "Cancel a pending check")):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("--cart-id", required=True, help="Shopify cart id")

    asyncio.run(run_client(parser.parse_args()))


if __name__ == "__main__":
    main()
