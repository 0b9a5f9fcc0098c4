"""
Order lookup service facade.

Answers one question for the workflow: has any order been placed for this
cart? Order status is deliberately not inspected; paid, pending and
cancelled orders all count as a conversion.
"""

import logging

import httpx

from cart_recovery.domain.errors import OrderLookupError
from cart_recovery.services.shopify import ShopifyAPI

logger = logging.getLogger(__name__)


class OrderService(ShopifyAPI):
    """Queries Shopify orders filtered by cart id."""

    async def find_orders(self, cart_id: str) -> list[str]:
        logger.info("Looking up orders for cart %s", cart_id)
        params = {"query": f"cart_id:{cart_id}", "status": "any"}
        try:
            async with self._client() as client:
                response = await client.get("/orders.json", params=params)
                response.raise_for_status()
                orders = response.json()["orders"]
        except httpx.HTTPError as exc:
            raise OrderLookupError(f"Order lookup failed for cart {cart_id}: {exc}") from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise OrderLookupError(f"Unexpected order lookup response for cart {cart_id}") from exc

        order_ids = [str(order.get("id")) for order in orders]
        logger.info("Cart %s has %d matching order(s)", cart_id, len(order_ids))
        return order_ids
