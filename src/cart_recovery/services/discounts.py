"""
Discount issuer service facade.

Mints a fresh single-use promotion in two Shopify calls:
  1. create a percentage-off price rule (all line items, all customers,
     starting now)
  2. create a discount code under that rule

Randomness lives here (through the CodeGenerator), never in the workflow.
"""

import logging
from datetime import datetime, timezone

import httpx

from cart_recovery.domain.discounts import CodeGenerator, RandomCodeGenerator
from cart_recovery.domain.errors import IssuerError
from cart_recovery.domain.models import DiscountCode
from cart_recovery.services.shopify import ShopifyAPI

logger = logging.getLogger(__name__)


class DiscountService(ShopifyAPI):
    def __init__(
        self,
        *args,
        percent: int = 10,
        generator: CodeGenerator | None = None,
        **kwargs,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.percent = percent
        self.generator: CodeGenerator = generator or RandomCodeGenerator()

    def _price_rule_payload(self, code: str) -> dict:
        return {
            "price_rule": {
                "title": code,
                "target_type": "line_item",
                "target_selection": "all",
                "allocation_method": "across",
                "value_type": "percentage",
                "value": f"-{self.percent:.1f}",
                "customer_selection": "all",
                "starts_at": datetime.now(timezone.utc).isoformat(),
            }
        }

    async def create_discount(self) -> DiscountCode:
        code = self.generator.generate(self.percent)
        logger.info("Creating %d%% price rule for code %s", self.percent, code)
        try:
            async with self._client() as client:
                response = await client.post("/price_rules.json", json=self._price_rule_payload(code))
                response.raise_for_status()
                price_rule_id = response.json()["price_rule"]["id"]

                response = await client.post(
                    f"/price_rules/{price_rule_id}/discount_codes.json",
                    json={"discount_code": {"code": code}},
                )
                response.raise_for_status()
                issued = response.json()["discount_code"]["code"]
        except httpx.HTTPError as exc:
            raise IssuerError(f"Discount creation failed: {exc}") from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise IssuerError("Unexpected discount creation response") from exc

        logger.info("Issued discount code %s under price rule %s", issued, price_rule_id)
        return DiscountCode(code=issued, price_rule_id=price_rule_id)
