"""
Shared Shopify Admin REST plumbing.

Both the order lookup and the discount issuer talk to the same store with
the same token; this base class owns the URL layout and the client setup.
"""

import httpx


class ShopifyAPI:
    def __init__(
        self,
        store: str,
        token: str,
        api_version: str = "2025-01",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = f"https://{store}/admin/api/{api_version}"
        self.token = token
        self.timeout = timeout
        self._transport = transport  # Tests inject httpx.MockTransport here

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={"X-Shopify-Access-Token": self.token},
            timeout=self.timeout,
            transport=self._transport,
        )
