"""
Notification service facade.

Sends the recovery text through the Twilio Messages REST API. A missing
phone number is a precondition failure (MissingContactError) raised before
any network traffic; provider rejections and transport failures are
SendErrors.
"""

import logging

import httpx

from cart_recovery.domain.errors import MissingContactError, SendError
from cart_recovery.domain.messages import compose_reminder
from cart_recovery.domain.models import SendResult

logger = logging.getLogger(__name__)


class NotificationService:
    """Texts a recovery offer to a customer."""

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        sender: str,
        api_url: str = "https://api.twilio.com",
        percent: int = 10,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.sender = sender
        self.api_url = api_url
        self.percent = percent
        self.timeout = timeout
        self._transport = transport

    async def send_reminder(self, contact: str | None, recovery_url: str, code: str, name: str = "") -> SendResult:
        if not contact:
            raise MissingContactError("No phone number on file for this cart")

        body = compose_reminder(name, code, recovery_url, percent=self.percent)
        logger.info("Sending recovery text with code %s", code)
        try:
            async with httpx.AsyncClient(
                base_url=self.api_url,
                auth=(self.account_sid, self.auth_token),
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    f"/2010-04-01/Accounts/{self.account_sid}/Messages.json",
                    data={"To": contact, "From": self.sender, "Body": body},
                )
                response.raise_for_status()
                payload = response.json()
                result = SendResult(sid=payload["sid"], status=payload.get("status") or "")
        except httpx.HTTPError as exc:
            raise SendError(f"Message send failed: {exc}") from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise SendError("Unexpected messaging provider response") from exc

        logger.info("Recovery text accepted by provider, sid %s", result.sid)
        return result
