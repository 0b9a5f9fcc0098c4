"""
Domain models for the cart recovery workflow.

All models use Pydantic v2 BaseModel for validation and serialization.
Temporal transmits workflow/activity inputs and outputs as JSON payloads, so
every model here must round-trip through the pydantic_data_converter
configured on the worker, the scheduler and the CLI client.

Enums inherit from (str, Enum) so they serialize as plain strings in JSON.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RecoveryStatus(str, Enum):
    """Terminal status of a cart recovery workflow."""

    CONVERTED = "CONVERTED"   # An order references the cart; nothing sent
    REMINDED = "REMINDED"     # Discount issued, text sent and logged
    CANCELLED = "CANCELLED"   # cancel_check signal arrived before the check ran
    FAILED = "FAILED"         # A step failed; no retry


# ── Cart snapshot ────────────────────────────────────────────────────


class CartSnapshot(BaseModel):
    """Immutable view of a cart, captured when the create webhook arrives."""

    model_config = ConfigDict(frozen=True)

    cart_id: str = Field(..., min_length=1)
    checkout_url: str = ""
    customer_contact: str | None = None  # Phone number, absent for guest carts
    customer_name: str = ""

    @classmethod
    def from_webhook(cls, payload: dict[str, Any]) -> "CartSnapshot":
        """Build a snapshot from a Shopify cart webhook payload."""
        customer = payload.get("customer")
        if not isinstance(customer, dict):
            customer = {}
        return cls(
            cart_id=str(payload.get("id") or ""),
            checkout_url=payload.get("online_checkout_url") or "",
            customer_contact=customer.get("phone") or None,
            customer_name=customer.get("first_name") or "",
        )


# ── Workflow input / state / output ──────────────────────────────────


class RecoveryRequest(BaseModel):
    """Input to CartRecoveryWorkflow.

    The delay and activity timeout travel with the request so the workflow
    never reads configuration itself.
    """

    snapshot: CartSnapshot
    delay_seconds: int = Field(..., ge=0)
    activity_timeout_seconds: int = Field(600, gt=0)


class RecoveryState(BaseModel):
    """Mutable state tracked inside the workflow execution.

    Exposed through the `get_status` query.
    """

    due_at: datetime | None = None
    cancelled: bool = False
    checked: bool = False
    orders_found: int = 0
    discount_code: str | None = None
    reminder_sent: bool = False
    logged: bool = False


class RecoveryResult(BaseModel):
    """Final result returned by the workflow."""

    cart_id: str
    status: RecoveryStatus
    discount_code: str | None = None
    message_sid: str | None = None
    error: str | None = None  # Error type name when status is FAILED


# ── Activity payload models ──────────────────────────────────────────


class DiscountCode(BaseModel):
    """A single-use promotional code minted for one abandoned cart."""

    code: str
    price_rule_id: int | None = None


class ReminderInput(BaseModel):
    """Payload for the send_reminder activity."""

    contact: str | None
    recovery_url: str
    code: str
    name: str = ""


class SendResult(BaseModel):
    """Provider acknowledgement of an accepted text message."""

    sid: str
    status: str = ""


class ReminderLogEntry(BaseModel):
    """Payload for the record_reminder activity and the cart_logs row."""

    cart_id: str
    contact: str
    discount_code: str
    sent_at: datetime
