import re

import pytest
from pydantic import ValidationError

from cart_recovery.domain.discounts import RandomCodeGenerator
from cart_recovery.domain.messages import compose_reminder
from cart_recovery.domain.models import CartSnapshot


def test_snapshot_from_webhook_with_customer():
    snapshot = CartSnapshot.from_webhook(
        {
            "id": 981,
            "online_checkout_url": "https://shop.example/checkout/981",
            "customer": {"phone": "+15551234567", "first_name": "Ada"},
        }
    )

    assert snapshot.cart_id == "981"
    assert snapshot.checkout_url == "https://shop.example/checkout/981"
    assert snapshot.customer_contact == "+15551234567"
    assert snapshot.customer_name == "Ada"


def test_snapshot_from_webhook_guest_cart():
    snapshot = CartSnapshot.from_webhook({"id": "C1", "customer": None})

    assert snapshot.customer_contact is None
    assert snapshot.customer_name == ""


def test_snapshot_empty_phone_is_absent():
    snapshot = CartSnapshot.from_webhook({"id": "C1", "customer": {"phone": "", "first_name": None}})

    assert snapshot.customer_contact is None
    assert snapshot.customer_name == ""


@pytest.mark.parametrize("customer", ["Ada", [], 7])
def test_snapshot_ignores_non_object_customer(customer):
    snapshot = CartSnapshot.from_webhook({"id": "C1", "customer": customer})

    assert snapshot.customer_contact is None
    assert snapshot.customer_name == ""


def test_snapshot_requires_cart_id():
    with pytest.raises(ValidationError):
        CartSnapshot.from_webhook({"online_checkout_url": "https://shop.example"})


def test_snapshot_is_immutable(snapshot):
    with pytest.raises(ValidationError):
        snapshot.cart_id = "C2"


def test_compose_reminder_contains_code_and_url():
    body = compose_reminder("Ada", "SAVE10_AB3F9", "https://shop.example/checkout/C1")

    assert body.startswith("Hi Ada,")
    assert "SAVE10_AB3F9" in body
    assert "10% off" in body
    assert "next hour" in body
    assert body.endswith("https://shop.example/checkout/C1")


def test_compose_reminder_without_name():
    assert compose_reminder("", "SAVE10_AB3F9", "https://x").startswith("Hi, you left")


def test_random_code_format():
    code = RandomCodeGenerator().generate(10)

    assert re.fullmatch(r"SAVE10_[A-Z0-9]{5}", code)


def test_random_codes_differ():
    generator = RandomCodeGenerator(suffix_length=8)

    assert len({generator.generate(10) for _ in range(50)}) == 50
