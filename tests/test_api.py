import base64
import hashlib
import hmac
import json

import pytest
from fastapi.testclient import TestClient

from cart_recovery.api import HMAC_HEADER, create_app, verify_signature
from cart_recovery.domain.errors import AuthenticationError


class FakeScheduler:
    def __init__(self):
        self.scheduled = []
        self.cancelled = []
        self.statuses = {}

    async def schedule_check(self, snapshot):
        self.scheduled.append(snapshot)
        return f"cart-recovery-{snapshot.cart_id}"

    async def cancel_check(self, cart_id):
        self.cancelled.append(cart_id)
        return True

    async def get_status(self, cart_id):
        return self.statuses.get(cart_id)


def sign(body: bytes, secret: str) -> str:
    return base64.b64encode(hmac.new(secret.encode(), body, hashlib.sha256).digest()).decode()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def signed(webhook_secret):
    def headers(body: bytes) -> dict:
        return {HMAC_HEADER: sign(body, webhook_secret)}

    return headers


@pytest.fixture
def client(settings, scheduler):
    return TestClient(create_app(settings, scheduler=scheduler))


CART = {
    "id": "C1",
    "online_checkout_url": "https://test-store.myshopify.com/cart/c/C1",
    "customer": {"phone": "+15551234567", "first_name": "Ada"},
}


def test_verify_signature_accepts_valid_digest(webhook_secret):
    body = b'{"id": "C1"}'

    verify_signature(webhook_secret, body, sign(body, webhook_secret))


@pytest.mark.parametrize("signature", [None, "", "bm90LWEtc2lnbmF0dXJl"])
def test_verify_signature_rejects(webhook_secret, signature):
    with pytest.raises(AuthenticationError):
        verify_signature(webhook_secret, b'{"id": "C1"}', signature)


def test_cart_create_schedules_check(client, scheduler, signed):
    body = json.dumps(CART).encode()

    response = client.post("/webhooks/cart/create", content=body, headers=signed(body))

    assert response.status_code == 200
    assert response.text == "Cart received"
    assert len(scheduler.scheduled) == 1
    snapshot = scheduler.scheduled[0]
    assert snapshot.cart_id == "C1"
    assert snapshot.customer_contact == "+15551234567"
    assert snapshot.customer_name == "Ada"


def test_bad_signature_rejected_before_scheduling(client, scheduler):
    body = json.dumps(CART).encode()

    response = client.post("/webhooks/cart/create", content=body, headers={HMAC_HEADER: sign(body, "wrong")})

    assert response.status_code == 401
    assert response.text == "Webhook verification failed"
    assert scheduler.scheduled == []


def test_missing_signature_rejected(client, scheduler):
    response = client.post("/webhooks/cart/create", content=json.dumps(CART).encode())

    assert response.status_code == 401
    assert scheduler.scheduled == []


def test_signature_covers_raw_body(client, scheduler, signed):
    body = json.dumps(CART).encode()
    tampered = json.dumps({**CART, "id": "C2"}).encode()

    response = client.post("/webhooks/cart/create", content=tampered, headers=signed(body))

    assert response.status_code == 401
    assert scheduler.scheduled == []


def test_malformed_json_is_bad_request(client, scheduler, signed):
    body = b"{not json"

    response = client.post("/webhooks/cart/create", content=body, headers=signed(body))

    assert response.status_code == 400
    assert scheduler.scheduled == []


def test_cart_without_id_is_bad_request(client, scheduler, signed):
    body = json.dumps({"online_checkout_url": "https://x"}).encode()

    response = client.post("/webhooks/cart/create", content=body, headers=signed(body))

    assert response.status_code == 400
    assert scheduler.scheduled == []


def test_order_create_cancels_pending_check(client, scheduler, signed):
    body = json.dumps({"id": 1001, "cart_token": "C1"}).encode()

    response = client.post("/webhooks/orders/create", content=body, headers=signed(body))

    assert response.status_code == 200
    assert response.json() == {"cancelled": True}
    assert scheduler.cancelled == ["C1"]


def test_order_without_cart_token_is_ignored(client, scheduler, signed):
    body = json.dumps({"id": 1001}).encode()

    response = client.post("/webhooks/orders/create", content=body, headers=signed(body))

    assert response.json() == {"cancelled": False}
    assert scheduler.cancelled == []


def test_recovery_status(client, scheduler):
    scheduler.statuses["C1"] = {"cart_id": "C1", "checked": False, "cancelled": False}

    response = client.get("/carts/C1/recovery")

    assert response.status_code == 200
    assert response.json()["cart_id"] == "C1"


def test_recovery_status_unknown_cart(client):
    assert client.get("/carts/C9/recovery").status_code == 404


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


@pytest.mark.parametrize("customer", ["Ada", ["+15551234567"], 42])
def test_non_object_customer_is_treated_as_guest(client, scheduler, signed, customer):
    body = json.dumps({**CART, "customer": customer}).encode()

    response = client.post("/webhooks/cart/create", content=body, headers=signed(body))

    assert response.status_code == 200
    assert scheduler.scheduled[0].customer_contact is None
    assert scheduler.scheduled[0].customer_name == ""
