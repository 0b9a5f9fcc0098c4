import pytest

from cart_recovery.config import Settings
from cart_recovery.domain.models import CartSnapshot
from cart_recovery.services.factory import ServiceFactory


class FixedCodeGenerator:
    def __init__(self, code: str = "SAVE10_AB3F9") -> None:
        self.code = code

    def generate(self, percent: int) -> str:
        return self.code


@pytest.fixture
def webhook_secret() -> str:
    return "shpss_test_secret"


@pytest.fixture
def code_generator() -> FixedCodeGenerator:
    return FixedCodeGenerator()


@pytest.fixture
def settings(tmp_path, webhook_secret) -> Settings:
    return Settings(
        SHOPIFY_STORE="test-store.myshopify.com",
        SHOPIFY_TOKEN="shpat_test_token",
        SHOPIFY_SECRET=webhook_secret,
        TWILIO_ACCOUNT_SID="AC123",
        TWILIO_AUTH_TOKEN="twilio-token",
        TWILIO_PHONE_NUMBER="+15550000000",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'cart_logs.db'}",
    )


@pytest.fixture
def snapshot() -> CartSnapshot:
    return CartSnapshot(
        cart_id="C1",
        checkout_url="https://test-store.myshopify.com/cart/c/C1",
        customer_contact="+15551234567",
        customer_name="Ada",
    )


@pytest.fixture
def guest_snapshot() -> CartSnapshot:
    return CartSnapshot(cart_id="C1", checkout_url="https://test-store.myshopify.com/cart/c/C1")


@pytest.fixture(autouse=True)
def reset_factory():
    yield
    ServiceFactory.reset()
