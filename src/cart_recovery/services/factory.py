"""
Simple factory for service singletons.

Activities call `ServiceFactory.get_*()` instead of building services
themselves. Instances are created lazily from Settings and cached at class
level, so the SQLAlchemy engine behind the reminder log exists exactly once
per worker process.

Tests swap implementations by assigning the class-level cache directly
(e.g. `ServiceFactory._notification = FakeNotifier()`) and undo it with
`ServiceFactory.reset()`.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from cart_recovery.config import Settings, get_settings
from cart_recovery.services.discounts import DiscountService
from cart_recovery.services.event_log import ReminderLog
from cart_recovery.services.notify import NotificationService
from cart_recovery.services.orders import OrderService


class ServiceFactory:
    """Lazily creates and caches service instances (class-level singletons)."""

    _settings: Settings | None = None
    _engine: AsyncEngine | None = None
    _orders: OrderService | None = None
    _discounts: DiscountService | None = None
    _notification: NotificationService | None = None
    _reminder_log: ReminderLog | None = None

    @classmethod
    def configure(cls, settings: Settings) -> None:
        cls._settings = settings

    @classmethod
    def settings(cls) -> Settings:
        if cls._settings is None:
            cls._settings = get_settings()
        return cls._settings

    @classmethod
    def reset(cls) -> None:
        cls._settings = None
        cls._engine = None
        cls._orders = None
        cls._discounts = None
        cls._notification = None
        cls._reminder_log = None

    @classmethod
    def get_order_service(cls) -> OrderService:
        if cls._orders is None:
            s = cls.settings()
            cls._orders = OrderService(
                s.SHOPIFY_STORE, s.SHOPIFY_TOKEN, s.SHOPIFY_API_VERSION, timeout=s.HTTP_TIMEOUT_SECONDS
            )
        return cls._orders

    @classmethod
    def get_discount_service(cls) -> DiscountService:
        if cls._discounts is None:
            s = cls.settings()
            cls._discounts = DiscountService(
                s.SHOPIFY_STORE,
                s.SHOPIFY_TOKEN,
                s.SHOPIFY_API_VERSION,
                timeout=s.HTTP_TIMEOUT_SECONDS,
                percent=s.DISCOUNT_PERCENT,
            )
        return cls._discounts

    @classmethod
    def get_notification_service(cls) -> NotificationService:
        if cls._notification is None:
            s = cls.settings()
            cls._notification = NotificationService(
                s.TWILIO_ACCOUNT_SID,
                s.TWILIO_AUTH_TOKEN,
                s.TWILIO_PHONE_NUMBER,
                api_url=s.TWILIO_API_URL,
                percent=s.DISCOUNT_PERCENT,
                timeout=s.HTTP_TIMEOUT_SECONDS,
            )
        return cls._notification

    @classmethod
    def get_engine(cls) -> AsyncEngine:
        if cls._engine is None:
            cls._engine = create_async_engine(cls.settings().DATABASE_URL)
        return cls._engine

    @classmethod
    def get_reminder_log(cls) -> ReminderLog:
        if cls._reminder_log is None:
            cls._reminder_log = ReminderLog(cls.get_engine())
        return cls._reminder_log
