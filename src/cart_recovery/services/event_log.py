"""
Reminder event log.

Append-only record of every recovery text that was sent, stored in the
`cart_logs` table through SQLAlchemy's async engine. The engine is built
once at startup and handed to ReminderLog; nothing here opens connections
on import.
"""

import logging
from datetime import datetime

from sqlalchemy import DateTime, Integer, String, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from cart_recovery.domain.errors import PersistenceError
from cart_recovery.domain.models import ReminderLogEntry

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class CartLog(Base):
    """One sent reminder. Never updated or deleted by this system."""

    __tablename__ = "cart_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    cart_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(64), nullable=False)
    discount: Mapped[str] = mapped_column(String(255), nullable=False)
    sent_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class ReminderLog:
    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine

    async def init_schema(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def record(self, cart_id: str, contact: str, discount_code: str, sent_at: datetime) -> None:
        try:
            async with AsyncSession(self.engine) as session, session.begin():
                session.add(CartLog(cart_id=cart_id, phone=contact, discount=discount_code, sent_at=sent_at))
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not record reminder for cart {cart_id}: {exc}") from exc
        logger.info("Recorded reminder for cart %s (code %s)", cart_id, discount_code)

    async def entries_for(self, cart_id: str) -> list[ReminderLogEntry]:
        """Reporting helper; the workflow itself never reads the log."""
        try:
            async with AsyncSession(self.engine) as session:
                rows = await session.scalars(select(CartLog).where(CartLog.cart_id == cart_id).order_by(CartLog.id))
                return [
                    ReminderLogEntry(cart_id=row.cart_id, contact=row.phone, discount_code=row.discount, sent_at=row.sent_at)
                    for row in rows
                ]
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not read reminders for cart {cart_id}: {exc}") from exc
