from datetime import date, datetime
from sqlalchemy import ForeignKey, Enum, Date, DateTime, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from subsync.db.base import Base
from subsync.utils.dt import utcnow

BILLING_STATUSES = ("pending", "paid", "failed", "refunded")

# Allowed status moves for an existing record
BILLING_TRANSITIONS: dict[str, tuple[str, ...]] = {
    "pending": ("paid", "failed"),
    "paid": ("refunded",),
    "failed": (),
    "refunded": (),
}

class BillingRecord(Base):
    __tablename__ = "billing_records"

    id: Mapped[int] = mapped_column(primary_key=True)

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    subscription_id: Mapped[int] = mapped_column(ForeignKey("subscriptions.id"), index=True)

    amount: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False))
    billing_date: Mapped[date] = mapped_column(Date)
    due_date: Mapped[date] = mapped_column(Date)

    status: Mapped[str] = mapped_column(
        Enum(*BILLING_STATUSES, name="billing_status"),
        default="pending",
        index=True
    )

    invoice_id: Mapped[str] = mapped_column(String(64), unique=True)
    payment_method: Mapped[str | None] = mapped_column(String(32), nullable=True)
    payment_reference: Mapped[str | None] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    subscription = relationship("Subscription")
