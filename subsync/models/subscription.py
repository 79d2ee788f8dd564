from datetime import date, datetime
from sqlalchemy import ForeignKey, Enum, Date, DateTime, Numeric, Float, Boolean, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from subsync.db.base import Base
from subsync.utils.dt import utcnow

SUBSCRIPTION_STATUSES = ("pending", "active", "paused", "terminated")

class Subscription(Base):
    __tablename__ = "subscriptions"

    id: Mapped[int] = mapped_column(primary_key=True)

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    plan_id: Mapped[int] = mapped_column(ForeignKey("plans.id"), index=True)
    discount_id: Mapped[int | None] = mapped_column(ForeignKey("discounts.id"), nullable=True)

    status: Mapped[str] = mapped_column(
        Enum(*SUBSCRIPTION_STATUSES, name="subscription_status"),
        default="pending",
        index=True
    )

    start_date: Mapped[date] = mapped_column(Date)
    end_date: Mapped[date] = mapped_column(Date)

    # Price snapshot at purchase time, decoupled from the plan's current price
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False))
    usage_gb: Mapped[float] = mapped_column(Float, default=0.0)
    auto_renewal: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    user = relationship("User")
    plan = relationship("Plan")
    discount = relationship("Discount")

    __table_args__ = (
        Index("ix_subscriptions_user_status", "user_id", "status"),
    )
