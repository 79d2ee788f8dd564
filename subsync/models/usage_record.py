from datetime import date
from sqlalchemy import ForeignKey, Date, Float, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from subsync.db.base import Base

class UsageRecord(Base):
    """Daily data usage for one subscription."""

    __tablename__ = "usage_tracking"

    id: Mapped[int] = mapped_column(primary_key=True)
    subscription_id: Mapped[int] = mapped_column(ForeignKey("subscriptions.id"), index=True)
    usage_date: Mapped[date] = mapped_column("date", Date)
    usage_gb: Mapped[float] = mapped_column(Float, default=0.0)

    subscription = relationship("Subscription")

    __table_args__ = (
        UniqueConstraint("subscription_id", "date", name="uq_usage_tracking_subscription_date"),
    )
