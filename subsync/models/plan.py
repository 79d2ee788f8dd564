from datetime import datetime
from sqlalchemy import ForeignKey, String, Enum, Numeric, Boolean, DateTime, Text, JSON
from sqlalchemy.orm import Mapped, mapped_column
from subsync.db.base import Base
from subsync.utils.dt import utcnow

BILLING_TYPES = ("monthly", "yearly")
TECHNOLOGIES = ("fibernet", "copper")
PLAN_STATUSES = ("active", "inactive")

class Plan(Base):
    __tablename__ = "plans"

    id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(String(120))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Money (use Numeric for currency)
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False))

    # One of: "monthly", "yearly"
    billing_type: Mapped[str] = mapped_column(
        "type", Enum(*BILLING_TYPES, name="plan_billing_type"), default="monthly"
    )
    # One of: "fibernet", "copper"
    technology: Mapped[str] = mapped_column(Enum(*TECHNOLOGIES, name="plan_technology"))

    # Free-form display values like "500GB" / "Unlimited" and "Up to 500 Mbps"
    data_quota: Mapped[str] = mapped_column(String(32))
    speed: Mapped[str] = mapped_column(String(64))
    features: Mapped[list[str]] = mapped_column(JSON, default=list)

    auto_renewal: Mapped[bool] = mapped_column(Boolean, default=True)
    is_popular: Mapped[bool] = mapped_column(Boolean, default=False)

    # Soft delete flips this to "inactive"; rows are never removed
    status: Mapped[str] = mapped_column(Enum(*PLAN_STATUSES, name="plan_status"), default="active", index=True)

    created_by: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
