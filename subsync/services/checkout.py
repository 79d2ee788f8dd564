"""
Subscribing a user to a plan: price snapshot, optional discount, mocked
payment and the first billing record.
"""

import logging
from datetime import date, timedelta

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from subsync.core.config import settings
from subsync.core.errors import DataError
from subsync.integrations.payments import MockPaymentGateway, get_payment_gateway
from subsync.models.billing_record import BillingRecord
from subsync.models.discount import Discount
from subsync.models.notification import Notification
from subsync.models.subscription import Subscription
from subsync.repositories.access import DataAccess
from subsync.utils.dt import add_months, today

logger = logging.getLogger(__name__)

# processor payment status -> billing record status
PAYMENT_TO_BILLING = {
    "approved": "paid",
    "pending": "pending",
    "rejected": "failed",
}


def discounted_price(price: float, percentage: int) -> float:
    return round(price * (100 - percentage) / 100, 2)


def subscribe(
    data: DataAccess,
    user_id: int,
    plan_id: int,
    discount_code: str | None = None,
    payment_method: str = "card",
    gateway: MockPaymentGateway | None = None,
    on: date | None = None,
) -> tuple[Subscription, BillingRecord]:
    on = on or today()
    gateway = gateway or get_payment_gateway()

    plan = data.plans.get_by_id(plan_id)
    if plan is None or plan.status != "active":
        raise DataError("Plan is not available", status_code=404)

    discount = None
    price = plan.price
    if discount_code and discount_code.strip():
        discount = data.discounts.validate_discount_code(discount_code, on)
        if discount is None:
            raise DataError("Invalid or expired discount code")
        if not discount.applies_to(plan.id):
            raise DataError(f"Discount {discount.code} does not apply to {plan.name}")
        if discount.is_exhausted:
            raise DataError(f"Discount {discount.code} has reached its usage limit", status_code=409)
        price = discounted_price(plan.price, discount.percentage)

    months = 12 if plan.billing_type == "yearly" else 1
    db = data.db
    # One transaction: nothing is kept unless the charge and every write succeed
    try:
        sub = Subscription(
            user_id=user_id,
            plan_id=plan.id,
            discount_id=discount.id if discount else None,
            status="pending",
            start_date=on,
            end_date=add_months(on, months),
            price=price,
            auto_renewal=plan.auto_renewal,
        )
        db.add(sub)
        if discount is not None:
            # evaluated in SQL; the usage-limit CHECK rejects a lost race
            discount.usage_count = Discount.usage_count + 1
        db.flush()

        # Stable reference so a payment can be traced back to its subscription
        external_ref = f"user:{user_id}|sub:{sub.id}|plan:{plan.id}"
        status_code, resp = gateway.charge(price, payment_method, external_ref)
        if status_code not in (200, 201):
            logger.error("payment gateway returned %s for %s", status_code, external_ref)
            raise DataError("Payment could not be processed", status_code=502)

        billing_status = PAYMENT_TO_BILLING.get(resp.get("status"), "failed")
        record = BillingRecord(
            user_id=user_id,
            subscription_id=sub.id,
            amount=price,
            billing_date=on,
            due_date=on + timedelta(days=settings.invoice_due_days),
            status=billing_status,
            invoice_id=data.billing.next_invoice_id(on),
            payment_method=payment_method,
            payment_reference=resp.get("id"),
        )
        db.add(record)

        if billing_status == "paid":
            sub.status = "active"
            db.add(Notification(
                user_id=user_id,
                title="Subscription activated",
                message=f"Your {plan.name} subscription is now active.",
                type="success",
                category="subscription",
                action_url="/user?section=subscriptions",
            ))
        elif billing_status == "failed":
            db.add(Notification(
                user_id=user_id,
                title="Payment failed",
                message=f"We could not process the payment for {plan.name}. Invoice {record.invoice_id} is unpaid.",
                type="error",
                category="billing",
                action_url="/user?section=billing",
            ))

        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("checkout for user id=%s plan id=%s violated a constraint: %s", user_id, plan.id, exc.orig)
        raise DataError("Checkout failed: conflicting or invalid data", status_code=409) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("checkout for user id=%s plan id=%s failed", user_id, plan.id, exc_info=True)
        raise DataError("Checkout failed", status_code=500) from exc
    except DataError:
        db.rollback()
        raise

    db.refresh(sub)
    db.refresh(record)
    logger.info("user id=%s subscribed to plan id=%s at %.2f (%s)", user_id, plan.id, price, billing_status)
    return sub, record
