"""Subscription lifecycle: checkout, renewal, cancellation and webhook bookkeeping."""
from flask import current_app

from ..errors import ApiError, Conflict
from ..extensions import db
from ..models.subscription import ACTIVE, CANCELED, PAST_DUE, PENDING, BillingHistory, Subscription
from ..utils.time import add_months, utcnow
from . import payments
from .paywall import latest_subscription


def current_subscription(employer_id, now=None):
    now = now or utcnow()
    return (Subscription.query
            .filter(Subscription.employer_id == employer_id,
                    Subscription.status == ACTIVE,
                    Subscription.expires_at > now)
            .order_by(Subscription.created_at.desc(), Subscription.id.desc())
            .first())


def start_subscription(employer, provider_name, email):
    """Open a PENDING subscription with the chosen provider.

    Returns ``(subscription, PaymentResult)``. Raises 409 when a current
    subscription exists and 501 for providers that are not integrated.
    """
    existing = current_subscription(employer.id)
    if existing is not None:
        raise Conflict("Active subscription already exists", extra={"subscriptionId": existing.id})

    provider = payments.get_provider(provider_name)
    if provider.capability is payments.Capability.NOT_IMPLEMENTED:
        raise payments.ProviderNotImplemented(provider.name.value)

    cfg = current_app.config
    amount = cfg["SUBSCRIPTION_PRICE"]
    currency = cfg["SUBSCRIPTION_CURRENCY"]
    months = cfg["SUBSCRIPTION_MONTHS"]

    result = provider.create_subscription(
        employer_id=employer.id,
        email=email,
        amount=amount,
        currency=currency,
        months=months,
        customer_id=employer.stripe_customer_id,
    )
    if not result.success:
        raise ApiError(result.error or "Payment processing failed", status_code=402)

    if result.customer_id:
        employer.stripe_customer_id = result.customer_id
    subscription = Subscription(
        employer_id=employer.id,
        status=PENDING,
        expires_at=add_months(utcnow(), months),
        provider=provider.name.value,
        provider_subscription_id=result.subscription_id,
        amount=amount,
        currency=currency,
    )
    db.session.add(subscription)
    db.session.flush()
    db.session.add(BillingHistory(
        employer_id=employer.id,
        subscription_id=subscription.id,
        amount=amount,
        currency=currency,
        provider=provider.name.value,
        provider_payment_id=result.payment_id,
        status="PENDING",
    ))
    db.session.commit()
    current_app.logger.info("Subscription %s opened for employer %s via %s",
                            subscription.id, employer.id, provider.name.value)
    return subscription, result


def renew_subscription(employer):
    subscription = latest_subscription(employer.id)
    if subscription is None:
        return None
    now = utcnow()
    subscription.status = ACTIVE
    subscription.expires_at = add_months(now, current_app.config["SUBSCRIPTION_MONTHS"])
    db.session.add(BillingHistory(
        employer_id=employer.id,
        subscription_id=subscription.id,
        amount=current_app.config["SUBSCRIPTION_PRICE"],
        currency=subscription.currency,
        provider=subscription.provider,
        status="PAID",
        paid_at=now,
    ))
    db.session.commit()
    current_app.logger.info("Subscription %s renewed until %s", subscription.id, subscription.expires_at)
    return subscription


def cancel_subscription(employer):
    subscription = (Subscription.query
                    .filter_by(employer_id=employer.id, status=ACTIVE)
                    .order_by(Subscription.created_at.desc(), Subscription.id.desc())
                    .first())
    if subscription is None:
        return None
    subscription.status = CANCELED
    db.session.commit()
    current_app.logger.info("Subscription %s canceled", subscription.id)
    return subscription


def apply_webhook_event(provider, event):
    """Mirror a verified provider event onto the local Subscription/BillingHistory rows.

    Returns the affected subscription, or None when the event does not
    refer to a subscription this app created.
    """
    if event.action == payments.UNKNOWN:
        current_app.logger.info("Ignoring %s webhook %s", provider.name.value, event.type)
        return None

    ref = provider.subscription_ref(event)
    subscription = (Subscription.query
                    .filter_by(provider=provider.name.value, provider_subscription_id=ref)
                    .first()) if ref else None
    if subscription is None:
        current_app.logger.warning("%s webhook %s references unknown subscription %r",
                                   provider.name.value, event.type, ref)
        return None

    now = utcnow()
    if event.action == payments.PAYMENT_SUCCEEDED:
        subscription.status = ACTIVE
        if subscription.expires_at <= now:
            subscription.expires_at = add_months(now, current_app.config["SUBSCRIPTION_MONTHS"])
        db.session.add(BillingHistory(
            employer_id=subscription.employer_id,
            subscription_id=subscription.id,
            amount=provider.amount(event),
            currency=subscription.currency,
            provider=provider.name.value,
            provider_payment_id=provider.payment_ref(event),
            invoice_url=provider.invoice_url(event),
            status="PAID",
            paid_at=now,
        ))
    elif event.action == payments.PAYMENT_FAILED:
        subscription.status = PAST_DUE
        db.session.add(BillingHistory(
            employer_id=subscription.employer_id,
            subscription_id=subscription.id,
            amount=0,
            currency=subscription.currency,
            provider=provider.name.value,
            provider_payment_id=provider.payment_ref(event),
            invoice_url=provider.invoice_url(event),
            status="FAILED",
        ))
    elif event.action == payments.SUBSCRIPTION_UPDATED:
        status = provider.status(event)
        if status is None:
            current_app.logger.warning("Unmapped subscription status in %s", event.type)
            return subscription
        subscription.status = status
    elif event.action == payments.SUBSCRIPTION_CANCELED:
        subscription.status = CANCELED

    db.session.commit()
    current_app.logger.info("Webhook %s -> subscription %s is %s", event.type, subscription.id, subscription.status)
    return subscription
