"""Payment provider adapters.

Only Stripe is wired to a real API. PayPal and GCash are declared with
``Capability.NOT_IMPLEMENTED`` so callers can tell a placeholder from an
integration instead of receiving fabricated checkout data.
"""
import enum
import json
from dataclasses import dataclass
from typing import Optional

import stripe
from flask import current_app

from ..errors import ApiError


class PaymentProvider(str, enum.Enum):
    STRIPE = "STRIPE"
    PAYPAL = "PAYPAL"
    GCASH = "GCASH"


class Capability(enum.Enum):
    INTEGRATED = "INTEGRATED"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"


PAYMENT_SUCCEEDED = "payment_succeeded"
PAYMENT_FAILED = "payment_failed"
SUBSCRIPTION_UPDATED = "subscription_updated"
SUBSCRIPTION_CANCELED = "subscription_canceled"
UNKNOWN = "unknown"

STRIPE_EVENT_ACTIONS = {
    "invoice.payment_succeeded": PAYMENT_SUCCEEDED,
    "invoice.paid": PAYMENT_SUCCEEDED,
    "invoice.payment_failed": PAYMENT_FAILED,
    "customer.subscription.updated": SUBSCRIPTION_UPDATED,
    "customer.subscription.deleted": SUBSCRIPTION_CANCELED,
}

# Stripe subscription status -> local Subscription status
STRIPE_STATUSES = {
    "active": "ACTIVE",
    "trialing": "ACTIVE",
    "past_due": "PAST_DUE",
    "unpaid": "PAST_DUE",
    "canceled": "CANCELED",
    "incomplete": "PENDING",
    "incomplete_expired": "EXPIRED",
    "paused": "PAST_DUE",
}


class ProviderNotImplemented(ApiError):
    status_code = 501

    def __init__(self, provider):
        super().__init__(f"{provider} payments are not available yet", code="PROVIDER_NOT_IMPLEMENTED")


class WebhookRejected(ApiError):
    status_code = 401

    def __init__(self, message="Invalid webhook signature"):
        super().__init__(message)


@dataclass
class PaymentResult:
    success: bool
    subscription_id: Optional[str] = None
    payment_id: Optional[str] = None
    customer_id: Optional[str] = None
    client_secret: Optional[str] = None
    redirect_url: Optional[str] = None
    error: Optional[str] = None


@dataclass
class WebhookEvent:
    provider: PaymentProvider
    type: str
    action: str
    data: dict

    @property
    def object(self):
        return (self.data.get("data") or {}).get("object") or {}


def _get(obj, name, default=None):
    if obj is None:
        return default
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


class StripeProvider:
    name = PaymentProvider.STRIPE
    capability = Capability.INTEGRATED
    signature_header = "Stripe-Signature"

    def _configure(self):
        stripe.api_key = current_app.config.get("STRIPE_SECRET_KEY")
        if not stripe.api_key:
            raise ApiError("Stripe is not configured", status_code=503)

    def create_subscription(self, employer_id, email, amount, currency, months, customer_id=None):
        """Create (or reuse) the Stripe customer and an incomplete recurring subscription.

        The first invoice's confirmation secret is handed to the browser to
        confirm the card; activation arrives later via webhook.
        """
        self._configure()
        try:
            if not customer_id:
                customer = stripe.Customer.create(email=email, metadata={"employerId": str(employer_id)})
                customer_id = customer.id
            subscription = stripe.Subscription.create(
                customer=customer_id,
                items=[{
                    "price_data": {
                        "currency": currency.lower(),
                        "product": current_app.config.get("STRIPE_PRODUCT_ID"),
                        "unit_amount": int(amount) * 100,
                        "recurring": {"interval": "month", "interval_count": months},
                    },
                }],
                payment_behavior="default_incomplete",
                payment_settings={"save_default_payment_method": "on_subscription"},
                metadata={"employerId": str(employer_id)},
                expand=["latest_invoice.confirmation_secret"],
            )
        except stripe.StripeError as e:
            current_app.logger.warning("Stripe subscription creation failed: %s", e)
            return PaymentResult(success=False, error=getattr(e, "user_message", None) or str(e))

        invoice = _get(subscription, "latest_invoice")
        intent = _get(invoice, "payment_intent")
        # newer API versions expose the secret on the invoice instead of its intent
        secret = _get(intent, "client_secret") or _get(_get(invoice, "confirmation_secret"), "client_secret")
        return PaymentResult(
            success=True,
            subscription_id=subscription.id,
            customer_id=customer_id,
            payment_id=_get(intent, "id"),
            client_secret=secret,
        )

    def verify_webhook(self, payload, headers):
        secret = current_app.config.get("STRIPE_WEBHOOK_SECRET")
        if not secret:
            raise ApiError("Stripe webhook secret is not configured", status_code=503)
        signature = headers.get(self.signature_header, "")
        try:
            stripe.Webhook.construct_event(payload=payload, sig_header=signature, secret=secret)
        except (ValueError, stripe.SignatureVerificationError) as e:
            current_app.logger.warning("Rejected Stripe webhook: %s", e)
            raise WebhookRejected() from e

    def parse_event(self, payload):
        data = json.loads(payload)
        event_type = data.get("type", "")
        return WebhookEvent(
            provider=self.name,
            type=event_type,
            action=STRIPE_EVENT_ACTIONS.get(event_type, UNKNOWN),
            data=data,
        )

    # field extraction for the local bookkeeping

    def subscription_ref(self, event):
        obj = event.object
        if event.type.startswith("invoice."):
            ref = obj.get("subscription")
            if not ref:
                details = (obj.get("parent") or {}).get("subscription_details") or {}
                ref = details.get("subscription")
            return ref
        return obj.get("id")

    def payment_ref(self, event):
        obj = event.object
        return obj.get("payment_intent") or obj.get("id")

    def amount(self, event):
        obj = event.object
        cents = obj.get("amount_paid") or obj.get("amount_total") or obj.get("amount_due") or 0
        return cents / 100

    def invoice_url(self, event):
        return event.object.get("hosted_invoice_url")

    def status(self, event):
        return STRIPE_STATUSES.get(event.object.get("status"))


class PlaceholderProvider:
    """Provider listed in the product but not integrated yet."""

    capability = Capability.NOT_IMPLEMENTED
    signature_header = None

    def create_subscription(self, *args, **kwargs):
        raise ProviderNotImplemented(self.name.value)

    def verify_webhook(self, payload, headers):
        raise ProviderNotImplemented(self.name.value)

    def parse_event(self, payload):
        raise ProviderNotImplemented(self.name.value)


class PayPalProvider(PlaceholderProvider):
    name = PaymentProvider.PAYPAL
    signature_header = "PayPal-Transmission-Id"


class GCashProvider(PlaceholderProvider):
    name = PaymentProvider.GCASH
    signature_header = "GCash-Signature"


PROVIDERS = {
    PaymentProvider.STRIPE: StripeProvider,
    PaymentProvider.PAYPAL: PayPalProvider,
    PaymentProvider.GCASH: GCashProvider,
}


def get_provider(name):
    try:
        provider = PaymentProvider(str(name).upper())
    except ValueError:
        raise ValueError(f"Unsupported payment provider: {name}")
    return PROVIDERS[provider]()


def detect_provider(headers, payload):
    """Work out which provider sent a webhook from its signature header, then its body."""
    for provider_cls in PROVIDERS.values():
        if provider_cls.signature_header and headers.get(provider_cls.signature_header):
            return provider_cls()
    try:
        data = json.loads(payload or b"{}")
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    if str(data.get("object", "")) == "event" and "type" in data:
        return StripeProvider()
    if str(data.get("event_type", "")).startswith("PAYMENT.") or "resource" in data:
        return PayPalProvider()
    if str(data.get("event", "")).startswith("gcash"):
        return GCashProvider()
    return None
