from flask import current_app, jsonify, request

from . import bp
from ...errors import ApiError
from ...services import billing, payments


@bp.post("/payments")
def payment_webhook():
    """Single entry point for every payment provider's callbacks.

    The raw body is kept as bytes: Stripe signs the exact payload.
    """
    payload = request.get_data()
    provider = payments.detect_provider(request.headers, payload)
    if provider is None:
        raise ApiError("Unknown payment provider")
    if provider.capability is payments.Capability.NOT_IMPLEMENTED:
        raise payments.ProviderNotImplemented(provider.name.value)

    provider.verify_webhook(payload, request.headers)
    try:
        event = provider.parse_event(payload)
    except ValueError:
        raise ApiError("Malformed webhook payload")

    current_app.logger.info("%s webhook received: %s", provider.name.value, event.type)
    billing.apply_webhook_event(provider, event)
    return jsonify({"received": True})
