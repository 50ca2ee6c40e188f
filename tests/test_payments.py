import json
from types import SimpleNamespace

import pytest
import stripe

from helpermatch.extensions import db
from helpermatch.models import BillingHistory, EmployerProfile, Subscription
from helpermatch.services import payments


@pytest.fixture
def fake_stripe(monkeypatch):
    calls = {}

    def create_customer(**kwargs):
        calls["customer"] = kwargs
        return SimpleNamespace(id="cus_123")

    def create_subscription(**kwargs):
        calls["subscription"] = kwargs
        return SimpleNamespace(id="sub_123", latest_invoice={
            "payment_intent": {"id": "pi_123", "client_secret": "pi_123_secret"},
        })

    monkeypatch.setattr(stripe.Customer, "create", create_customer)
    monkeypatch.setattr(stripe.Subscription, "create", create_subscription)
    return calls


@pytest.fixture
def accept_signatures(monkeypatch):
    monkeypatch.setattr(stripe.Webhook, "construct_event",
                        lambda payload, sig_header, secret: json.loads(payload))


def _profile(user):
    return EmployerProfile.query.filter_by(user_id=user.id).one()


def _event(event_type, obj):
    return json.dumps({"id": "evt_1", "object": "event", "type": event_type, "data": {"object": obj}})


def _post_webhook(client, body, headers=None):
    return client.post("/api/webhooks/payments", data=body, content_type="application/json",
                       headers=headers if headers is not None else {"Stripe-Signature": "t=1,v1=abc"})


def test_get_and_detect_provider():
    assert isinstance(payments.get_provider("stripe"), payments.StripeProvider)
    with pytest.raises(ValueError):
        payments.get_provider("bitcoin")
    assert payments.get_provider("GCASH").capability is payments.Capability.NOT_IMPLEMENTED

    assert isinstance(payments.detect_provider({"PayPal-Transmission-Id": "x"}, b"{}"), payments.PayPalProvider)
    assert isinstance(payments.detect_provider({}, _event("invoice.paid", {})), payments.StripeProvider)
    assert payments.detect_provider({}, b"not json") is None
    assert payments.detect_provider({}, b"{}") is None


def test_stripe_event_field_extraction():
    provider = payments.StripeProvider()
    event = provider.parse_event(_event("invoice.payment_succeeded", {
        "id": "in_1", "parent": {"subscription_details": {"subscription": "sub_9"}},
        "amount_paid": 60000, "hosted_invoice_url": "https://pay.example.com/in_1",
    }))
    assert event.action == payments.PAYMENT_SUCCEEDED
    assert provider.subscription_ref(event) == "sub_9"
    assert provider.amount(event) == 600
    assert provider.payment_ref(event) == "in_1"

    updated = provider.parse_event(_event("customer.subscription.updated", {"id": "sub_9", "status": "unpaid"}))
    assert provider.subscription_ref(updated) == "sub_9"
    assert provider.status(updated) == "PAST_DUE"
    assert provider.parse_event(_event("charge.refunded", {})).action == payments.UNKNOWN


def test_subscribe_with_stripe(app, make_employer, fake_stripe):
    user = make_employer()
    resp = app.test_client(user=user).post("/api/employer-profile/subscribe", json={"provider": "STRIPE"})
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["clientSecret"] == "pi_123_secret"

    item = fake_stripe["subscription"]["items"][0]["price_data"]
    assert item["unit_amount"] == 60000
    assert item["currency"] == "php"
    assert item["recurring"] == {"interval": "month", "interval_count": 3}

    subscription = db.session.get(Subscription, body["subscriptionId"])
    assert subscription.status == "PENDING"
    assert subscription.provider_subscription_id == "sub_123"
    assert _profile(user).stripe_customer_id == "cus_123"
    assert [b.status for b in BillingHistory.query.all()] == ["PENDING"]


def test_subscribe_reuses_customer(app, make_employer, fake_stripe):
    user = make_employer()
    profile = _profile(user)
    profile.stripe_customer_id = "cus_existing"
    db.session.commit()
    app.test_client(user=user).post("/api/employer-profile/subscribe", json={"provider": "STRIPE"})
    assert "customer" not in fake_stripe
    assert fake_stripe["subscription"]["customer"] == "cus_existing"


def test_subscribe_conflicts_with_active_subscription(app, make_employer, fake_stripe):
    resp = app.test_client(user=make_employer("ACTIVE")).post("/api/employer-profile/subscribe",
                                                               json={"provider": "STRIPE"})
    assert resp.status_code == 409
    assert "subscriptionId" in resp.get_json()


def test_placeholder_providers_are_501(app, make_employer):
    client = app.test_client(user=make_employer())
    for provider in ("PAYPAL", "GCASH"):
        resp = client.post("/api/employer-profile/subscribe", json={"provider": provider})
        assert resp.status_code == 501
        assert resp.get_json()["code"] == "PROVIDER_NOT_IMPLEMENTED"
    assert Subscription.query.count() == 0


def test_stripe_failure_is_402(app, make_employer, monkeypatch):
    def declined(**kwargs):
        raise stripe.StripeError("Your card was declined.")

    monkeypatch.setattr(stripe.Customer, "create", declined)
    resp = app.test_client(user=make_employer()).post("/api/employer-profile/subscribe", json={"provider": "STRIPE"})
    assert resp.status_code == 402
    assert Subscription.query.count() == 0


def test_renew_and_cancel(app, make_employer):
    user = make_employer("PAST_DUE")
    client = app.test_client(user=user)
    assert client.delete("/api/employer-profile/subscribe").status_code == 404

    resp = client.put("/api/employer-profile/subscribe", json={"action": "renew"})
    assert resp.status_code == 200
    assert resp.get_json()["subscription"]["status"] == "ACTIVE"
    assert [b.status for b in BillingHistory.query.all()] == ["PAID"]

    resp = client.delete("/api/employer-profile/subscribe")
    assert resp.get_json()["subscription"]["status"] == "CANCELED"

    status = client.get("/api/employer-profile/subscription").get_json()
    assert status["subscription"]["status"] == "CANCELED"
    assert status["paywall"] is None


def test_renew_without_subscription_is_404(app, make_employer):
    client = app.test_client(user=make_employer())
    assert client.put("/api/employer-profile/subscribe", json={"action": "renew"}).status_code == 404
    assert client.put("/api/employer-profile/subscribe", json={"action": "upgrade"}).status_code == 400


def test_webhook_unknown_provider(client):
    resp = _post_webhook(client, "{}", headers={})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Unknown payment provider"


def test_webhook_placeholder_provider(client):
    resp = _post_webhook(client, "{}", headers={"PayPal-Transmission-Id": "abc"})
    assert resp.status_code == 501


def test_webhook_bad_signature(client, monkeypatch):
    def reject(payload, sig_header, secret):
        raise stripe.SignatureVerificationError("No signatures found", sig_header)

    monkeypatch.setattr(stripe.Webhook, "construct_event", reject)
    resp = _post_webhook(client, _event("invoice.paid", {}))
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "Invalid webhook signature"


def test_webhook_payment_succeeded_activates(app, client, make_employer, accept_signatures):
    user = make_employer("PENDING", provider_subscription_id="sub_42")
    resp = _post_webhook(client, _event("invoice.payment_succeeded", {
        "id": "in_1", "subscription": "sub_42", "payment_intent": "pi_9", "amount_paid": 60000,
    }))
    assert resp.get_json() == {"received": True}

    subscription = Subscription.query.filter_by(provider_subscription_id="sub_42").one()
    assert subscription.status == "ACTIVE"
    payment = BillingHistory.query.one()
    assert payment.status == "PAID"
    assert float(payment.amount) == 600
    assert payment.provider_payment_id == "pi_9"
    assert payment.employer_id == _profile(user).id


def test_webhook_payment_failed_marks_past_due(client, make_employer, accept_signatures):
    make_employer("ACTIVE", provider_subscription_id="sub_42")
    _post_webhook(client, _event("invoice.payment_failed", {"id": "in_2", "subscription": "sub_42"}))
    assert Subscription.query.one().status == "PAST_DUE"
    assert BillingHistory.query.one().status == "FAILED"


def test_webhook_subscription_updates(client, make_employer, accept_signatures):
    make_employer("ACTIVE", provider_subscription_id="sub_42")
    _post_webhook(client, _event("customer.subscription.updated", {"id": "sub_42", "status": "past_due"}))
    assert Subscription.query.one().status == "PAST_DUE"
    _post_webhook(client, _event("customer.subscription.deleted", {"id": "sub_42", "status": "canceled"}))
    assert Subscription.query.one().status == "CANCELED"


def test_webhook_for_unknown_subscription_is_acknowledged(client, make_employer, accept_signatures):
    make_employer("ACTIVE", provider_subscription_id="sub_42")
    resp = _post_webhook(client, _event("invoice.payment_failed", {"id": "in_3", "subscription": "sub_other"}))
    assert resp.status_code == 200
    assert Subscription.query.one().status == "ACTIVE"
    assert BillingHistory.query.count() == 0
