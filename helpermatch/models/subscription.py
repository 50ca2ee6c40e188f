from ..extensions import db
from ..utils.time import isoformat, utcnow
from .base import TimestampMixin

ACTIVE = "ACTIVE"
PENDING = "PENDING"
PAST_DUE = "PAST_DUE"
EXPIRED = "EXPIRED"
CANCELED = "CANCELED"
SUBSCRIPTION_STATUSES = (ACTIVE, PENDING, PAST_DUE, EXPIRED, CANCELED)

PAYMENT_STATUSES = ("PENDING", "PAID", "FAILED", "REFUNDED", "CANCELED")


class Subscription(db.Model, TimestampMixin):
    __tablename__ = "subscriptions"

    id = db.Column(db.Integer, primary_key=True)
    employer_id = db.Column(db.Integer, db.ForeignKey("employer_profiles.id"), nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False, default=PENDING, index=True)
    expires_at = db.Column(db.DateTime, nullable=False)
    provider = db.Column(db.String(20), nullable=False)
    provider_subscription_id = db.Column(db.String(255), index=True)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    currency = db.Column(db.String(3), nullable=False, default="PHP")

    employer = db.relationship("EmployerProfile", back_populates="subscriptions")
    payments = db.relationship("BillingHistory", back_populates="subscription", order_by="BillingHistory.id")

    @property
    def is_current(self):
        return self.status == ACTIVE and self.expires_at > utcnow()

    def to_dict(self):
        return {
            "id": self.id,
            "status": self.status,
            "expiresAt": isoformat(self.expires_at),
            "provider": self.provider,
            "providerSubscriptionId": self.provider_subscription_id,
            "amount": float(self.amount) if self.amount is not None else None,
            "currency": self.currency,
            "createdAt": isoformat(self.created_at),
        }

    def __repr__(self) -> str:
        return f"<Subscription id={self.id} employer_id={self.employer_id} status={self.status}>"


class BillingHistory(db.Model):
    """Append-only payment ledger."""
    __tablename__ = "billing_history"

    id = db.Column(db.Integer, primary_key=True)
    employer_id = db.Column(db.Integer, db.ForeignKey("employer_profiles.id"), nullable=False, index=True)
    subscription_id = db.Column(db.Integer, db.ForeignKey("subscriptions.id"), nullable=False, index=True)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    currency = db.Column(db.String(3), nullable=False, default="PHP")
    provider = db.Column(db.String(20), nullable=False)
    provider_payment_id = db.Column(db.String(255))
    invoice_url = db.Column(db.String(1024))
    status = db.Column(db.String(20), nullable=False, default="PENDING")
    paid_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=utcnow, server_default=db.func.now(), nullable=False)

    employer = db.relationship("EmployerProfile", back_populates="billing_history")
    subscription = db.relationship("Subscription", back_populates="payments")

    def to_dict(self):
        return {
            "id": self.id,
            "subscriptionId": self.subscription_id,
            "amount": float(self.amount) if self.amount is not None else None,
            "currency": self.currency,
            "provider": self.provider,
            "providerPaymentId": self.provider_payment_id,
            "invoiceUrl": self.invoice_url,
            "status": self.status,
            "paidAt": isoformat(self.paid_at),
            "createdAt": isoformat(self.created_at),
        }
