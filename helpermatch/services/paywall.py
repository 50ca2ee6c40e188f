"""Subscription paywall.

``check_access`` decides whether an employer may perform a gated action.
Expiry of lapsed rows is its own operation (``expire_lapsed_subscription``);
the gate runs it on the row it inspects and the cron endpoint runs the
batch version over every row.
"""
from dataclasses import dataclass
from typing import Optional

from flask import current_app

from ..errors import ApiError
from ..extensions import db
from ..models.employer_profile import EmployerProfile
from ..models.subscription import ACTIVE, EXPIRED, PAST_DUE, Subscription
from ..utils.time import isoformat, utcnow

GENERAL = "general"
MESSAGE = "message"
INTERVIEW = "interview"
ACTIONS = (GENERAL, MESSAGE, INTERVIEW)

ALLOW = "allow"
DENY_UNAUTHENTICATED = "deny_unauthenticated"
DENY_WRONG_ROLE = "deny_wrong_role"
DENY_NO_SUBSCRIPTION = "deny_no_subscription"
DENY_EXPIRED = "deny_expired"

SUBSCRIPTION_REQUIRED = "SUBSCRIPTION_REQUIRED"
SUBSCRIPTION_EXPIRED = "SUBSCRIPTION_EXPIRED"
READ_ONLY_MODE = "READ_ONLY_MODE"

_REQUIRED_MESSAGES = {
    GENERAL: "You need an active subscription to access this feature. Please subscribe to continue.",
    MESSAGE: "You need an active subscription to send messages. Please subscribe to continue.",
    INTERVIEW: "You need an active subscription to schedule interviews. Please subscribe to continue.",
}
_EXPIRED_MESSAGES = {
    GENERAL: "Your subscription has expired. Please renew to continue.",
    MESSAGE: "Your subscription has expired. You can view existing messages but cannot send new ones. "
             "Please renew to continue messaging.",
    INTERVIEW: "Your subscription has expired. You can view existing interviews but cannot schedule new ones. "
               "Please renew to schedule interviews.",
}


@dataclass
class AccessDecision:
    outcome: str
    code: Optional[str] = None
    message: str = ""
    subscription: Optional[Subscription] = None

    @property
    def allowed(self):
        return self.outcome == ALLOW

    @property
    def status_code(self):
        if self.outcome == ALLOW:
            return 200
        if self.outcome == DENY_UNAUTHENTICATED:
            return 401
        return 403

    def to_error(self):
        error = {
            DENY_UNAUTHENTICATED: "Unauthorized",
            DENY_WRONG_ROLE: "Access denied. Employer subscription required.",
            DENY_NO_SUBSCRIPTION: "Active subscription required",
            DENY_EXPIRED: "Subscription expired - read-only mode" if self.code == READ_ONLY_MODE
            else "Subscription expired",
        }.get(self.outcome, "Forbidden")
        extra = {"message": self.message} if self.message else None
        return ApiError(error, status_code=self.status_code, code=self.code, extra=extra)


def latest_subscription(employer_id):
    return (Subscription.query
            .filter_by(employer_id=employer_id)
            .order_by(Subscription.created_at.desc(), Subscription.id.desc())
            .first())


def expire_lapsed_subscription(subscription, now=None):
    """Flip an ACTIVE row whose expiry has passed to EXPIRED. Returns True if changed."""
    now = now or utcnow()
    if subscription is None or subscription.status != ACTIVE or subscription.expires_at > now:
        return False
    subscription.status = EXPIRED
    db.session.commit()
    current_app.logger.info("Subscription %s expired at %s", subscription.id, subscription.expires_at)
    return True


def expire_lapsed_subscriptions(now=None):
    """Reconcile every lapsed ACTIVE row; returns how many were expired."""
    now = now or utcnow()
    lapsed = Subscription.query.filter(Subscription.status == ACTIVE, Subscription.expires_at <= now).all()
    for subscription in lapsed:
        subscription.status = EXPIRED
    db.session.commit()
    if lapsed:
        current_app.logger.info("Expired %d lapsed subscriptions", len(lapsed))
    return len(lapsed)


def check_access(user, action=GENERAL, now=None):
    if action not in ACTIONS:
        raise ValueError(f"unknown paywall action: {action}")
    now = now or utcnow()

    if user is None or not getattr(user, "is_authenticated", False):
        return AccessDecision(DENY_UNAUTHENTICATED)
    if getattr(user, "role", None) != "employer":
        return AccessDecision(DENY_WRONG_ROLE)

    profile = EmployerProfile.query.filter_by(user_id=user.id).first()
    subscription = latest_subscription(profile.id) if profile else None
    if subscription is None:
        return AccessDecision(DENY_NO_SUBSCRIPTION, SUBSCRIPTION_REQUIRED, _REQUIRED_MESSAGES[action])

    expire_lapsed_subscription(subscription, now)

    if subscription.status == ACTIVE and subscription.expires_at > now:
        return AccessDecision(ALLOW, subscription=subscription)
    if subscription.status == EXPIRED:
        code = READ_ONLY_MODE if action in (MESSAGE, INTERVIEW) else SUBSCRIPTION_EXPIRED
        return AccessDecision(DENY_EXPIRED, code, _EXPIRED_MESSAGES[action], subscription)
    # PENDING, PAST_DUE, CANCELED
    return AccessDecision(DENY_NO_SUBSCRIPTION, SUBSCRIPTION_REQUIRED, _REQUIRED_MESSAGES[action], subscription)


def has_extended_access(user):
    """Admins and employers with a current subscription see private profile fields."""
    if user is None or not getattr(user, "is_authenticated", False):
        return False
    if getattr(user, "role", None) == "admin":
        return True
    return check_access(user, GENERAL).allowed


def subscription_status(employer_id, now=None):
    now = now or utcnow()
    subscription = latest_subscription(employer_id) if employer_id else None
    if subscription is None:
        return {
            "hasSubscription": False,
            "status": None,
            "expiresAt": None,
            "isActive": False,
            "isExpired": False,
            "isReadOnly": False,
        }
    is_expired = subscription.expires_at <= now
    return {
        "hasSubscription": True,
        "status": subscription.status,
        "expiresAt": isoformat(subscription.expires_at),
        "isActive": subscription.status == ACTIVE and not is_expired,
        "isExpired": is_expired,
        "isReadOnly": subscription.status == EXPIRED or is_expired,
    }


def paywall_prompt(status):
    """UI prompt for the current status, or None when no paywall applies."""
    if not status["hasSubscription"]:
        return {
            "title": "Subscription Required",
            "message": "You need an active subscription to access this feature.",
            "action": "Subscribe Now",
            "actionUrl": "/employer/subscribe",
        }
    if status["isExpired"] or status["isReadOnly"]:
        return {
            "title": "Subscription Expired",
            "message": "Your subscription has expired. Please renew to continue using all features.",
            "action": "Renew Subscription",
            "actionUrl": "/employer/subscribe",
        }
    if status["status"] == PAST_DUE:
        return {
            "title": "Payment Past Due",
            "message": "Your payment is past due. Please update your payment method to continue.",
            "action": "Update Payment",
            "actionUrl": "/employer/billing",
        }
    return None
