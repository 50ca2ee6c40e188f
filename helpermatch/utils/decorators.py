from functools import wraps
from flask import abort
from flask_login import current_user

from ..services.paywall import GENERAL, check_access


def role_required(*roles):
    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            if not current_user.is_authenticated:
                abort(401, "Unauthorized")
            if getattr(current_user, "role", None) not in roles:
                abort(403, "Forbidden")
            return view(*args, **kwargs)
        return wrapped
    return decorator


def admin_required(view):
    return role_required("admin")(view)


def require_subscription(action=GENERAL):
    """Raise the paywall denial (401/403 JSON) for the current user, if any."""
    decision = check_access(current_user, action)
    if not decision.allowed:
        raise decision.to_error()


def subscription_required(action=GENERAL):
    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            require_subscription(action)
            return view(*args, **kwargs)
        return wrapped
    return decorator
