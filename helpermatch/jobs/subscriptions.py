from ..services.paywall import expire_lapsed_subscriptions


def expire_subscriptions_job():
    return {"expired": expire_lapsed_subscriptions()}
