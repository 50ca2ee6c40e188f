from flask import current_app, jsonify
from flask_login import current_user

from . import bp
from .forms import EmployerProfileForm, SearchFilterForm, SubscribeForm, SubscriptionActionForm
from ...errors import ApiError, Conflict
from ...extensions import db
from ...models.employer_profile import EmployerProfile
from ...models.saved_search import SearchFilter
from ...services import billing
from ...services.paywall import paywall_prompt, subscription_status
from ...utils.api import json_body, snake_keys, validate_or_400
from ...utils.decorators import role_required

JSON_FIELDS = ("requirements", "language_requirements", "work_schedule", "benefits_policies",
               "accommodation_details")


def _own_profile():
    profile = EmployerProfile.query.filter_by(user_id=current_user.id).first()
    if profile is None:
        raise ApiError("Employer profile not found", status_code=404)
    return profile


def _apply_fields(profile, values):
    for name, value in values.items():
        if name in JSON_FIELDS and value is None:
            continue
        setattr(profile, name, value)


def _status_payload(profile):
    status = subscription_status(profile.id if profile else None)
    return {"subscription": status, "paywall": paywall_prompt(status)}


@bp.get("")
@role_required("employer")
def get_profile():
    profile = _own_profile()
    data = profile.to_dict(include_billing=True)
    data.update(_status_payload(profile))
    return jsonify(data)


@bp.post("")
@role_required("employer")
def create_profile():
    if EmployerProfile.query.filter_by(user_id=current_user.id).first():
        raise Conflict("Employer profile already exists")
    form = validate_or_400(EmployerProfileForm(snake_keys(json_body())))
    profile = EmployerProfile(user_id=current_user.id)
    _apply_fields(profile, form.cleaned())
    db.session.add(profile)
    db.session.commit()
    current_app.logger.info("Employer profile %s created for user %s", profile.id, current_user.id)
    return jsonify(profile.to_dict()), 201


@bp.put("")
@role_required("employer")
def update_profile():
    profile = _own_profile()
    baseline = {"budget_min": profile.budget_min, "budget_max": profile.budget_max}
    form = validate_or_400(EmployerProfileForm(snake_keys(json_body()), partial=True, baseline=baseline))
    _apply_fields(profile, form.cleaned())
    db.session.commit()
    return jsonify(profile.to_dict())


@bp.delete("")
@role_required("employer")
def delete_profile():
    profile = _own_profile()
    db.session.delete(profile)
    db.session.commit()
    return jsonify({"message": "Employer profile deleted"})


# subscription

@bp.post("/subscribe")
@role_required("employer")
def subscribe():
    profile = _own_profile()
    form = validate_or_400(SubscribeForm(snake_keys(json_body())))
    subscription, result = billing.start_subscription(profile, form.provider.data, current_user.email)
    return jsonify({
        "subscriptionId": subscription.id,
        "clientSecret": result.client_secret,
        "redirectUrl": result.redirect_url,
        "message": "Subscription created successfully",
    }), 201


@bp.put("/subscribe")
@role_required("employer")
def renew():
    profile = _own_profile()
    validate_or_400(SubscriptionActionForm(snake_keys(json_body())))
    subscription = billing.renew_subscription(profile)
    if subscription is None:
        raise ApiError("No subscription found", status_code=404)
    return jsonify({"message": "Subscription renewed successfully", "subscription": subscription.to_dict()})


@bp.delete("/subscribe")
@role_required("employer")
def cancel():
    profile = _own_profile()
    subscription = billing.cancel_subscription(profile)
    if subscription is None:
        raise ApiError("No active subscription found", status_code=404)
    return jsonify({"message": "Subscription canceled successfully", "subscription": subscription.to_dict()})


@bp.get("/subscription")
@role_required("employer")
def get_subscription():
    profile = EmployerProfile.query.filter_by(user_id=current_user.id).first()
    return jsonify(_status_payload(profile))


# saved search filters

def _own_filter(filter_id):
    row = SearchFilter.query.filter_by(id=filter_id, employer_id=current_user.id).first()
    if row is None:
        raise ApiError("Saved search not found", status_code=404)
    return row


def _make_default(row):
    """Unset every other default of the employer, then flag ``row``.

    Two separate commits: concurrent requests can interleave between them
    and leave zero or two defaults.
    """
    (SearchFilter.query
     .filter(SearchFilter.employer_id == row.employer_id, SearchFilter.id != row.id)
     .update({"is_default": False}, synchronize_session="fetch"))
    db.session.commit()
    row.is_default = True
    db.session.commit()


@bp.get("/saved-searches")
@role_required("employer")
def list_filters():
    rows = (SearchFilter.query.filter_by(employer_id=current_user.id)
            .order_by(SearchFilter.is_default.desc(), SearchFilter.created_at.desc(), SearchFilter.id.desc())
            .all())
    return jsonify({"savedSearches": [r.to_dict() for r in rows]})


@bp.post("/saved-searches")
@role_required("employer")
def create_filter():
    form = validate_or_400(SearchFilterForm(snake_keys(json_body())))
    row = SearchFilter(employer_id=current_user.id, name=form.name.data, filters=form.filters.data or {},
                       is_default=False)
    db.session.add(row)
    db.session.commit()
    if form.is_default.data:
        _make_default(row)
    return jsonify(row.to_dict()), 201


@bp.put("/saved-searches/<int:filter_id>")
@role_required("employer")
def update_filter(filter_id):
    row = _own_filter(filter_id)
    form = validate_or_400(SearchFilterForm(snake_keys(json_body()), partial=True))
    values = form.cleaned()
    if "name" in values:
        row.name = values["name"]
    if values.get("filters") is not None:
        row.filters = values["filters"]
    if values.get("is_default") is False:
        row.is_default = False
    db.session.commit()
    if values.get("is_default"):
        _make_default(row)
    return jsonify(row.to_dict())


@bp.delete("/saved-searches/<int:filter_id>")
@role_required("employer")
def delete_filter(filter_id):
    row = _own_filter(filter_id)
    db.session.delete(row)
    db.session.commit()
    return jsonify({"message": "Saved search deleted"})
