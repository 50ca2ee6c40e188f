from botocore.exceptions import BotoCoreError, ClientError
from flask import current_app, jsonify, request
from flask_login import current_user
from sqlalchemy import String, cast, or_

from . import bp
from .forms import DocumentForm, DocumentVerifyForm, EmployeeProfileForm, EmployeeProfileUpdateForm
from ...errors import ApiError, Conflict
from ...extensions import db, rq
from ...jobs.search import remove_profile_job, sync_profile_job
from ...models.employee_profile import EMPLOYMENT_TYPES, Document, EmployeeProfile, Reference
from ...services import storage
from ...services.paywall import has_extended_access
from ...services.profile_score import compute_profile_score
from ...utils.api import json_body, pagination_meta, query_int, snake_keys, validate_or_400
from ...utils.decorators import admin_required, role_required
from ...utils.time import utcnow

NESTED = ("references", "documents")
FLAG_FIELDS = ("overtime", "holiday_work", "visibility")

SORT_COLUMNS = {
    "createdAt": EmployeeProfile.created_at,
    "updatedAt": EmployeeProfile.updated_at,
    "salaryMin": EmployeeProfile.salary_min,
    "salaryMax": EmployeeProfile.salary_max,
    "experience": EmployeeProfile.experience,
    "profileScore": EmployeeProfile.profile_score,
}


def _own_profile():
    profile = EmployeeProfile.query.filter_by(user_id=current_user.id).first()
    if profile is None:
        raise ApiError("Profile not found", status_code=404)
    return profile


def _apply_fields(profile, values):
    for name, value in values.items():
        if name in NESTED:
            continue
        if name in FLAG_FIELDS and value is None:
            continue
        setattr(profile, name, value)
    if values.get("references") is not None:
        profile.references = [Reference(**ref) for ref in values["references"]]


def _save(profile):
    profile.profile_score = compute_profile_score(profile)
    db.session.commit()
    rq.enqueue(sync_profile_job, profile.user_id)


@bp.get("")
@role_required("employee")
def get_own_profile():
    profile = _own_profile()
    return jsonify(profile.to_dict(include_private=True, verified_only=False))


@bp.post("")
@role_required("employee")
def create_profile():
    if EmployeeProfile.query.filter_by(user_id=current_user.id).first():
        raise Conflict("Profile already exists")

    form = validate_or_400(EmployeeProfileForm(snake_keys(json_body(), nested=NESTED)))
    values = form.cleaned()

    profile = EmployeeProfile(user_id=current_user.id)
    _apply_fields(profile, values)
    profile.documents = [Document(status="PENDING", **doc) for doc in values.get("documents") or []]
    db.session.add(profile)
    _save(profile)
    current_app.logger.info("Employee profile %s created for user %s (score %s)",
                            profile.id, current_user.id, profile.profile_score)
    return jsonify(profile.to_dict(include_private=True, verified_only=False)), 201


@bp.put("")
@role_required("employee")
def update_profile():
    profile = _own_profile()
    baseline = {"salary_min": profile.salary_min, "salary_max": profile.salary_max}
    form = validate_or_400(EmployeeProfileUpdateForm(snake_keys(json_body(), nested=NESTED),
                                                     partial=True, baseline=baseline))
    _apply_fields(profile, form.cleaned())
    _save(profile)
    return jsonify(profile.to_dict(include_private=True, verified_only=False))


@bp.delete("")
@role_required("employee")
def delete_profile():
    profile = _own_profile()
    user_id = profile.user_id
    db.session.delete(profile)
    db.session.commit()
    rq.enqueue(remove_profile_job, user_id)
    current_app.logger.info("Employee profile of user %s deleted", user_id)
    return jsonify({"message": "Profile deleted"})


@bp.get("/<int:user_id>")
def get_public_profile(user_id):
    """Public view of a candidate; contact details need a subscription."""
    profile = EmployeeProfile.query.filter_by(user_id=user_id).first()
    is_owner = current_user.is_authenticated and current_user.id == user_id
    is_admin = current_user.is_authenticated and current_user.is_admin
    if profile is None or (not profile.visibility and not (is_owner or is_admin)):
        raise ApiError("Profile not found", status_code=404)

    extended = is_owner or has_extended_access(current_user)
    data = profile.to_dict(include_private=extended, verified_only=not (is_owner or is_admin))
    data["hasExtendedAccess"] = extended
    return jsonify(data)


@bp.get("/search")
def search_profiles():
    query = EmployeeProfile.query.filter(EmployeeProfile.visibility.is_(True))

    location = (request.args.get("location") or "").strip()
    if location:
        like = f"%{location}%"
        query = query.filter(or_(EmployeeProfile.city.ilike(like), EmployeeProfile.province.ilike(like)))

    skills = [s.strip() for s in (request.args.get("skills") or "").split(",") if s.strip()]
    if skills:
        # JSON array column: match the quoted element inside its text form
        query = query.filter(or_(*[cast(EmployeeProfile.skills, String).ilike(f'%"{s}"%') for s in skills]))

    types = [t for t in (request.args.get("employmentType") or "").split(",") if t in EMPLOYMENT_TYPES]
    if types:
        query = query.filter(EmployeeProfile.employment_type.in_(types))

    salary_min = request.args.get("salaryMin", type=int)
    salary_max = request.args.get("salaryMax", type=int)
    if salary_min is not None:
        query = query.filter(EmployeeProfile.salary_max >= salary_min)
    if salary_max is not None:
        query = query.filter(EmployeeProfile.salary_min <= salary_max)

    experience_min = request.args.get("experienceMin", type=int)
    experience_max = request.args.get("experienceMax", type=int)
    if experience_min is not None:
        query = query.filter(EmployeeProfile.experience >= experience_min)
    if experience_max is not None:
        query = query.filter(EmployeeProfile.experience <= experience_max)

    column = SORT_COLUMNS.get(request.args.get("sortBy"), EmployeeProfile.created_at)
    order = column.asc() if request.args.get("sortOrder") == "asc" else column.desc()
    page = query.order_by(order, EmployeeProfile.id.desc()).paginate(
        page=query_int("page", 1), per_page=query_int("limit", 20, maximum=50), error_out=False)

    return jsonify({
        "profiles": [p.public_dict() for p in page.items],
        "pagination": pagination_meta(page),
    })


@bp.post("/documents")
@role_required("employee")
def add_document():
    profile = _own_profile()
    form = validate_or_400(DocumentForm(snake_keys(json_body())))
    document = Document(status="PENDING", **form.cleaned())
    profile.documents.append(document)
    _save(profile)
    return jsonify(document.to_dict()), 201


@bp.delete("/documents/<int:document_id>")
@role_required("employee")
def delete_document(document_id):
    profile = _own_profile()
    document = Document.query.filter_by(id=document_id, profile_id=profile.id).first()
    if document is None:
        raise ApiError("Document not found", status_code=404)
    key = document.storage_key
    profile.documents.remove(document)
    _save(profile)
    if key:
        try:
            storage.delete_object(key)
        except (BotoCoreError, ClientError):
            current_app.logger.warning("Could not delete stored object %s", key, exc_info=True)
    return jsonify({"message": "Document deleted"})


@bp.put("/documents/<int:document_id>/verify")
@admin_required
def verify_document(document_id):
    document = db.session.get(Document, document_id)
    if document is None:
        raise ApiError("Document not found", status_code=404)
    form = validate_or_400(DocumentVerifyForm(snake_keys(json_body())))

    document.status = form.status.data
    if document.status == "VERIFIED":
        document.verified_at = utcnow()
        document.verified_by = current_user.id
        document.rejection_reason = None
    else:
        document.rejection_reason = form.rejection_reason.data
    _save(document.profile)
    current_app.logger.info("Document %s marked %s by admin %s", document.id, document.status, current_user.id)
    return jsonify(document.to_dict())
