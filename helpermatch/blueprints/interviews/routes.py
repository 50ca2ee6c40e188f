from flask import Response, current_app, jsonify, request
from flask_login import current_user, login_required

from . import bp
from .forms import InterviewForm, InterviewUpdateForm
from ...errors import ApiError
from ...extensions import db, rq
from ...jobs.notify import send_interview_invite
from ...models.employee_profile import EmployeeProfile
from ...models.interview import Interview
from ...services.ics import interview_ics
from ...services.paywall import INTERVIEW
from ...utils.api import json_body, pagination_meta, query_int, snake_keys, validate_or_400
from ...utils.decorators import require_subscription, role_required
from ...utils.time import utcnow


def _interview_for(interview_id, owner_only=False):
    interview = db.session.get(Interview, interview_id)
    if interview is None:
        raise ApiError("Interview not found", status_code=404)
    allowed = interview.employer_id == current_user.id if owner_only else interview.has_participant(current_user.id)
    if not (allowed or current_user.is_admin):
        raise ApiError("Forbidden", status_code=403)
    return interview


@bp.get("")
@login_required
def list_interviews():
    query = Interview.query
    if current_user.is_employer:
        query = query.filter_by(employer_id=current_user.id)
    elif current_user.is_employee:
        query = query.filter_by(employee_id=current_user.id)

    status = request.args.get("status")
    if status:
        query = query.filter_by(status=status)
    if request.args.get("upcoming") == "true":
        query = query.filter(Interview.starts_at > utcnow())

    page = query.order_by(Interview.starts_at.asc(), Interview.id.asc()).paginate(
        page=query_int("page", 1), per_page=query_int("limit", 20, maximum=100), error_out=False)
    return jsonify({
        "interviews": [i.to_dict() for i in page.items],
        "pagination": pagination_meta(page),
    })


@bp.post("")
@role_required("employer")
def create_interview():
    # a past startsAt is a 400 whatever the subscription state, so validate first
    form = validate_or_400(InterviewForm(snake_keys(json_body())))
    require_subscription(INTERVIEW)

    employee_id = form.employee_id.data
    if not EmployeeProfile.query.filter_by(user_id=employee_id).first():
        raise ApiError("Employee not found", status_code=404)

    interview = Interview(
        employer_id=current_user.id,
        employee_id=employee_id,
        starts_at=form.starts_at.data,
        duration_minutes=form.duration_minutes.data or 60,
        location=form.location.data,
        meeting_url=form.meeting_url.data,
        notes=form.notes.data,
        status="SCHEDULED",
    )
    db.session.add(interview)
    db.session.commit()
    current_app.logger.info("Interview %s scheduled by employer %s for %s",
                            interview.id, current_user.id, interview.starts_at)
    rq.enqueue(send_interview_invite, interview.id)
    return jsonify(interview.to_dict()), 201


@bp.put("/<int:interview_id>")
@role_required("employer", "admin")
def update_interview(interview_id):
    interview = _interview_for(interview_id, owner_only=True)
    form = validate_or_400(InterviewUpdateForm(snake_keys(json_body()), partial=True))
    values = form.cleaned()
    if "starts_at" in values and current_user.is_employer:
        require_subscription(INTERVIEW)
    for name, value in values.items():
        if name == "duration_minutes" and value is None:
            continue
        setattr(interview, name, value)
    db.session.commit()
    return jsonify(interview.to_dict())


@bp.get("/<int:interview_id>/ics")
@login_required
def interview_calendar(interview_id):
    interview = _interview_for(interview_id)
    employer = interview.employer.employer_profile
    body = interview_ics(interview, current_app.config["UID_DOMAIN"],
                         employer.company_name if employer else None)
    return Response(
        body,
        mimetype="text/calendar",
        headers={"Content-Disposition": f"attachment; filename=interview-{interview.id}.ics"},
    )
