from flask import current_app

from ..extensions import db
from ..models.interview import Interview
from ..services.ics import interview_ics
from ..services.mail import send_mail
from ..utils.time import isoformat


def send_interview_invite(interview_id: int):
    """Mail the candidate an invitation with the .ics attached."""
    if not current_app.config.get("SENDGRID_API_KEY"):
        current_app.logger.warning("SENDGRID_API_KEY not set, interview %s invite not sent", interview_id)
        return None

    interview = db.session.get(Interview, interview_id)
    if interview is None or interview.employee is None:
        current_app.logger.warning("Interview %s vanished before its invite was sent", interview_id)
        return None

    employer = interview.employer.employer_profile
    employer_name = employer.company_name if employer else interview.employer.name
    ics = interview_ics(interview, current_app.config["UID_DOMAIN"], employer_name)
    html = (f"<p>You have been invited to an interview"
            f"{' with ' + employer_name if employer_name else ''}.</p>"
            f"<p>When: {isoformat(interview.starts_at)} (UTC), {interview.duration_minutes} minutes</p>"
            f"<p>{interview.location or interview.meeting_url or ''}</p>")
    status, message_id = send_mail(
        interview.employee.email,
        "Interview invitation",
        html,
        attachments=[("interview.ics", ics, "text/calendar")],
    )
    current_app.logger.info("Interview %s invite sent to user %s (%s)", interview_id, interview.employee_id, status)
    return message_id
