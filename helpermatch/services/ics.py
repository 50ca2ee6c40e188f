from datetime import timedelta, timezone
from uuid import uuid4

from ..utils.time import utcnow


def _escape(text):
    return (str(text or "").replace("\\", "\\\\").replace(";", "\\;")
            .replace(",", "\\,").replace("\n", "\\n"))


def build_ics(uid_domain, title, start, end, location="", description="", uid=None):
    uid = uid or f"{uuid4()}@{uid_domain}"

    def to_dt(dt):
        if dt.tzinfo:
            dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
        return dt.strftime('%Y%m%dT%H%M%SZ')

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//HelperMatch//Interview//EN",
        "METHOD:REQUEST",
        "BEGIN:VEVENT",
        f"UID:{uid}",
        f"DTSTAMP:{to_dt(utcnow())}",
        f"DTSTART:{to_dt(start)}",
        f"DTEND:{to_dt(end)}",
        f"SUMMARY:{_escape(title)}",
        f"LOCATION:{_escape(location)}",
        f"DESCRIPTION:{_escape(description)}",
        "END:VEVENT",
        "END:VCALENDAR",
    ]
    return "\r\n".join(lines) + "\r\n"


def interview_ics(interview, uid_domain, employer_name=None):
    title = f"Interview with {employer_name}" if employer_name else "Household helper interview"
    end = interview.starts_at + timedelta(minutes=interview.duration_minutes or 60)
    return build_ics(
        uid_domain,
        title,
        interview.starts_at,
        end,
        location=interview.location or interview.meeting_url or "",
        description=interview.notes or "",
        uid=f"interview-{interview.id}@{uid_domain}",
    )
