from ..extensions import db
from ..utils.time import isoformat
from .base import TimestampMixin

INTERVIEW_STATUSES = ("SCHEDULED", "COMPLETED", "CANCELED", "NO_SHOW")


class Interview(db.Model, TimestampMixin):
    __tablename__ = "interviews"

    id = db.Column(db.Integer, primary_key=True)
    employer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    employee_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    starts_at = db.Column(db.DateTime, nullable=False, index=True)
    duration_minutes = db.Column(db.Integer, nullable=False, default=60)
    status = db.Column(db.String(20), nullable=False, default="SCHEDULED")  # SCHEDULED/COMPLETED/CANCELED/NO_SHOW
    location = db.Column(db.String(255))
    meeting_url = db.Column(db.String(1024))
    notes = db.Column(db.Text)

    employer = db.relationship("User", foreign_keys=[employer_id])
    employee = db.relationship("User", foreign_keys=[employee_id])

    def has_participant(self, user_id):
        return user_id in (self.employer_id, self.employee_id)

    def to_dict(self):
        profile = self.employee.employee_profile if self.employee else None
        return {
            "id": self.id,
            "employerId": self.employer_id,
            "employeeId": self.employee_id,
            "startsAt": isoformat(self.starts_at),
            "durationMinutes": self.duration_minutes,
            "status": self.status,
            "location": self.location,
            "meetingUrl": self.meeting_url,
            "notes": self.notes,
            "employee": {
                "firstName": profile.first_name if profile else None,
                "photoUrl": profile.photo_url if profile else None,
                "city": profile.city if profile else None,
                "province": profile.province if profile else None,
            },
            "createdAt": isoformat(self.created_at),
        }

    def __repr__(self) -> str:
        return f"<Interview id={self.id} employee_id={self.employee_id}>"
