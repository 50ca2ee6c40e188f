from ..extensions import db
from ..utils.time import isoformat
from .base import TimestampMixin

CIVIL_STATUSES = ("SINGLE", "MARRIED", "WIDOWED", "DIVORCED", "SEPARATED")
EMPLOYMENT_TYPES = ("LIVE_IN", "LIVE_OUT", "BOTH")
KYC_STATUSES = ("NOT_STARTED", "IN_PROGRESS", "VERIFIED", "REJECTED")
DOCUMENT_TYPES = (
    "PHILSYS_ID",
    "PHILHEALTH_ID",
    "PAGIBIG_ID",
    "PASSPORT",
    "NBI_CLEARANCE",
    "POLICE_CLEARANCE",
    "BIRTH_CERTIFICATE",
    "MARRIAGE_CERTIFICATE",
    "OTHER",
)
DOCUMENT_STATUSES = ("PENDING", "UNDER_REVIEW", "VERIFIED", "REJECTED", "EXPIRED")


class EmployeeProfile(db.Model, TimestampMixin):
    __tablename__ = "employee_profiles"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, unique=True, index=True)

    # public
    first_name = db.Column(db.String(50), nullable=False)
    age = db.Column(db.Integer)
    birth_date = db.Column(db.DateTime)
    civil_status = db.Column(db.String(20))
    city = db.Column(db.String(100), index=True)
    province = db.Column(db.String(100), index=True)
    photo_url = db.Column(db.String(1024))
    skills = db.Column(db.JSON, nullable=False, default=list)
    experience = db.Column(db.Integer, nullable=False, default=0)
    headline = db.Column(db.String(200))
    salary_min = db.Column(db.Integer)
    salary_max = db.Column(db.Integer)
    employment_type = db.Column(db.String(20))
    availability_date = db.Column(db.DateTime)
    days_off = db.Column(db.JSON, nullable=False, default=list)
    overtime = db.Column(db.Boolean, nullable=False, default=False)
    holiday_work = db.Column(db.Boolean, nullable=False, default=False)
    visibility = db.Column(db.Boolean, nullable=False, default=False, index=True)
    profile_score = db.Column(db.Integer, nullable=False, default=0)
    kyc_status = db.Column(db.String(20), nullable=False, default="NOT_STARTED")

    # private: admins and subscribed employers only
    last_name = db.Column(db.String(50))
    exact_address = db.Column(db.String(500))
    phone = db.Column(db.String(20))
    email = db.Column(db.String(255))

    user = db.relationship("User", back_populates="employee_profile")
    documents = db.relationship("Document", back_populates="profile", cascade="all, delete-orphan",
                                order_by="Document.id")
    references = db.relationship("Reference", back_populates="profile", cascade="all, delete-orphan",
                                 order_by="Reference.id")

    @property
    def verified_documents(self):
        return [d for d in self.documents if d.status == "VERIFIED"]

    def public_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "firstName": self.first_name,
            "age": self.age,
            "civilStatus": self.civil_status,
            "city": self.city,
            "province": self.province,
            "photoUrl": self.photo_url,
            "skills": list(self.skills or []),
            "experience": self.experience,
            "headline": self.headline,
            "salaryMin": self.salary_min,
            "salaryMax": self.salary_max,
            "employmentType": self.employment_type,
            "availabilityDate": isoformat(self.availability_date),
            "daysOff": list(self.days_off or []),
            "overtime": self.overtime,
            "holidayWork": self.holiday_work,
            "visibility": self.visibility,
            "profileScore": self.profile_score,
            "kycStatus": self.kyc_status,
            "updatedAt": isoformat(self.updated_at),
        }

    def to_dict(self, include_private=False, verified_only=True):
        data = self.public_dict()
        if include_private:
            docs = self.verified_documents if verified_only else self.documents
            data.update({
                "lastName": self.last_name,
                "exactAddress": self.exact_address,
                "phone": self.phone,
                "email": self.email,
                "documents": [d.to_dict() for d in docs],
                "references": [r.to_dict() for r in self.references],
            })
        return data

    def __repr__(self) -> str:
        return f"<EmployeeProfile id={self.id} user_id={self.user_id}>"


class Document(db.Model, TimestampMixin):
    __tablename__ = "employee_documents"

    id = db.Column(db.Integer, primary_key=True)
    profile_id = db.Column(db.Integer, db.ForeignKey("employee_profiles.id"), nullable=False, index=True)
    type = db.Column(db.String(30), nullable=False)
    file_name = db.Column(db.String(255), nullable=False)
    file_url = db.Column(db.String(1024), nullable=False)
    storage_key = db.Column(db.String(1024))
    file_size = db.Column(db.Integer, nullable=False)
    mime_type = db.Column(db.String(100), nullable=False)
    status = db.Column(db.String(20), nullable=False, default="PENDING")
    verified_at = db.Column(db.DateTime)
    verified_by = db.Column(db.Integer, db.ForeignKey("users.id"))
    rejection_reason = db.Column(db.Text)
    expires_at = db.Column(db.DateTime)

    profile = db.relationship("EmployeeProfile", back_populates="documents")

    def to_dict(self):
        return {
            "id": self.id,
            "type": self.type,
            "fileName": self.file_name,
            "fileUrl": self.file_url,
            "fileSize": self.file_size,
            "mimeType": self.mime_type,
            "status": self.status,
            "verifiedAt": isoformat(self.verified_at),
            "rejectionReason": self.rejection_reason,
            "expiresAt": isoformat(self.expires_at),
        }

    def __repr__(self) -> str:
        return f"<Document id={self.id} type={self.type} status={self.status}>"


class Reference(db.Model, TimestampMixin):
    __tablename__ = "employee_references"

    id = db.Column(db.Integer, primary_key=True)
    profile_id = db.Column(db.Integer, db.ForeignKey("employee_profiles.id"), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    relationship = db.Column(db.String(100), nullable=False)
    company = db.Column(db.String(200))
    phone = db.Column(db.String(20), nullable=False)
    email = db.Column(db.String(255))
    duration = db.Column(db.String(100))
    notes = db.Column(db.Text)

    profile = db.relationship("EmployeeProfile", back_populates="references")

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "relationship": self.relationship,
            "company": self.company,
            "phone": self.phone,
            "email": self.email,
            "duration": self.duration,
            "notes": self.notes,
        }
