from ..extensions import db
from ..utils.time import isoformat
from .base import TimestampMixin

HOUSEHOLD_SIZES = ("SMALL", "MEDIUM", "LARGE", "EXTRA_LARGE")
ARRANGEMENTS = ("LIVE_IN", "LIVE_OUT", "BOTH")


class EmployerProfile(db.Model, TimestampMixin):
    __tablename__ = "employer_profiles"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, unique=True, index=True)

    company_name = db.Column(db.String(100), nullable=False)
    contact_person = db.Column(db.String(100), nullable=False)
    city = db.Column(db.String(100), nullable=False)
    province = db.Column(db.String(100), nullable=False)
    contact_email = db.Column(db.String(255))
    contact_phone = db.Column(db.String(20))
    about_text = db.Column(db.String(500))
    household_size = db.Column(db.String(20))
    preferred_arrangement = db.Column(db.String(20))
    budget_min = db.Column(db.Integer)
    budget_max = db.Column(db.Integer)

    requirements = db.Column(db.JSON, nullable=False, default=dict)
    language_requirements = db.Column(db.JSON, nullable=False, default=dict)
    work_schedule = db.Column(db.JSON, nullable=False, default=dict)
    benefits_policies = db.Column(db.JSON, nullable=False, default=dict)
    accommodation_details = db.Column(db.JSON, nullable=False, default=dict)

    stripe_customer_id = db.Column(db.String(255))

    user = db.relationship("User", back_populates="employer_profile")
    subscriptions = db.relationship("Subscription", back_populates="employer", cascade="all, delete-orphan",
                                    order_by="(Subscription.created_at.desc(), Subscription.id.desc())")
    billing_history = db.relationship("BillingHistory", back_populates="employer", cascade="all, delete-orphan",
                                      order_by="(BillingHistory.created_at.desc(), BillingHistory.id.desc())")

    def to_dict(self, include_billing=False):
        data = {
            "id": self.id,
            "userId": self.user_id,
            "companyName": self.company_name,
            "contactPerson": self.contact_person,
            "city": self.city,
            "province": self.province,
            "contactEmail": self.contact_email,
            "contactPhone": self.contact_phone,
            "aboutText": self.about_text,
            "householdSize": self.household_size,
            "preferredArrangement": self.preferred_arrangement,
            "budgetMin": self.budget_min,
            "budgetMax": self.budget_max,
            "requirements": self.requirements or {},
            "languageRequirements": self.language_requirements or {},
            "workSchedule": self.work_schedule or {},
            "benefitsPolicies": self.benefits_policies or {},
            "accommodationDetails": self.accommodation_details or {},
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
        if include_billing:
            data["subscriptions"] = [s.to_dict() for s in self.subscriptions]
            data["billingHistory"] = [b.to_dict() for b in self.billing_history[:10]]
        return data

    def __repr__(self) -> str:
        return f"<EmployerProfile id={self.id} user_id={self.user_id}>"
