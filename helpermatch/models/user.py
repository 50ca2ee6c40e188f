from ..extensions import db
from flask_login import UserMixin
from .base import TimestampMixin
from werkzeug.security import generate_password_hash, check_password_hash

ROLES = ("admin", "employer", "employee")


class User(db.Model, UserMixin, TimestampMixin):
    __tablename__ = "users"
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default="employee", index=True)
    name = db.Column(db.String(120))

    employee_profile = db.relationship("EmployeeProfile", back_populates="user", uselist=False)
    employer_profile = db.relationship("EmployerProfile", back_populates="user", uselist=False)

    def set_password(self, raw):
        self.password_hash = generate_password_hash(raw)

    def check_password(self, raw):
        return check_password_hash(self.password_hash, raw)

    @property
    def is_admin(self):
        return self.role == "admin"

    @property
    def is_employer(self):
        return self.role == "employer"

    @property
    def is_employee(self):
        return self.role == "employee"

    def to_dict(self):
        return {"id": self.id, "email": self.email, "role": self.role, "name": self.name}

    def __repr__(self) -> str:
        return f"<User id={self.id} role={self.role}>"
