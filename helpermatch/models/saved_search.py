from ..extensions import db
from ..utils.time import isoformat
from .base import TimestampMixin


class SavedSearch(db.Model, TimestampMixin):
    """Named search-page query string kept by any signed-in user."""
    __tablename__ = "saved_searches"
    __table_args__ = (db.UniqueConstraint("user_id", "name", name="uq_saved_searches_user_name"),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    params_json = db.Column(db.JSON, nullable=False, default=dict)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "paramsJson": self.params_json or {},
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }


class SearchFilter(db.Model, TimestampMixin):
    """Employer filter preset; at most one per employer should be the default."""
    __tablename__ = "search_filters"

    id = db.Column(db.Integer, primary_key=True)
    employer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    filters = db.Column(db.JSON, nullable=False, default=dict)
    is_default = db.Column(db.Boolean, nullable=False, default=False)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "filters": self.filters or {},
            "isDefault": self.is_default,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
