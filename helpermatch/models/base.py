from ..extensions import db
from ..utils.time import utcnow


class TimestampMixin:
    created_at = db.Column(db.DateTime, default=utcnow, server_default=db.func.now(), nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, server_default=db.func.now(), onupdate=utcnow, nullable=False)
