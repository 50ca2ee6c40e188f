from ..extensions import db
from ..utils.time import isoformat, utcnow
from .base import TimestampMixin


class Chat(db.Model, TimestampMixin):
    __tablename__ = "chats"
    __table_args__ = (db.UniqueConstraint("employer_id", "employee_id", name="uq_chats_pair"),)

    id = db.Column(db.Integer, primary_key=True)
    employer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    employee_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    employer = db.relationship("User", foreign_keys=[employer_id])
    employee = db.relationship("User", foreign_keys=[employee_id])
    messages = db.relationship("ChatMessage", back_populates="chat", cascade="all, delete-orphan",
                               lazy="dynamic")

    def has_participant(self, user_id):
        return user_id in (self.employer_id, self.employee_id)

    def to_dict(self, last_message=None):
        profile = self.employee.employee_profile if self.employee else None
        return {
            "id": self.id,
            "employerId": self.employer_id,
            "employeeId": self.employee_id,
            "employee": {
                "firstName": profile.first_name if profile else None,
                "photoUrl": profile.photo_url if profile else None,
                "city": profile.city if profile else None,
                "province": profile.province if profile else None,
            },
            "lastMessage": last_message.to_dict() if last_message else None,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }

    def __repr__(self) -> str:
        return f"<Chat id={self.id} employer_id={self.employer_id} employee_id={self.employee_id}>"


class ChatMessage(db.Model):
    __tablename__ = "chat_messages"

    id = db.Column(db.Integer, primary_key=True)
    chat_id = db.Column(db.Integer, db.ForeignKey("chats.id"), nullable=False, index=True)
    sender_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    body = db.Column(db.Text, nullable=False)
    read_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)

    chat = db.relationship("Chat", back_populates="messages")

    def to_dict(self):
        return {
            "id": self.id,
            "chatId": self.chat_id,
            "senderId": self.sender_id,
            "body": self.body,
            "readAt": isoformat(self.read_at),
            "createdAt": isoformat(self.created_at),
        }
