from flask import current_app, jsonify
from flask_login import current_user, login_required
from sqlalchemy import or_

from . import bp
from .forms import ChatCreateForm, MessageForm
from ...errors import ApiError
from ...extensions import db
from ...models.chat import Chat, ChatMessage
from ...models.employee_profile import EmployeeProfile
from ...services.paywall import MESSAGE
from ...utils.api import json_body, pagination_meta, query_int, snake_keys, validate_or_400
from ...utils.decorators import require_subscription, role_required, subscription_required
from ...utils.time import utcnow


def _chat_for_participant(chat_id):
    chat = db.session.get(Chat, chat_id)
    if chat is None:
        raise ApiError("Chat not found", status_code=404)
    if not chat.has_participant(current_user.id):
        raise ApiError("Forbidden", status_code=403)
    return chat


def _latest_message(chat):
    return chat.messages.order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc()).first()


@bp.get("")
@login_required
def list_chats():
    query = (Chat.query
             .filter(or_(Chat.employer_id == current_user.id, Chat.employee_id == current_user.id))
             .order_by(Chat.updated_at.desc(), Chat.id.desc()))
    page = query.paginate(page=query_int("page", 1), per_page=query_int("limit", 20, maximum=100), error_out=False)
    return jsonify({
        "chats": [c.to_dict(last_message=_latest_message(c)) for c in page.items],
        "pagination": pagination_meta(page),
    })


@bp.post("")
@role_required("employer")
@subscription_required(MESSAGE)
def create_chat():
    form = validate_or_400(ChatCreateForm(snake_keys(json_body())))

    employee_id = form.employee_id.data
    if not EmployeeProfile.query.filter_by(user_id=employee_id).first():
        raise ApiError("Employee not found", status_code=404)

    chat = Chat.query.filter_by(employer_id=current_user.id, employee_id=employee_id).first()
    if chat is not None:
        return jsonify(chat.to_dict(last_message=_latest_message(chat)))

    chat = Chat(employer_id=current_user.id, employee_id=employee_id)
    db.session.add(chat)
    db.session.commit()
    current_app.logger.info("Chat %s opened between employer %s and employee %s",
                            chat.id, current_user.id, employee_id)
    return jsonify(chat.to_dict()), 201


@bp.get("/<int:chat_id>/messages")
@login_required
def list_messages(chat_id):
    chat = _chat_for_participant(chat_id)
    query = chat.messages.order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
    page = query.paginate(page=query_int("page", 1), per_page=query_int("limit", 50, maximum=100), error_out=False)

    now = utcnow()
    unread = [m for m in page.items if m.sender_id != current_user.id and m.read_at is None]
    for message in unread:
        message.read_at = now
    if unread:
        db.session.commit()

    return jsonify({
        "messages": [m.to_dict() for m in page.items],
        "pagination": pagination_meta(page),
    })


@bp.post("/<int:chat_id>/messages")
@login_required
def send_message(chat_id):
    chat = _chat_for_participant(chat_id)
    form = validate_or_400(MessageForm(snake_keys(json_body())))
    if current_user.id == chat.employer_id:
        # expired employers keep read access but cannot write
        require_subscription(MESSAGE)

    message = ChatMessage(chat_id=chat.id, sender_id=current_user.id, body=form.body.data)
    db.session.add(message)
    chat.updated_at = utcnow()
    db.session.commit()
    return jsonify(message.to_dict()), 201
