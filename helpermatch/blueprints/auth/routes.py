from flask import current_app, jsonify
from flask_login import current_user, login_required, login_user, logout_user

from . import bp
from .forms import LoginForm, SignupForm
from ...errors import ApiError, Conflict
from ...extensions import db
from ...models.user import User
from ...utils.api import json_body, snake_keys, validate_or_400


@bp.post("/signup")
def signup():
    """Anyone may create an employer or candidate account; admins only by an admin."""
    form = validate_or_400(SignupForm(snake_keys(json_body())))
    if form.role.data == "admin" and not (current_user.is_authenticated and current_user.is_admin):
        raise ApiError("Only administrators can create admin accounts", status_code=403)

    email = form.email.data.lower()
    if User.query.filter_by(email=email).first():
        raise Conflict("An account with this email already exists")

    user = User(email=email, role=form.role.data, name=form.name.data)
    user.set_password(form.password.data)
    db.session.add(user)
    db.session.commit()
    current_app.logger.info("User %s signed up as %s", user.id, user.role)

    if not current_user.is_authenticated:
        login_user(user)
    return jsonify({"user": user.to_dict()}), 201


@bp.post("/login")
def login():
    form = validate_or_400(LoginForm(snake_keys(json_body())))
    user = User.query.filter_by(email=form.email.data.lower()).first()
    if not user or not user.check_password(form.password.data):
        raise ApiError("Invalid credentials", status_code=401)
    login_user(user)
    return jsonify({"user": user.to_dict()})


@bp.post("/logout")
@login_required
def logout():
    logout_user()
    return jsonify({"ok": True})


@bp.get("/me")
@login_required
def me():
    return jsonify({"user": current_user.to_dict()})
