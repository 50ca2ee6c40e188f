from flask import Blueprint

bp = Blueprint("employee_profile", __name__)

from . import routes  # noqa: E402,F401
