from flask import Blueprint

bp = Blueprint("employer_profile", __name__)

from . import routes  # noqa: E402,F401
