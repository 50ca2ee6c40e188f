from flask import Blueprint

bp = Blueprint("upload", __name__)

from . import routes  # noqa: E402,F401
