from flask import Blueprint

bp = Blueprint("saved_searches", __name__)

from . import routes  # noqa: E402,F401
