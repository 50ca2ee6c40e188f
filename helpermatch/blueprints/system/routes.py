import hmac
import time

from flask import current_app, jsonify, request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from . import bp
from ...errors import ApiError
from ...extensions import db, search
from ...jobs.search import REINDEX_KINDS, reindex_job
from ...jobs.subscriptions import expire_subscriptions_job
from ...utils.time import isoformat, utcnow


def _require_cron_secret():
    secret = current_app.config.get("CRON_SECRET")
    supplied = request.headers.get("Authorization", "")
    if not secret or not hmac.compare_digest(supplied.encode(), f"Bearer {secret}".encode()):
        raise ApiError("Unauthorized", status_code=401)


@bp.get("/health")
def health():
    checks = {
        "status": "ok",
        "timestamp": isoformat(utcnow()),
        "uptime": round(time.time() - current_app.config["STARTED_AT"], 3),
        "database": "unknown",
        "search": "not_configured",
    }
    try:
        db.session.execute(text("SELECT 1"))
        checks["database"] = "connected"
    except SQLAlchemyError:
        current_app.logger.exception("Health check: database unreachable")
        db.session.rollback()
        checks["database"] = "disconnected"
        checks["status"] = "degraded"

    index = search.index
    if index is not None:
        checks["search"] = "available" if index.is_healthy() else "unavailable"

    return jsonify(checks), 200 if checks["status"] == "ok" else 503


@bp.post("/cron/reindex")
def cron_reindex():
    _require_cron_secret()
    body = request.get_json(silent=True) or {}
    kind = body.get("type") or "incremental"
    if kind not in REINDEX_KINDS:
        raise ApiError(f"type must be one of: {', '.join(REINDEX_KINDS)}")

    result = reindex_job(kind)
    return jsonify({
        "success": True,
        "message": "Reindex job completed successfully",
        "result": result,
        "timestamp": isoformat(utcnow()),
    })


@bp.post("/cron/expire-subscriptions")
def cron_expire_subscriptions():
    _require_cron_secret()
    result = expire_subscriptions_job()
    current_app.logger.info("Expired %s lapsed subscriptions", result["expired"])
    return jsonify({"success": True, **result, "timestamp": isoformat(utcnow())})
