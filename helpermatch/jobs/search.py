from datetime import timedelta

from flask import current_app

from ..extensions import search
from ..models.employee_profile import EmployeeProfile
from ..services import search_sync
from ..utils.time import utcnow

REINDEX_KINDS = ("daily", "incremental", "full")


def sync_profile_job(user_id: int):
    if search.index is None:
        current_app.logger.info("Search not configured, skipping sync of profile %s", user_id)
        return None
    return search_sync.sync_profile(user_id).to_dict()


def remove_profile_job(user_id: int):
    if search.index is None:
        return None
    search_sync.remove_profile(user_id)
    return {"removed": 1}


def reindex_job(kind: str = "incremental"):
    """Rebuild the search index.

    ``daily`` and ``full`` clear and repopulate everything; ``incremental``
    re-syncs the profiles touched in the last 24 hours, which also drops the
    ones hidden since.
    """
    if kind not in REINDEX_KINDS:
        raise ValueError(f"unknown reindex type: {kind}")
    if kind in ("daily", "full"):
        result = search_sync.reindex_all()
    else:
        since = utcnow() - timedelta(hours=24)
        ids = [row.user_id for row in
               EmployeeProfile.query.with_entities(EmployeeProfile.user_id)
               .filter(EmployeeProfile.updated_at >= since).all()]
        result = search_sync.sync_profiles(ids)
    current_app.logger.info("Reindex (%s) done: %s", kind, result.to_dict())
    return {"type": kind, **result.to_dict()}
