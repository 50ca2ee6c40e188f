"""Keep the search index in step with visible employee profiles.

Documents are keyed by the candidate's user id and rebuilt wholesale on
every sync. ``sync_profiles`` is the single code path: ids whose profile is
missing or hidden are deleted from the index, the rest are upserted.
"""
import calendar
from dataclasses import dataclass, field
from typing import List

from flask import current_app

from ..errors import ServiceUnavailable
from ..extensions import search
from ..models.employee_profile import EmployeeProfile
from ..utils.time import isoformat
from .slugs import generate_slug

BATCH_SIZE = 1000


@dataclass
class SyncResult:
    indexed: List[int] = field(default_factory=list)
    removed: List[int] = field(default_factory=list)

    def to_dict(self):
        return {"indexed": len(self.indexed), "removed": len(self.removed)}


def require_index():
    index = search.index
    if index is None:
        raise ServiceUnavailable("Search is not configured")
    return index


def experience_band(years):
    years = years or 0
    if years < 2:
        return "0-1"
    if years < 4:
        return "2-3"
    if years < 6:
        return "4-5"
    return "6+"


def to_search_document(profile):
    availability = profile.availability_date
    return {
        "id": profile.user_id,
        "first_name": profile.first_name,
        "city": profile.city,
        "province": profile.province,
        "skills": list(profile.skills or []),
        "years_of_experience": profile.experience or 0,
        "live_in_out": profile.employment_type,
        "headline": profile.headline,
        "availability_date": isoformat(availability),
        "availability_ts": calendar.timegm(availability.timetuple()) if availability else None,
        "salary_min": profile.salary_min,
        "salary_max": profile.salary_max,
        "updated_at": isoformat(profile.updated_at),
        "slug": generate_slug(profile.first_name, profile.city, profile.user_id),
        "experience_band": experience_band(profile.experience),
    }


def sync_profiles(user_ids, index=None):
    index = index or require_index()
    wanted = list(dict.fromkeys(int(i) for i in user_ids))
    result = SyncResult()
    if not wanted:
        return result

    profiles = EmployeeProfile.query.filter(EmployeeProfile.user_id.in_(wanted)).all()
    visible = [p for p in profiles if p.visibility]
    visible_ids = {p.user_id for p in visible}
    stale = [i for i in wanted if i not in visible_ids]

    for start in range(0, len(visible), BATCH_SIZE):
        index.add_documents([to_search_document(p) for p in visible[start:start + BATCH_SIZE]])
    if stale:
        index.delete_documents(stale)

    result.indexed = [p.user_id for p in visible]
    result.removed = stale
    current_app.logger.info("Search sync: %d indexed, %d removed", len(result.indexed), len(result.removed))
    return result


def sync_profile(user_id, index=None):
    return sync_profiles([user_id], index=index)


def remove_profile(user_id, index=None):
    index = index or require_index()
    index.delete_documents([int(user_id)])
    current_app.logger.info("Removed profile %s from search index", user_id)


def reindex_all(index=None):
    """Clear the index and repopulate it from every visible profile.

    Readers can see an empty or partial index between the clear and the
    last batch.
    """
    index = index or require_index()
    profiles = EmployeeProfile.query.filter_by(visibility=True).order_by(EmployeeProfile.user_id).all()
    index.delete_all_documents()
    for start in range(0, len(profiles), BATCH_SIZE):
        index.add_documents([to_search_document(p) for p in profiles[start:start + BATCH_SIZE]])
    current_app.logger.info("Reindexed %d profiles", len(profiles))
    return SyncResult(indexed=[p.user_id for p in profiles])


def index_stats(index=None):
    index = index or require_index()
    stats = index.stats()
    return {
        "numberOfDocuments": stats.get("numberOfDocuments", 0),
        "isIndexing": stats.get("isIndexing", False),
        "fieldDistribution": stats.get("fieldDistribution", {}),
    }
