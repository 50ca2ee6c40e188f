from flask import current_app, jsonify, request
from flask_login import current_user

from . import bp
from .forms import SearchQueryForm, SyncForm
from ...errors import ApiError
from ...services import search_query, search_sync
from ...services.search_index import SearchIndexError
from ...utils.api import json_body, snake_keys, validate_or_400
from ...utils.decorators import admin_required, role_required
from ...utils.time import isoformat, utcnow

SUGGESTION_FIELDS = ["first_name", "city", "province", "skills"]


def _search(index, **kwargs):
    try:
        return index.search(**kwargs)
    except SearchIndexError:
        current_app.logger.exception("Search request failed")
        raise ApiError("Search failed", status_code=502)


@bp.get("/employees")
def search_employees():
    form = validate_or_400(SearchQueryForm(request.args.to_dict()))
    index = search_sync.require_index()
    page = form.page.data or 1

    result = _search(
        index,
        query=form.q.data or "",
        filter=search_query.build_filter(
            city=form.city.data,
            province=form.province.data,
            skills=form.skill_list(),
            live_in_out=form.live_in_out.data,
            experience_band=form.experience_band.data,
            salary_min=form.salary_min.data,
            salary_max=form.salary_max.data,
            available_from=form.availability_date.data,
        ),
        sort=search_query.sort_for(form.sort.data),
        facets=search_query.FACETS,
        page=page,
        hits_per_page=search_query.PAGE_SIZE,
    )
    total = result.get("totalHits", 0)
    return jsonify({
        "hits": result.get("hits", []),
        "totalHits": total,
        "page": page,
        "totalPages": search_query.total_pages(total),
        "facets": result.get("facetDistribution", {}),
        "processingTimeMs": result.get("processingTimeMs", 0),
    })


@bp.get("/facets")
def facets():
    index = search_sync.require_index()
    distribution = _search(index, query="", facets=search_query.FACETS, hits_per_page=0).get("facetDistribution") or {}
    return jsonify({
        "cities": distribution.get("city", {}),
        "provinces": distribution.get("province", {}),
        "skills": distribution.get("skills", {}),
        "live_in_out": distribution.get("live_in_out", {}),
        "experience_bands": distribution.get("experience_band", {}),
    })


@bp.get("/suggestions")
def suggestions():
    """Skill, city and name completions for the search box."""
    query = (request.args.get("q") or "").strip()
    limit = min(max(request.args.get("limit", default=5, type=int), 1), 20)
    if len(query) < 2:
        return jsonify([])

    index = search_sync.require_index()
    hits = _search(index, query=query, hits_per_page=limit * 4,
                   attributes_to_retrieve=SUGGESTION_FIELDS).get("hits", [])
    needle = query.lower()
    found = []
    for hit in hits:
        candidates = list(hit.get("skills") or []) + [hit.get("city"), hit.get("province"), hit.get("first_name")]
        for value in candidates:
            if value and needle in value.lower() and value not in found:
                found.append(value)
    return jsonify(found[:limit])


@bp.post("/sync")
@role_required("admin", "employer")
def sync():
    form = validate_or_400(SyncForm(snake_keys(json_body())))
    kind = form.type.data
    if kind == "full" and not current_user.is_admin:
        raise ApiError("Admin access required for full reindex", status_code=403)

    index = search_sync.require_index()
    try:
        if kind == "single":
            result = search_sync.sync_profile(form.user_id.data, index=index)
        elif kind == "batch":
            result = search_sync.sync_profiles(form.user_ids.data, index=index)
        elif kind == "full":
            result = search_sync.reindex_all(index=index)
        else:
            search_sync.remove_profile(form.user_id.data, index=index)
            result = search_sync.SyncResult(removed=[form.user_id.data])
    except SearchIndexError:
        current_app.logger.exception("Search sync (%s) failed", kind)
        raise ApiError("Search sync failed", status_code=502)
    return jsonify({"success": True, "type": kind, **result.to_dict()})


@bp.get("/sync")
@admin_required
def sync_stats():
    stats = search_sync.index_stats()
    return jsonify({"success": True, "stats": stats, "timestamp": isoformat(utcnow())})
