from flask import jsonify
from flask_login import current_user, login_required

from . import bp
from .forms import SavedSearchForm
from ...errors import ApiError, Conflict
from ...extensions import db
from ...models.saved_search import SavedSearch
from ...utils.api import json_body, snake_keys, validate_or_400


def _own(search_id):
    row = SavedSearch.query.filter_by(id=search_id, user_id=current_user.id).first()
    if row is None:
        raise ApiError("Saved search not found", status_code=404)
    return row


def _check_name_free(name, exclude_id=None):
    query = SavedSearch.query.filter_by(user_id=current_user.id, name=name)
    if exclude_id is not None:
        query = query.filter(SavedSearch.id != exclude_id)
    if query.first():
        raise Conflict("A saved search with this name already exists")


@bp.get("")
@login_required
def list_saved():
    rows = (SavedSearch.query.filter_by(user_id=current_user.id)
            .order_by(SavedSearch.created_at.desc(), SavedSearch.id.desc()).all())
    return jsonify({"savedSearches": [r.to_dict() for r in rows]})


@bp.post("")
@login_required
def create_saved():
    form = validate_or_400(SavedSearchForm(snake_keys(json_body())))
    _check_name_free(form.name.data)
    row = SavedSearch(user_id=current_user.id, name=form.name.data, params_json=form.params_json.data)
    db.session.add(row)
    db.session.commit()
    return jsonify(row.to_dict()), 201


@bp.get("/<int:search_id>")
@login_required
def get_saved(search_id):
    return jsonify(_own(search_id).to_dict())


@bp.put("/<int:search_id>")
@login_required
def update_saved(search_id):
    row = _own(search_id)
    form = validate_or_400(SavedSearchForm(snake_keys(json_body()), partial=True))
    values = form.cleaned()
    if "name" in values:
        _check_name_free(values["name"], exclude_id=row.id)
        row.name = values["name"]
    if "params_json" in values:
        row.params_json = values["params_json"]
    db.session.commit()
    return jsonify(row.to_dict())


@bp.delete("/<int:search_id>")
@login_required
def delete_saved(search_id):
    db.session.delete(_own(search_id))
    db.session.commit()
    return jsonify({"message": "Saved search deleted"})
