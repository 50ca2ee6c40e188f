"""Helpers shared by the JSON route handlers."""
import re

from flask import request

from ..errors import ApiError, ValidationFailed

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def camel_to_snake(name):
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def snake_to_camel(name):
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def snake_keys(payload, nested=()):
    """Convert the top-level keys of a JSON object to snake_case.

    Keys listed in ``nested`` hold lists of objects whose keys are converted
    too; every other value (free-form filter blobs, for instance) is kept
    untouched.
    """
    out = {}
    for key, value in payload.items():
        name = camel_to_snake(key)
        if name in nested and isinstance(value, list):
            value = [snake_keys(item) if isinstance(item, dict) else item for item in value]
        out[name] = value
    return out


def json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ApiError("Request body must be a JSON object")
    return data


def flatten_errors(errors, prefix=""):
    """Yield (field, message) pairs from a WTForms ``errors`` structure.

    FieldList errors are lists mixing per-entry errors with list-level
    messages; entries are addressed as ``references[0].phone``.
    """
    if isinstance(errors, dict):
        for key, value in errors.items():
            if key is None:
                name = prefix or None
            else:
                name = snake_to_camel(key)
                name = f"{prefix}.{name}" if prefix else name
            yield from flatten_errors(value, name)
    elif isinstance(errors, (list, tuple)):
        for index, item in enumerate(errors):
            if isinstance(item, str):
                yield prefix, item
            else:
                yield from flatten_errors(item, f"{prefix}[{index}]")
    elif errors:
        yield prefix, str(errors)


def validate_or_400(form):
    if not form.validate():
        details = [{"field": field, "message": message} for field, message in flatten_errors(form.all_errors())]
        raise ValidationFailed(details)
    return form


def query_int(name, default, minimum=1, maximum=None):
    value = request.args.get(name, type=int)
    if value is None:
        return default
    value = max(minimum, value)
    if maximum is not None:
        value = min(maximum, value)
    return value


def pagination_meta(page_obj):
    return {
        "page": page_obj.page,
        "limit": page_obj.per_page,
        "total": page_obj.total,
        "pages": page_obj.pages,
        "hasNextPage": page_obj.has_next,
        "hasPreviousPage": page_obj.has_prev,
    }
