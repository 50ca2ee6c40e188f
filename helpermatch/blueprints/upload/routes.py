from flask import current_app, jsonify
from flask_login import current_user

from . import bp
from .forms import DocumentUploadForm, UploadForm
from ...errors import ValidationFailed
from ...services import storage
from ...utils.api import json_body, snake_keys, validate_or_400
from ...utils.decorators import role_required
from ...utils.time import isoformat


def _signed_upload(form, folder, kind):
    try:
        storage.validate_file(form.content_type.data, form.file_size.data, kind)
    except storage.FileRejected as e:
        raise ValidationFailed([{"field": e.field, "message": str(e)}])

    upload = storage.upload_url(folder, current_user.id, form.file_name.data, form.content_type.data)
    current_app.logger.info("Issued %s upload URL %s for user %s", kind, upload.key, current_user.id)
    return jsonify({
        "signedUrl": upload.signed_url,
        "publicUrl": upload.public_url,
        "key": upload.key,
        "expiresAt": isoformat(upload.expires_at),
    })


@bp.post("/document")
@role_required("employee")
def document():
    form = validate_or_400(DocumentUploadForm(snake_keys(json_body())))
    return _signed_upload(form, "documents", "document")


@bp.post("/profile-image")
@role_required("employee")
def profile_image():
    form = validate_or_400(UploadForm(snake_keys(json_body())))
    return _signed_upload(form, "profiles", "image")
