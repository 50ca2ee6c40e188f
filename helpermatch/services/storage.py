"""Signed upload/download URLs for the S3-compatible object store.

Type and size checks run on the client's declared metadata before a URL is
issued; nothing re-checks the bytes that are eventually uploaded.
"""
import math
import re
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import uuid4

import boto3
from botocore.client import Config
from flask import current_app

from ..utils.time import utcnow

ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/webp")
ALLOWED_DOCUMENT_TYPES = ("application/pdf",) + ALLOWED_IMAGE_TYPES
FOLDERS = ("profiles", "documents", "temp")
MAX_FILE_SIZE = 5 * 1024 * 1024

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


class FileRejected(ValueError):
    def __init__(self, message, field):
        super().__init__(message)
        self.field = field


@dataclass
class SignedUpload:
    signed_url: str
    public_url: str
    key: str
    expires_at: datetime


def _client():
    s3_kwargs = {}
    endpoint = current_app.config.get('S3_ENDPOINT')
    if endpoint:
        s3_kwargs['endpoint_url'] = endpoint
    region = current_app.config.get('S3_REGION')
    if region:
        s3_kwargs['region_name'] = region
    return boto3.client(
        's3',
        aws_access_key_id=current_app.config.get('S3_ACCESS_KEY'),
        aws_secret_access_key=current_app.config.get('S3_SECRET_KEY'),
        config=Config(signature_version='s3v4'),
        **s3_kwargs,
    )


def format_file_size(num_bytes):
    if num_bytes <= 0:
        return "0 Bytes"
    sizes = ["Bytes", "KB", "MB", "GB"]
    i = min(int(math.floor(math.log(num_bytes, 1024))), len(sizes) - 1)
    value = round(num_bytes / (1024 ** i), 2)
    return f"{value:g} {sizes[i]}"


def validate_file(content_type, file_size, kind):
    limit = current_app.config.get("UPLOAD_MAX_BYTES", MAX_FILE_SIZE)
    if file_size > limit:
        raise FileRejected(f"File size must be less than {format_file_size(limit)}", "fileSize")
    allowed = ALLOWED_IMAGE_TYPES if kind == "image" else ALLOWED_DOCUMENT_TYPES
    if content_type not in allowed:
        raise FileRejected(f"File type not allowed. Allowed types: {', '.join(allowed)}", "contentType")


def sanitize_filename(file_name):
    return _UNSAFE_CHARS.sub("_", file_name)


def generate_key(folder, user_id, file_name):
    if folder not in FOLDERS:
        raise ValueError(f"unknown upload folder: {folder}")
    timestamp = int(time.time() * 1000)
    return f"{folder}/{user_id}/{timestamp}-{uuid4()}-{sanitize_filename(file_name)}"


def public_url(key):
    base = (current_app.config.get("S3_PUBLIC_URL") or "").rstrip("/")
    return f"{base}/{key}"


def upload_url(folder, user_id, file_name, content_type, expires_in=None):
    expires_in = expires_in or current_app.config.get("UPLOAD_URL_EXPIRES", 3600)
    key = generate_key(folder, user_id, file_name)
    signed = _client().generate_presigned_url(
        "put_object",
        Params={
            "Bucket": current_app.config["S3_BUCKET"],
            "Key": key,
            "ContentType": content_type,
            "Metadata": {"userId": str(user_id), "folder": folder},
        },
        ExpiresIn=expires_in,
    )
    return SignedUpload(
        signed_url=signed,
        public_url=public_url(key),
        key=key,
        expires_at=utcnow() + timedelta(seconds=expires_in),
    )


def download_url(key, expires_in=3600):
    return _client().generate_presigned_url(
        "get_object",
        Params={"Bucket": current_app.config["S3_BUCKET"], "Key": key},
        ExpiresIn=expires_in,
    )


def delete_object(key):
    _client().delete_object(Bucket=current_app.config["S3_BUCKET"], Key=key)
