import os
import secrets
import time

from flask import Blueprint, current_app, jsonify, make_response, request

from dorothy.exceptions import StorageError
from dorothy.schemas import UploadSchema
from dorothy.utils.auth import admin_required

upload_bp = Blueprint("upload", __name__)

MAX_UPLOAD_BYTES = 5 * 1024 * 1024
ALLOWED_TYPES = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


def file_extension(mimetype, filename):
    if mimetype in ALLOWED_TYPES:
        return ALLOWED_TYPES[mimetype]
    ext = os.path.splitext(filename or "")[1].lstrip(".").lower()
    return ext if ext.isalnum() else "bin"


def storage_key(folder, mimetype, filename):
    return (
        f"{folder}/{int(time.time() * 1000)}_{secrets.token_hex(6)}"
        f".{file_extension(mimetype, filename)}"
    )


@upload_bp.route("/admin/uploads", methods=["POST"])
@admin_required
def upload_file():
    file = request.files.get("file")
    if not file:
        return jsonify({"error": "Missing file"}), 400

    folder = UploadSchema.model_validate(request.form.to_dict()).folder

    if file.mimetype not in ALLOWED_TYPES:
        return jsonify({"error": "Invalid file type", "mime": file.mimetype}), 400

    data = file.read()
    if len(data) > MAX_UPLOAD_BYTES:
        return jsonify({"error": "File too large"}), 400

    storage = current_app.extensions["storage"]
    path = storage_key(folder, file.mimetype, file.filename)
    try:
        storage.upload(path, data, file.mimetype)
    except StorageError as e:
        current_app.logger.error(
            f"[uploads] Upload failed folder={folder} path={path} "
            f"mime={file.mimetype} size={len(data)} status={e.status}: {e}"
        )
        return jsonify({"error": "Upload failed"}), 500

    current_app.logger.info(f"[uploads] Stored {path} ({len(data)} bytes)")
    return make_response(jsonify({"url": storage.public_url(path), "path": path}), 201)