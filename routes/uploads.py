# routes/uploads.py
from flask import Blueprint, abort, current_app, send_from_directory

uploads_bp = Blueprint("uploads", __name__)


@uploads_bp.get("/uploads/<path:subpath>")
def serve_upload(subpath: str):
    """Public URLs of stored application documents."""
    if ".." in subpath or subpath.startswith("/"):
        abort(400)
    return send_from_directory(current_app.config["UPLOAD_DIR"], subpath, conditional=True)
