# services/storage.py
"""
File storage for application documents.

Objects are written under UPLOAD_DIR as
``{user_id}/{slot}/{timestamp}_{index}_{filename}`` and served back by
routes/uploads.py, so the public URL is ``{PUBLIC_UPLOAD_BASE}/{path}``.
The index is the file's position in its slot, so same-named files in
one slot never share a path. An existing object is never overwritten.
"""
from __future__ import annotations

import logging
import os
import time

from flask import current_app
from werkzeug.utils import secure_filename

from services.attachments import Attachment
from services.errors import UploadFailed

logger = logging.getLogger(__name__)


def safe_name(filename: str) -> str:
    """secure_filename, falling back to document{ext} when the name does not survive it."""
    ext = os.path.splitext(filename or "")[1].lower()
    if not ext[1:].isalnum():
        ext = ""
    safe = secure_filename(filename or "")
    if not safe or os.path.splitext(safe)[1].lower() != ext:
        safe = f"document{ext}"
    return safe


def object_path(user_id: int, slot: str, filename: str, index: int = 0, ts_ms: int | None = None) -> str:
    ts_ms = int(time.time() * 1000) if ts_ms is None else ts_ms
    return f"{user_id}/{slot}/{ts_ms}_{index}_{safe_name(filename)}"


class LocalStorage:
    def __init__(self, root: str, public_base: str = "/uploads"):
        self.root = os.path.abspath(root)
        self.public_base = public_base.rstrip("/")

    @classmethod
    def from_app(cls) -> "LocalStorage":
        return cls(current_app.config["UPLOAD_DIR"], current_app.config.get("PUBLIC_UPLOAD_BASE", "/uploads"))

    def _abs(self, path: str) -> str:
        full = os.path.abspath(os.path.join(self.root, path))
        if not full.startswith(self.root + os.sep):
            raise ValueError(f"path escapes storage root: {path}")
        return full

    def upload(self, path: str, f: Attachment) -> None:
        full = self._abs(path)
        if os.path.exists(full):
            raise UploadFailed(f"object already exists: {path}", path=path)
        tmp = f"{full}.part"
        try:
            os.makedirs(os.path.dirname(full), exist_ok=True)
            with open(tmp, "wb") as fh:
                fh.write(f.content)
            os.replace(tmp, full)
        except OSError as e:
            raise UploadFailed(f"could not store {path}: {e}", path=path) from e
        logger.info("stored %s (%s bytes)", path, f.size)

    def public_url(self, path: str) -> str:
        return f"{self.public_base}/{path}"

    def path_from_url(self, url: str) -> str | None:
        prefix = self.public_base + "/"
        if not url or not url.startswith(prefix):
            return None
        return url[len(prefix):]

    def exists(self, path: str) -> bool:
        try:
            return os.path.isfile(self._abs(path))
        except ValueError:
            return False

    def absolute(self, path: str) -> str:
        return self._abs(path)
