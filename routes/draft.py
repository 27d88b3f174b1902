# routes/draft.py
"""
Editing the caller's in-memory application draft.

The draft never touches the database; it is kept in the app's
DraftStore until POST /api/applications/submit turns it into a row.
"""
from __future__ import annotations

from flask import Blueprint, abort, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from extensions import db
from models.student_profile import StudentProfile
from services.attachments import Attachment
from services.draft import ApplicationDraft
from services.session import current_session
from services.step_validator import STEP_NAMES, advance, back, validate_step

draft_bp = Blueprint("draft", __name__, url_prefix="/api/applications/draft")


def _store():
    return current_app.extensions["draft_store"]


def _draft() -> ApplicationDraft:
    session = current_session()
    if session is None:
        abort(401)
    return _store().get(session.user_id, lambda uid: db.session.get(StudentProfile, uid))


def _missing_index(e: IndexError):
    return jsonify({"msg": str(e)}), 404


# ---------- whole draft ----------
@draft_bp.get("")
@jwt_required()
def get_draft():
    return jsonify(_draft().to_dict())


@draft_bp.patch("")
@jwt_required()
def update_draft():
    """Body: {"firstName": "...", "sameAsPermanent": true, ...}"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"msg": "JSON object required"}), 400
    draft = _draft()
    draft.update(data)
    return jsonify(draft.to_dict())


@draft_bp.delete("")
@jwt_required()
def reset_draft():
    """Throw the draft away; the next one starts from the profile again."""
    session = current_session()
    if session is None:
        abort(401)
    _store().discard(session.user_id)
    return jsonify(_draft().to_dict())


# ---------- repeatable records ----------
@draft_bp.post("/records/<string:kind>")
@jwt_required()
def add_record(kind: str):
    draft = _draft()
    records = draft.record_list(kind)
    records.append()
    return jsonify({"kind": kind, "items": records.to_list()}), 201


@draft_bp.put("/records/<string:kind>/<int:index>")
@jwt_required()
def update_record(kind: str, index: int):
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data:
        return jsonify({"msg": "JSON object of fields required"}), 400
    records = _draft().record_list(kind)
    try:
        for field, value in data.items():
            records.update(index, field, value)
    except IndexError as e:
        return _missing_index(e)
    return jsonify({"kind": kind, "items": records.to_list()})


@draft_bp.delete("/records/<string:kind>/<int:index>")
@jwt_required()
def remove_record(kind: str, index: int):
    records = _draft().record_list(kind)
    try:
        records.remove(index)
    except IndexError as e:
        return _missing_index(e)
    return jsonify({"kind": kind, "items": records.to_list()})


# ---------- attachments ----------
@draft_bp.post("/files/<string:slot>")
@jwt_required()
def add_files(slot: str):
    """multipart/form-data, one or more parts named "files"."""
    target = _draft().slot(slot)
    uploads = request.files.getlist("files")
    if not uploads:
        return jsonify({"msg": "no files in request"}), 400
    candidates = []
    for fs in uploads:
        content = fs.read()
        candidates.append(Attachment(filename=fs.filename or "", content=content, content_type=fs.mimetype))
    result = target.add(candidates)
    if result.rejected:
        current_app.logger.info("slot %s rejected %s", slot, result.rejected)
    return jsonify({**result.to_dict(), "slot": target.to_dict()})


@draft_bp.delete("/files/<string:slot>/<int:index>")
@jwt_required()
def remove_file(slot: str, index: int):
    target = _draft().slot(slot)
    try:
        target.remove(index)
    except IndexError as e:
        return _missing_index(e)
    return jsonify({"slot": target.to_dict()})


# ---------- steps ----------
@draft_bp.get("/validate/<int:step>")
@jwt_required()
def validate(step: int):
    if step not in STEP_NAMES:
        return jsonify({"msg": f"step must be in {sorted(STEP_NAMES)}"}), 400
    errors = validate_step(_draft(), step)
    return jsonify({"step": step, "valid": not errors, "errors": errors})


@draft_bp.post("/advance")
@jwt_required()
def advance_step():
    draft = _draft()
    errors = advance(draft)
    if errors:
        return jsonify({
            "msg": "Please fill in all required fields correctly.",
            "current_step": draft.current_step,
            "errors": errors,
        }), 400
    return jsonify({"current_step": draft.current_step, "errors": {}})


@draft_bp.post("/back")
@jwt_required()
def back_step():
    return jsonify({"current_step": back(_draft())})
