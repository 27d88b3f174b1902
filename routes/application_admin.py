# routes/application_admin.py
from __future__ import annotations

import os
import zipfile
from datetime import datetime, timezone
from io import BytesIO

from flask import Blueprint, current_app, jsonify, request, send_file
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models.application import APPLICATION_STATUSES, DECIDED, Application
from models.student_profile import StudentProfile
from routes.auth import role_required
from services.storage import LocalStorage
from services.submission import sections_of
from services.timeline import timeline_steps

admin_application_bp = Blueprint("admin_application", __name__, url_prefix="/api/admin/applications")


def _parse_dt(val) -> datetime | None:
    """ISO 8601, with or without a trailing Z; naive UTC is stored."""
    if not val:
        return None
    s = str(val).strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def _applicant(app_obj: Application) -> dict:
    prof = db.session.get(StudentProfile, app_obj.user_id)
    return {
        "id": app_obj.user_id,
        "full_name": prof.full_name if prof else None,
        "email": prof.email if prof else (app_obj.applicant.email if app_obj.applicant else None),
    }


def _commit_or_500(what: str):
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.exception("%s failed", what)
        return jsonify({"msg": str(e)}), 500
    return None


@admin_application_bp.get("")
@role_required("admin")
def list_applications():
    q = Application.query
    status = request.args.get("status")
    if status and status != "all":
        if status not in APPLICATION_STATUSES:
            return jsonify({"msg": f"status must be in {APPLICATION_STATUSES}"}), 400
        q = q.filter_by(status=status)
    rows = q.order_by(Application.created_at.desc(), Application.id.desc()).all()
    return jsonify({"items": [{**r.to_dict(), "applicant": _applicant(r)} for r in rows]})


@admin_application_bp.get("/<int:app_id>")
@role_required("admin")
def get_application(app_id: int):
    app_obj = db.get_or_404(Application, app_id)
    return jsonify({
        **app_obj.to_dict(),
        "applicant": _applicant(app_obj),
        "sections": sections_of(app_obj.payload()),
        "timeline": timeline_steps(app_obj),
    })


@admin_application_bp.put("/<int:app_id>")
@role_required("admin")
def update_application(app_id: int):
    """
    Body: {status, admin_notes?, interview_date?, interview_link?}
    Owner / university / program are never touched here.
    """
    app_obj = db.get_or_404(Application, app_id)
    data = request.get_json(silent=True) or {}

    status = data.get("status", app_obj.status)
    if status not in APPLICATION_STATUSES:
        return jsonify({"msg": f"status must be in {APPLICATION_STATUSES}"}), 400

    if status == "interview_scheduled":
        try:
            interview_date = _parse_dt(data.get("interview_date"))
        except ValueError:
            return jsonify({"msg": "interview_date must be ISO 8601"}), 400
        if interview_date is None:
            return jsonify({"msg": "Please set an interview date"}), 400
        app_obj.interview_date = interview_date
        app_obj.interview_link = (data.get("interview_link") or "").strip() or None
    else:
        app_obj.interview_date = None
        app_obj.interview_link = None

    app_obj.status = status
    if "admin_notes" in data:
        app_obj.admin_notes = (data.get("admin_notes") or "").strip() or None

    failed = _commit_or_500("application update")
    if failed:
        return failed
    return jsonify({"msg": "Application updated", "application": app_obj.to_dict()})


@admin_application_bp.post("/<int:app_id>/decision")
@role_required("admin")
def decide(app_id: int):
    """Quick accept / reject from the list view. Interview fields are cleared."""
    app_obj = db.get_or_404(Application, app_id)
    data = request.get_json(silent=True) or {}
    status = data.get("status")
    if status not in DECIDED:
        return jsonify({"msg": f"status must be in {list(DECIDED)}"}), 400
    app_obj.status = status
    app_obj.interview_date = None
    app_obj.interview_link = None
    failed = _commit_or_500("application decision")
    if failed:
        return failed
    return jsonify({"msg": f"Application {status}", "application": app_obj.to_dict()})


@admin_application_bp.get("/<int:app_id>/documents.zip")
@role_required("admin")
def download_documents(app_id: int):
    """Every stored attachment in one archive, one folder per slot."""
    app_obj = db.get_or_404(Application, app_id)
    storage = LocalStorage.from_app()
    documents = sections_of(app_obj.payload())["documents"]

    bio = BytesIO()
    added = 0
    with zipfile.ZipFile(bio, "w", zipfile.ZIP_DEFLATED) as zf:
        for slot, urls in documents.items():
            for url in urls:
                path = storage.path_from_url(url)
                if not path or not storage.exists(path):
                    current_app.logger.warning("document missing for application %s: %s", app_id, url)
                    continue
                zf.write(storage.absolute(path), arcname=f"{slot}/{os.path.basename(path)}")
                added += 1
    if not added:
        return jsonify({"msg": "No documents stored for this application"}), 404

    bio.seek(0)
    return send_file(
        bio,
        mimetype="application/zip",
        as_attachment=True,
        download_name=f"application-{app_id}-documents.zip",
    )
