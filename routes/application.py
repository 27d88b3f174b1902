# routes/application.py
from flask import Blueprint, abort, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from extensions import db
from models.application import Application
from models.student_profile import StudentProfile
from services.session import current_session
from services.storage import LocalStorage
from services.submission import submit_draft
from services.timeline import timeline_steps

application_bp = Blueprint("application_bp", __name__, url_prefix="/api/applications")


def _session():
    session = current_session()
    if session is None:
        abort(401)
    return session


@application_bp.post("/submit")
@jwt_required()
def submit():
    """
    Body: {"university_id": 1, "program_id": 3}
    Submits the caller's draft; the draft is cleared on success.
    """
    session = _session()
    data = request.get_json(silent=True) or {}
    draft = current_app.extensions["draft_store"].get(
        session.user_id, lambda uid: db.session.get(StudentProfile, uid)
    )
    app_obj = submit_draft(
        session, draft,
        university_id=data.get("university_id"),
        program_id=data.get("program_id"),
        storage=LocalStorage.from_app(),
    )
    return jsonify({
        "msg": "Your application has been submitted successfully! We will contact you soon.",
        "application": app_obj.to_dict(),
    }), 201


@application_bp.get("")
@jwt_required()
def list_my_applications():
    """
    GET /api/applications?mine=1
    Only the caller's own applications, newest first.
    """
    session = _session()
    mine = request.args.get("mine", "1")
    if str(mine) != "1":
        return jsonify({"items": []})

    rows = (
        Application.query.filter_by(user_id=session.user_id)
        .order_by(Application.created_at.desc(), Application.id.desc())
        .all()
    )
    return jsonify({"items": [r.to_dict() for r in rows]})


@application_bp.get("/<int:app_id>")
@jwt_required()
def get_my_application(app_id: int):
    session = _session()
    app_obj = db.session.get(Application, app_id)
    if app_obj is None or app_obj.user_id != session.user_id:
        return jsonify({"msg": "Not Found"}), 404
    return jsonify({**app_obj.to_dict(), "timeline": timeline_steps(app_obj)})


@application_bp.get("/<int:app_id>/timeline")
@jwt_required()
def get_timeline(app_id: int):
    session = _session()
    app_obj = db.session.get(Application, app_id)
    if app_obj is None or app_obj.user_id != session.user_id:
        return jsonify({"msg": "Not Found"}), 404
    return jsonify({"id": app_obj.id, "status": app_obj.status, "steps": timeline_steps(app_obj)})
