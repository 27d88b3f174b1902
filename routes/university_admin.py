# routes/university_admin.py
from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from extensions import db
from models.program import Program
from models.university import University
from routes.auth import role_required

admin_university_bp = Blueprint("admin_university", __name__, url_prefix="/api/admin")

# columns an admin may write, taken from the models
UNIVERSITY_COLUMNS = set(University.__table__.columns.keys()) - {"id", "created_at", "updated_at"}
PROGRAM_COLUMNS = set(Program.__table__.columns.keys()) - {"id", "university_id", "created_at", "updated_at"}
UNIVERSITY_STATUSES = ("active", "inactive")
# empty strings from the form are stored as NULL
NULLABLE_TEXT = {"logo_url", "description", "requirements", "deadlines",
                 "department", "duration", "tuition_fee"}


def _assign(obj, data: dict, columns: set):
    for k, v in data.items():
        if k not in columns:
            continue
        if isinstance(v, str):
            v = v.strip()
            if k in NULLABLE_TEXT and not v:
                v = None
        setattr(obj, k, v)


def _commit(what: str):
    try:
        db.session.commit()
    except (IntegrityError, SQLAlchemyError) as e:
        db.session.rollback()
        current_app.logger.exception("%s failed", what)
        return jsonify({"msg": f"{what} failed", "error": str(e)}), 400
    return None


# ========== universities ==========
@admin_university_bp.get("/universities")
@role_required("admin")
def list_universities():
    rows = University.query.order_by(University.name.asc()).all()
    return jsonify({"items": [u.to_dict() for u in rows]})


@admin_university_bp.post("/universities")
@role_required("admin")
def create_university():
    data = request.get_json(silent=True) or {}
    missing = [k for k in ("name", "country", "city") if not str(data.get(k) or "").strip()]
    if missing:
        return jsonify({"msg": "Please fill in required fields", "fields": missing}), 400
    if data.get("status", "active") not in UNIVERSITY_STATUSES:
        return jsonify({"msg": f"status must be in {UNIVERSITY_STATUSES}"}), 400

    u = University()
    _assign(u, data, UNIVERSITY_COLUMNS)
    db.session.add(u)
    failed = _commit("create university")
    if failed:
        return failed
    return jsonify({"msg": "University added", "university": u.to_dict()}), 201


@admin_university_bp.put("/universities/<int:uid>")
@role_required("admin")
def update_university(uid):
    u = db.get_or_404(University, uid)
    data = request.get_json(silent=True) or {}
    for k in ("name", "country", "city"):
        if k in data and not str(data.get(k) or "").strip():
            return jsonify({"msg": f"{k} cannot be empty"}), 400
    if "status" in data and data["status"] not in UNIVERSITY_STATUSES:
        return jsonify({"msg": f"status must be in {UNIVERSITY_STATUSES}"}), 400

    _assign(u, data, UNIVERSITY_COLUMNS)
    failed = _commit("update university")
    if failed:
        return failed
    return jsonify({"msg": "University updated", "university": u.to_dict()})


@admin_university_bp.delete("/universities/<int:uid>")
@role_required("admin")
def delete_university(uid):
    """Programs go with it (cascade)."""
    u = db.get_or_404(University, uid)
    db.session.delete(u)
    failed = _commit("delete university")
    if failed:
        return failed
    return jsonify({"msg": "University deleted"})


# ========== programs ==========
@admin_university_bp.get("/universities/<int:uid>/programs")
@role_required("admin")
def list_programs(uid):
    u = db.get_or_404(University, uid)
    return jsonify({"items": [p.to_dict() for p in u.programs]})


@admin_university_bp.post("/universities/<int:uid>/programs")
@role_required("admin")
def create_program(uid):
    u = db.get_or_404(University, uid)
    data = request.get_json(silent=True) or {}
    missing = [k for k in ("name", "degree_type") if not str(data.get(k) or "").strip()]
    if missing:
        return jsonify({"msg": "Please fill in required fields", "fields": missing}), 400

    p = Program(university_id=u.id)
    _assign(p, data, PROGRAM_COLUMNS)
    db.session.add(p)
    failed = _commit("create program")
    if failed:
        return failed
    return jsonify({"msg": "Program added", "program": p.to_dict()}), 201


@admin_university_bp.put("/programs/<int:pid>")
@role_required("admin")
def update_program(pid):
    p = db.get_or_404(Program, pid)
    data = request.get_json(silent=True) or {}
    for k in ("name", "degree_type"):
        if k in data and not str(data.get(k) or "").strip():
            return jsonify({"msg": f"{k} cannot be empty"}), 400

    _assign(p, data, PROGRAM_COLUMNS)
    failed = _commit("update program")
    if failed:
        return failed
    return jsonify({"msg": "Program updated", "program": p.to_dict()})


@admin_university_bp.delete("/programs/<int:pid>")
@role_required("admin")
def delete_program(pid):
    p = db.get_or_404(Program, pid)
    db.session.delete(p)
    failed = _commit("delete program")
    if failed:
        return failed
    return jsonify({"msg": "Program deleted"})
