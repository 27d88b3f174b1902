# routes/admin_manage.py
from flask import Blueprint, jsonify, request
from sqlalchemy import or_

from models.student_profile import StudentProfile
from models.user import User
from routes.auth import role_required

admin_manage_bp = Blueprint("admin_manage_bp", __name__, url_prefix="/api/admin")


@admin_manage_bp.get("/students")
@role_required("admin")
def list_students():
    """Student profiles, newest first; ?q= matches name or email."""
    query = (
        StudentProfile.query.join(User, User.id == StudentProfile.id)
        .filter(User.role == "student")
    )
    q = (request.args.get("q") or "").strip()
    if q:
        like = f"%{q}%"
        query = query.filter(or_(StudentProfile.full_name.ilike(like), StudentProfile.email.ilike(like)))
    rows = query.order_by(StudentProfile.created_at.desc(), StudentProfile.id.desc()).all()
    return jsonify({"items": [p.to_dict() for p in rows]})
