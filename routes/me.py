# routes/me.py
from __future__ import annotations

from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models.student_profile import LIST_FIELDS, PROFILE_FIELDS, StudentProfile
from models.user import User
from services.session import current_session

bp_me = Blueprint("me", __name__, url_prefix="/api")


def _load(uid: int):
    user = db.session.get(User, uid)
    prof = db.session.get(StudentProfile, uid)
    if user is not None and prof is None:
        # accounts created before profiles existed (e.g. admins)
        prof = StudentProfile(id=uid, email=user.email)
        db.session.add(prof)
        db.session.commit()
    return user, prof


@bp_me.get("/me")
@jwt_required()
def me():
    session = current_session()
    if not session:
        return jsonify({"msg": "UNAUTHORIZED"}), 401
    user, prof = _load(session.user_id)
    if not user:
        return jsonify({"msg": "User not found"}), 404
    return jsonify({**user.to_dict(), "profile": prof.to_dict()})


@bp_me.get("/me/profile")
@jwt_required()
def get_profile():
    session = current_session()
    if not session:
        return jsonify({"msg": "UNAUTHORIZED"}), 401
    user, prof = _load(session.user_id)
    if not user:
        return jsonify({"msg": "User not found"}), 404
    return jsonify(prof.to_dict())


@bp_me.put("/me/profile")
@jwt_required()
def put_profile():
    session = current_session()
    if not session:
        return jsonify({"msg": "UNAUTHORIZED"}), 401
    user, prof = _load(session.user_id)
    if not user:
        return jsonify({"msg": "User not found"}), 404

    data = request.get_json(silent=True) or {}
    unknown = [k for k in data if k not in PROFILE_FIELDS]
    if unknown:
        return jsonify({"msg": "unknown fields", "fields": unknown}), 400

    for k in PROFILE_FIELDS:
        if k not in data:
            continue
        v = data[k]
        if k in LIST_FIELDS and isinstance(v, str):
            v = [x.strip() for x in v.split(",") if x.strip()]
        setattr(prof, k, v)

    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.exception("profile update failed")
        return jsonify({"msg": f"save failed: {e}"}), 500
    return jsonify({"msg": "saved", "profile": prof.to_dict()})
