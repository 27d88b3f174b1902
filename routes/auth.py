# routes/auth.py
from __future__ import annotations

from datetime import datetime, timedelta
from functools import wraps

from flask import Blueprint, request, jsonify
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    get_jwt,
    get_jwt_identity,
    jwt_required,
    verify_jwt_in_request,
)
from sqlalchemy.exc import IntegrityError

from extensions import db
from models.student_profile import StudentProfile
from models.user import User
from services.step_validator import is_valid_email

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")

ACCESS_EXPIRES_HOURS = 2
REFRESH_EXPIRES_DAYS = 30
MIN_PASSWORD_LEN = 6


def _now_utc() -> datetime:
    return datetime.utcnow()


def _fmt_expires(dt: datetime) -> str:
    return dt.strftime("%Y/%m/%d %H:%M:%S")


def _roles_of(user: User) -> list[str]:
    return [str(user.role)] if user.role else ["student"]


def _token_payload(user: User) -> dict:
    """accessToken / refreshToken for a user; identity is the id as a string."""
    roles = _roles_of(user)
    identity = str(user.id)
    access_delta = timedelta(hours=ACCESS_EXPIRES_HOURS)
    claims = {"roles": roles}
    access_token = create_access_token(identity=identity, additional_claims=claims, expires_delta=access_delta)
    refresh_token = create_refresh_token(
        identity=identity, additional_claims=claims, expires_delta=timedelta(days=REFRESH_EXPIRES_DAYS)
    )
    return {
        "success": True,
        "accessToken": access_token,
        "refreshToken": refresh_token,
        "expires": _fmt_expires(_now_utc() + access_delta),
        "data": {
            "id": user.id,
            "email": user.email,
            "roles": roles,
        },
    }


def role_required(*required_roles):
    """
    Restrict a view to callers holding one of the roles.
    Usage: @role_required("admin")
    """
    def wrapper(fn):
        @wraps(fn)
        def decorated_view(*args, **kwargs):
            verify_jwt_in_request()
            claims = get_jwt() or {}
            user_roles = claims.get("roles") or claims.get("role") or []
            if isinstance(user_roles, str):
                user_roles = [user_roles]
            if not any(role in user_roles for role in required_roles):
                return jsonify({"msg": "forbidden"}), 403
            return fn(*args, **kwargs)
        return decorated_view
    return wrapper


@auth_bp.post("/register")
def register():
    """
    Student sign-up: {email, password, full_name?, phone?}.
    Creates the user and its profile, returns tokens.
    """
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    if not email or not password:
        return jsonify({"success": False, "msg": "email and password are required"}), 400
    if not is_valid_email(email):
        return jsonify({"success": False, "msg": "Invalid email format"}), 400
    if len(password) < MIN_PASSWORD_LEN:
        return jsonify({"success": False, "msg": f"password must be at least {MIN_PASSWORD_LEN} characters"}), 400
    if User.query.filter_by(email=email).first():
        return jsonify({"success": False, "msg": "email already registered"}), 409

    user = User(email=email, role="student")
    user.set_password(password)
    db.session.add(user)
    db.session.flush()  # need user.id for the profile

    db.session.add(StudentProfile(
        id=user.id,
        email=email,
        full_name=(data.get("full_name") or "").strip() or None,
        phone=(data.get("phone") or "").strip() or None,
    ))
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify({"success": False, "msg": "email already registered"}), 409

    return jsonify(_token_payload(user)), 201


@auth_bp.post("/login")
def login():
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    if not email or not password:
        return jsonify({"success": False, "msg": "email and password are required"}), 400

    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(password):
        return jsonify({"success": False, "msg": "invalid email or password"}), 401

    return jsonify(_token_payload(user)), 200


@auth_bp.post("/refresh-token")
@jwt_required(refresh=True)
def refresh_token():
    identity = get_jwt_identity()
    claims = get_jwt() or {}
    roles = claims.get("roles") or []
    access_delta = timedelta(hours=ACCESS_EXPIRES_HOURS)
    new_access = create_access_token(
        identity=identity, additional_claims={"roles": roles}, expires_delta=access_delta
    )
    return jsonify({
        "success": True,
        "accessToken": new_access,
        "expires": _fmt_expires(_now_utc() + access_delta),
    }), 200
