# routes/consultation.py
from flask import Blueprint, abort, jsonify, request
from flask_jwt_extended import jwt_required

from models.ai_consultation import AIConsultation
from services.ai_consultation import run_consultation
from services.session import current_session

consultation_bp = Blueprint("consultation", __name__, url_prefix="/api/consultations")


@consultation_bp.post("")
@jwt_required()
def create_consultation():
    """
    Body: {education_level, gpa, interests, skills, preferred_countries, budget_range}
    List fields may be arrays or comma separated strings.
    """
    session = current_session()
    if session is None:
        abort(401)
    data = request.get_json(silent=True) or {}
    row = run_consultation(session, data)
    return jsonify({"msg": "Recommendations generated successfully!", "consultation": row.to_dict()}), 201


@consultation_bp.get("")
@jwt_required()
def list_consultations():
    session = current_session()
    if session is None:
        abort(401)
    limit = max(1, min(request.args.get("limit", 20, type=int), 100))
    rows = (
        AIConsultation.query.filter_by(user_id=session.user_id)
        .order_by(AIConsultation.created_at.desc(), AIConsultation.id.desc())
        .limit(limit)
        .all()
    )
    return jsonify({"items": [r.to_dict() for r in rows]})
