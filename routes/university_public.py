# routes/university_public.py
from flask import Blueprint, jsonify, request
from sqlalchemy import or_

from extensions import db
from models.university import University

public_university_bp = Blueprint("public_university", __name__, url_prefix="/api")


def _card(u: University) -> dict:
    return {
        "id": u.id,
        "name": u.name,
        "country": u.country,
        "city": u.city,
        "logo_url": u.logo_url or "",
        "description": u.description or "",
        "program_count": len(u.programs),
    }


@public_university_bp.get("/universities")
def list_universities():
    """Only active universities; ?q= searches name / city / country."""
    query = University.query.filter(University.status == "active")

    q = (request.args.get("q") or "").strip()
    if q:
        like = f"%{q}%"
        query = query.filter(or_(
            University.name.ilike(like),
            University.city.ilike(like),
            University.country.ilike(like),
        ))
    country = (request.args.get("country") or "").strip()
    if country:
        query = query.filter(University.country == country)

    items = query.order_by(University.name.asc()).all()
    return jsonify({"total": len(items), "items": [_card(u) for u in items]})


@public_university_bp.get("/universities/<int:uid>")
def get_university(uid: int):
    u = db.session.get(University, uid)
    if u is None or not u.is_active:
        return jsonify({"msg": "Not Found"}), 404
    return jsonify(u.to_dict(with_programs=True))
