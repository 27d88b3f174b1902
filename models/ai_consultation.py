# models/ai_consultation.py
from datetime import datetime

from extensions import db


class AIConsultation(db.Model):
    __tablename__ = "ai_consultations"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)

    # full gateway answer
    recommendations = db.Column(db.JSON)

    # flattened for listing
    career_suggestions = db.Column(db.JSON)
    recommended_universities = db.Column(db.JSON)
    next_steps = db.Column(db.JSON)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "recommendations": self.recommendations or {},
            "career_suggestions": self.career_suggestions or [],
            "recommended_universities": self.recommended_universities or [],
            "next_steps": self.next_steps or [],
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
