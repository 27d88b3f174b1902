import json
from datetime import datetime

from extensions import db

APPLICATION_STATUSES = [
    "pending",              # submitted, nobody has looked at it yet
    "under_review",
    "interview_scheduled",
    "accepted",
    "rejected",
]
DECIDED = ("accepted", "rejected")


class Application(db.Model):
    __tablename__ = "applications"
    id = db.Column(db.Integer, primary_key=True)
    # owner / university / program are fixed once the row exists
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)
    university_id = db.Column(db.Integer, db.ForeignKey("universities.id"), nullable=False, index=True)
    program_id = db.Column(db.Integer, db.ForeignKey("programs.id"), nullable=False, index=True)

    status = db.Column(db.String(32), default="pending", nullable=False, index=True)

    academic_history = db.Column(db.Text)
    personal_statement = db.Column(db.Text)  # JSON submission payload
    documents_url = db.Column(db.JSON)

    # admin only
    admin_notes = db.Column(db.Text)
    interview_date = db.Column(db.DateTime)
    interview_link = db.Column(db.String(500))

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    university = db.relationship("University", lazy="joined")
    program = db.relationship("Program", lazy="joined")
    applicant = db.relationship("User", lazy="joined")

    def payload(self) -> dict:
        """Decoded submission payload; {} when missing or not JSON."""
        if not self.personal_statement:
            return {}
        try:
            data = json.loads(self.personal_statement)
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

    def to_dict(self, with_payload=False):
        data = {
            "id": self.id,
            "user_id": self.user_id,
            "university_id": self.university_id,
            "program_id": self.program_id,
            "status": self.status,
            "academic_history": self.academic_history,
            "documents_url": self.documents_url or [],
            "admin_notes": self.admin_notes,
            "interview_date": self.interview_date.isoformat() if self.interview_date else None,
            "interview_link": self.interview_link,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "university": {
                "id": self.university.id,
                "name": self.university.name,
                "logo_url": self.university.logo_url,
            } if self.university else None,
            "program": {
                "id": self.program.id,
                "name": self.program.name,
                "degree_type": self.program.degree_type,
            } if self.program else None,
        }
        if with_payload:
            data["payload"] = self.payload()
        return data
