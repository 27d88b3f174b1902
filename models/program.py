from datetime import datetime

from extensions import db

# open set: the admin form offers these, but other strings are stored as-is
DEGREE_TYPES = ("Bachelor", "Master", "PhD", "Diploma", "Certificate")


class Program(db.Model):
    __tablename__ = "programs"
    id = db.Column(db.Integer, primary_key=True)
    university_id = db.Column(db.Integer, db.ForeignKey("universities.id"), nullable=False, index=True)

    name = db.Column(db.String(200), nullable=False)
    department = db.Column(db.String(160))
    degree_type = db.Column(db.String(40), nullable=False)
    duration = db.Column(db.String(80))
    tuition_fee = db.Column(db.String(80))

    description = db.Column(db.Text)
    requirements = db.Column(db.Text)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "university_id": self.university_id,
            "name": self.name,
            "department": self.department,
            "degree_type": self.degree_type,
            "duration": self.duration,
            "tuition_fee": self.tuition_fee,
            "description": self.description,
            "requirements": self.requirements,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
