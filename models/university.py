from datetime import datetime

from extensions import db


class University(db.Model):
    __tablename__ = "universities"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)

    country = db.Column(db.String(80), nullable=False)
    city = db.Column(db.String(80), nullable=False)
    logo_url = db.Column(db.String(500))

    description = db.Column(db.Text)
    requirements = db.Column(db.Text)
    deadlines = db.Column(db.Text)

    # only "active" universities are listed to students
    status = db.Column(db.String(20), default="active", nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    programs = db.relationship(
        "Program", backref="university", cascade="all, delete-orphan",
        order_by="Program.name",
    )

    @property
    def is_active(self):
        return self.status == "active"

    def to_dict(self, with_programs=False):
        data = {
            "id": self.id,
            "name": self.name,
            "country": self.country,
            "city": self.city,
            "logo_url": self.logo_url,
            "description": self.description,
            "requirements": self.requirements,
            "deadlines": self.deadlines,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if with_programs:
            data["programs"] = [p.to_dict() for p in self.programs]
        return data
