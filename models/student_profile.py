from datetime import datetime

from extensions import db

# fields a student (or the consultation flow) may write
PROFILE_FIELDS = (
    "full_name", "phone", "avatar_url",
    "education_level", "gpa",
    "interests", "skills", "preferred_countries",
    "budget_range",
)
LIST_FIELDS = ("interests", "skills", "preferred_countries")


class StudentProfile(db.Model):
    __tablename__ = "student_profiles"
    # shares its id with the owning user
    id = db.Column(db.Integer, db.ForeignKey("user.id"), primary_key=True)

    email = db.Column(db.String(120), nullable=False)
    full_name = db.Column(db.String(160))
    phone = db.Column(db.String(40))
    avatar_url = db.Column(db.String(500))

    # === academic background ===
    education_level = db.Column(db.String(80))
    gpa = db.Column(db.String(40))  # free text: "3.6/4.0", "85%", "A*AA"

    # === interests & preferences ===
    interests = db.Column(db.JSON, default=list)
    skills = db.Column(db.JSON, default=list)
    preferred_countries = db.Column(db.JSON, default=list)
    budget_range = db.Column(db.String(80))

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "full_name": self.full_name,
            "phone": self.phone,
            "avatar_url": self.avatar_url,
            "education_level": self.education_level,
            "gpa": self.gpa,
            "interests": self.interests or [],
            "skills": self.skills or [],
            "preferred_countries": self.preferred_countries or [],
            "budget_range": self.budget_range,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
