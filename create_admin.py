# create_admin.py
import argparse

from app import create_app
from extensions import db
from models.user import User


def ensure_admin(email: str, password: str) -> User:
    """Create the admin, or promote an existing account with that email."""
    email = email.strip().lower()
    u = User.query.filter_by(email=email).first()
    if u is None:
        u = User(email=email)
        u.set_password(password)
        db.session.add(u)
    u.role = "admin"
    db.session.commit()
    return u


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create or promote an admin account")
    parser.add_argument("email")
    parser.add_argument("password")
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        user = ensure_admin(args.email, args.password)
        print(f"admin ready: {user.email} (id={user.id})")
