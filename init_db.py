# init_db.py
import argparse

from app import create_app
from extensions import db

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create all tables")
    parser.add_argument("--drop", action="store_true", help="drop existing tables first")
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        if args.drop:
            print("Dropping all tables...")
            db.drop_all()
        print("Creating all tables...")
        db.create_all()
        print("Done.")
