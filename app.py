# app.py
import logging
import sys

from flask import Flask, current_app, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException

from config import Config
from extensions import db
from services.draft import DraftStore
from services.errors import PortalError

# ---- blueprints ----
from routes.auth import auth_bp
from routes.me import bp_me
from routes.meta import meta_bp
from routes.draft import draft_bp
from routes.application import application_bp
from routes.application_admin import admin_application_bp
from routes.university_admin import admin_university_bp
from routes.university_public import public_university_bp
from routes.admin_manage import admin_manage_bp
from routes.consultation import consultation_bp
from routes.uploads import uploads_bp


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def create_app(config_object=Config):
    configure_logging(getattr(config_object, "LOG_LEVEL", "INFO"))

    app = Flask(__name__)
    app.config.from_object(config_object)

    # ---- extensions ----
    db.init_app(app)
    from models.user import User  # noqa: F401
    from models.student_profile import StudentProfile  # noqa: F401
    from models.university import University  # noqa: F401
    from models.program import Program  # noqa: F401
    from models.application import Application  # noqa: F401
    from models.ai_consultation import AIConsultation  # noqa: F401

    JWTManager(app)
    Migrate(app, db)
    app.extensions["draft_store"] = DraftStore(app.config["MAX_UPLOAD_BYTES"])

    # ---- CORS ----
    CORS(
        app,
        resources={
            r"/api/*": {
                "origins": app.config["CORS_ORIGINS"],
                "supports_credentials": True,
                "allow_headers": ["Content-Type", "Authorization"],
                "methods": ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
            }
        },
    )

    # ---- blueprints ----
    app.register_blueprint(auth_bp)
    app.register_blueprint(bp_me)
    app.register_blueprint(meta_bp)
    app.register_blueprint(draft_bp)
    app.register_blueprint(application_bp)
    app.register_blueprint(admin_application_bp)
    app.register_blueprint(admin_university_bp)
    app.register_blueprint(public_university_bp)
    app.register_blueprint(admin_manage_bp)
    app.register_blueprint(consultation_bp)
    app.register_blueprint(uploads_bp)

    # ---- errors ----
    @app.errorhandler(PortalError)
    def handle_portal_error(e: PortalError):
        if e.status >= 500:
            current_app.logger.error("%s: %s", type(e).__name__, e.message)
        return jsonify(e.to_dict()), e.status

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify({"msg": e.description}), e.code
        db.session.rollback()
        current_app.logger.exception("unhandled error")
        return jsonify({"msg": "Internal Server Error"}), 500

    # ---- health ----
    @app.get("/")
    def health():
        return jsonify({"status": "ok"})

    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
