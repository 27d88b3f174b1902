# config.py
import os

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.abspath(os.path.dirname(__file__))
INSTANCE_DIR = os.path.join(BASE_DIR, "instance")
os.makedirs(INSTANCE_DIR, exist_ok=True)

DB_PATH = os.path.join(INSTANCE_DIR, "edupath.sqlite3")


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    # absolute path + 3 slashes
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "SQLALCHEMY_DATABASE_URI",
        f"sqlite:///{DB_PATH.replace(os.sep, '/')}"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev-jwt")
    JSON_AS_ASCII = False

    # ---- uploads ----
    UPLOAD_DIR = os.getenv("UPLOAD_DIR", os.path.join(INSTANCE_DIR, "uploads"))
    PUBLIC_UPLOAD_BASE = os.getenv("PUBLIC_UPLOAD_BASE", "/uploads")
    MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))
    # a single request may carry many attachments at once
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", str(60 * 1024 * 1024)))

    # ---- AI gateway (OpenAI compatible chat completions) ----
    AI_GATEWAY_URL = os.getenv("AI_GATEWAY_URL", "https://ai.gateway.lovable.dev/v1/chat/completions")
    AI_API_KEY = os.getenv("AI_API_KEY")
    AI_MODEL = os.getenv("AI_MODEL", "google/gemini-2.5-flash")
    AI_TIMEOUT = int(os.getenv("AI_TIMEOUT", "60"))
    AI_CONNECT_TIMEOUT = int(os.getenv("AI_CONNECT_TIMEOUT", "8"))

    CORS_ORIGINS = [
        o.strip() for o in os.getenv(
            "CORS_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173,http://localhost:8080",
        ).split(",") if o.strip()
    ]
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length"
    AI_API_KEY = "test-key"
