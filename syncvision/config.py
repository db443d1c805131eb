import os

from dotenv import load_dotenv

# Load .env from the working directory so local development MONGO_URI is picked up
load_dotenv()


def _origins(raw):
    raw = (raw or "*").strip()
    if raw == "*":
        return "*"
    return [o.strip() for o in raw.split(",") if o.strip()]


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    MONGO_URI = os.environ.get("MONGO_URI", "mongodb://localhost:27017/?directConnection=true")
    MONGO_DB_NAME = os.environ.get("MONGO_DB_NAME", "syncvision")
    MONGO_TIMEOUT_MS = int(os.environ.get("MONGO_TIMEOUT_MS", "2000"))

    HOST = os.environ.get("HOST", "0.0.0.0")
    PORT = int(os.environ.get("PORT", "5000"))

    CORS_ORIGINS = _origins(os.environ.get("CORS_ORIGINS"))
    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "threading")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    DEBUG = os.environ.get("FLASK_DEBUG", "0") == "1"
