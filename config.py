# config.py
import os

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    # Document store
    MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "project_review")
    MONGO_CLIENT = None  # pre-built client, used instead of MONGO_URI when set
    INIT_DB_ON_STARTUP = _env_flag("INIT_DB_ON_STARTUP", True)

    # Uploads are served back under /public/<name>
    UPLOAD_DIR = os.getenv("UPLOAD_DIR", os.path.join(os.getcwd(), "public"))
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_UPLOAD_MB", "20")) * 1024 * 1024

    MAX_REVIEWS = int(os.getenv("MAX_REVIEWS", "3"))

    PORT = int(os.getenv("PORT", "3001"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
