from pathlib import Path
import os

from dotenv import load_dotenv

# Load environment variables from the project root and the working directory (if present).
PROJECT_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(PROJECT_ROOT / ".env")
load_dotenv(Path.cwd() / ".env")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./taskboard.db")
STORAGE_KEY = os.getenv("TASKBOARD_STORAGE_KEY", "tasks")

# Apply the client form's past-due-date rule in the API validators too.
STRICT_DUE_DATES = _env_bool("TASKBOARD_STRICT_DUE_DATES", False)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("LOG_DIR") or None

API_URL = os.getenv("TASKBOARD_API_URL", "http://localhost:8000/api")

_cors_origins = os.getenv("CORS_ORIGINS", "http://localhost:3000")
CORS_ORIGINS = [origin.strip() for origin in _cors_origins.split(",") if origin.strip()]
