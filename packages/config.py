from pathlib import Path
import os

from dotenv import load_dotenv

ROOT = Path(__file__).resolve().parents[1]

load_dotenv(ROOT / ".env")

RUN_MODE = os.getenv("RUN_MODE", "dev").lower()
API_HOST = os.getenv("FITNESS_API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("FITNESS_API_PORT", "8000"))
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "FITNESS_CORS_ORIGINS",
        "http://127.0.0.1:8788,http://localhost:8788",
    ).split(",")
    if origin.strip()
]

# Uploads larger than this are rejected before parsing.
MAX_UPLOAD_BYTES = int(os.getenv("FITNESS_MAX_UPLOAD_BYTES", str(20 * 1024 * 1024)))

# Aggregation tuning
TOP_ACTIVITY_TYPES = int(os.getenv("FITNESS_TOP_ACTIVITY_TYPES", "3"))
STEPS_WEEKLY_MAX_ROWS = int(os.getenv("FITNESS_STEPS_WEEKLY_MAX_ROWS", "53"))
INCLUDE_UNDATED = os.getenv("FITNESS_INCLUDE_UNDATED", "0") == "1"
