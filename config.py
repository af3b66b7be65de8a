"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── PostgreSQL ────────────────────────────────────────────
DB_HOST: str = os.getenv("DB_HOST", "localhost")
DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
DB_NAME: str = os.getenv("DB_NAME", "adb")
DB_USER: str = os.getenv("DB_USER", "adb_user")
DB_PASS: str = os.getenv("DB_PASS", "")

DATABASE_URL: str = os.getenv(
    "DATABASE_URL",
    f"postgresql://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)

DB_POOL_MIN: int = int(os.getenv("DB_POOL_MIN", "1"))
DB_POOL_MAX: int = int(os.getenv("DB_POOL_MAX", "5"))

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# ── Activist status thresholds ────────────────────────────
STATUS_NEW_WINDOW_DAYS: int = int(os.getenv("STATUS_NEW_WINDOW_DAYS", "90"))
STATUS_NEW_MAX_EVENTS: int = int(os.getenv("STATUS_NEW_MAX_EVENTS", "5"))
STATUS_LAPSED_AFTER_DAYS: int = int(os.getenv("STATUS_LAPSED_AFTER_DAYS", "60"))

# ── Output ────────────────────────────────────────────────
EVENT_DATE_FORMAT: str = "%Y-%m-%d"
