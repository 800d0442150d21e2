import os
from pathlib import Path

import dj_database_url
from dotenv import load_dotenv

from .logging_config import get_logging_config

BASE_DIR = Path(__file__).resolve().parent.parent
# Read .env next to manage.py (no-op when the file is absent)
load_dotenv(BASE_DIR / ".env")

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "dev-insecure-ledger-key")
DEBUG = os.getenv("DJANGO_DEBUG", "0") == "1"
ALLOWED_HOSTS = [
    h for h in os.getenv("DJANGO_ALLOWED_HOSTS", "localhost").split(",") if h
]

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "ledger_core.apps.LedgerCoreConfig",
]

MIDDLEWARE = []

# Postgres in deployment (DATABASE_URL), SQLite file otherwise
DATABASES = {
    "default": dj_database_url.config(
        env="DATABASE_URL",
        default=f"sqlite:///{BASE_DIR / 'db.sqlite3'}",
        conn_max_age=600,
    )
}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ---------- Celery ----------
CELERY_BROKER_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", None)
CELERY_ACCEPT_CONTENT = ["json"]
CELERY_TASK_SERIALIZER = "json"
CELERY_RESULT_SERIALIZER = "json"
CELERY_TIMEZONE = TIME_ZONE
CELERY_TASK_ALWAYS_EAGER = os.getenv("CELERY_TASK_ALWAYS_EAGER", "0") == "1"
CELERY_TASK_ACKS_LATE = True

# ---------- Ledger ----------
LEDGER = {
    # Create missing system accounts on first use
    "AUTO_CREATE_ACCOUNTS": os.getenv("LEDGER_AUTO_CREATE_ACCOUNTS", "1") == "1",
    # movement type -> contra account code
    "STOCK_MOVEMENT_CONTRA_ACCOUNTS": {
        "receipt": "2150",
        "return": "2150",
        "issue": "5000",
        "adjustment": "6100",
        "scrap": "6100",
        "cycle_count": "6100",
        "transfer": "1410",
    },
    # movement types that never touch the ledger
    "STOCK_MOVEMENT_EXCLUDED_TYPES": ["reserve", "unreserve"],
    "JOURNAL_TASK_MAX_RETRIES": 3,
    "JOURNAL_TASK_RETRY_DELAY": 10,  # seconds
}

LOGGING = get_logging_config(DEBUG)
