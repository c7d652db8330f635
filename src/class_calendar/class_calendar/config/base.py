import os


def _flag(name: str, default: str) -> bool:
    return bool(int(os.getenv(name, default)))


def db_config_from_env(default_password: str = "") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", "class_calendar"),
    }


FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

# HTTP email API; leave EMAIL_API_URL empty to log emails instead (development only)
EMAIL_API_URL = os.getenv("EMAIL_API_URL", "")
EMAIL_API_KEY = os.getenv("EMAIL_API_KEY", "")
EMAIL_FROM = os.getenv("EMAIL_FROM", "Class Calendar <no-reply@class-calendar.local>")

SESSION_TOKEN_DAYS = int(os.getenv("SESSION_TOKEN_DAYS", "30"))

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "")
ADMIN_NAME = os.getenv("ADMIN_NAME", "Administrator")
