import os


def get_settings_module() -> str:
    """Settings module name selected by APP_ENV (development by default)."""
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "production"

    if env in {"test", "testing"}:
        return "testing"

    return "development"
