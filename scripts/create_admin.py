"""Create the administrator account, or promote an existing user.

Usage: python scripts/create_admin.py [email] [name]
(defaults come from ADMIN_EMAIL / ADMIN_NAME)
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from src.class_calendar.class_calendar.container import build_container
from src.class_calendar.class_calendar.core.exceptions import DomainError
from src.class_calendar.class_calendar.main import load_settings

logger = logging.getLogger("create_admin")


def main(argv: list[str]) -> int:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    settings = load_settings()

    email = argv[1] if len(argv) > 1 else getattr(settings, "ADMIN_EMAIL", "")
    name = argv[2] if len(argv) > 2 else getattr(settings, "ADMIN_NAME", "Administrator")

    container = build_container(db_config=dict(settings.DB_CONFIG), settings=settings)
    try:
        admin = container.auth_service.ensure_admin(email=email, name=name)
    except DomainError as exc:
        logger.error("could not create admin: %s", exc.message)
        return 1
    logger.info("admin ready: id=%s email=%s", admin.user_id, admin.email)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
