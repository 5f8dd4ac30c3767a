from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

log = logging.getLogger("kitchen_pal.config")

_DEV_JWT_SECRET = "kitchen-pal-dev-secret"


def _sqlite_path(database_url: str) -> Path:
    """Plocka ut filvägen ur en sqlite:///-URL."""
    prefix = "sqlite:///"
    if not database_url.startswith(prefix):
        raise ValueError(f"Unsupported DATABASE_URL (only sqlite:/// is supported): {database_url}")
    return Path(database_url[len(prefix):])


class Settings:
    """Grundläggande inställningar för appen, lästa från miljön vid start."""

    def __init__(self) -> None:
        self.base_dir = Path(__file__).resolve().parent.parent
        self.data_dir = Path(os.getenv("DATA_DIR", str(self.base_dir / "data")))
        self.database_url = os.getenv("DATABASE_URL", f"sqlite:///{self.data_dir / 'app.db'}")
        self.database_path = _sqlite_path(self.database_url)
        self.debug = os.getenv("DEBUG", "false").lower() == "true"
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        self.jwt_secret = os.getenv("JWT_SECRET") or _DEV_JWT_SECRET
        self.jwt_algorithm = os.getenv("JWT_ALGORITHM", "HS256")
        self.jwt_expires_hours = int(os.getenv("JWT_EXPIRES_HOURS", "168"))

        self.frontend_url = os.getenv("FRONTEND_URL", "http://localhost:5173")
        # Kommaseparerad lista; rapportvyerna under /api/admin kräver en av dessa
        self.admin_emails = {
            email.strip().lower() for email in os.getenv("ADMIN_EMAILS", "").split(",") if email.strip()
        }

        self.recipe_fetch_timeout = float(os.getenv("RECIPE_FETCH_TIMEOUT", "20"))
        self.recipe_fetch_max_redirects = int(os.getenv("RECIPE_FETCH_MAX_REDIRECTS", "5"))
        self.recipe_fetch_max_bytes = int(os.getenv("RECIPE_FETCH_MAX_BYTES", str(5 * 1024 * 1024)))

        self.low_stock_default_threshold = float(os.getenv("LOW_STOCK_DEFAULT_THRESHOLD", "5"))
        self.expiring_soon_days = int(os.getenv("EXPIRING_SOON_DAYS", "7"))

    @property
    def uses_dev_secret(self) -> bool:
        return self.jwt_secret == _DEV_JWT_SECRET


def configure_logging(level: str | None = None) -> None:
    """Global loggning; modul-loggers ärver denna konfiguration."""
    logging.basicConfig(
        level=level or settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    if settings.uses_dev_secret:
        log.warning("JWT_SECRET is not set, falling back to the development secret")


settings = Settings()
