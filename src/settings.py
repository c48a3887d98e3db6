"""
settings.py - Runtime configuration

Centralized configuration read from environment variables. A local .env
file is loaded first (python-dotenv) so development setups don't need to
export anything.
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv

load_dotenv()

PROJECT_ROOT = Path(__file__).parent.parent

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

DEV_JWT_SECRET = "dev-jwt-secret-change-in-production"


def parse_place_ids(raw: str) -> Dict[str, str]:
    """
    Parse GOOGLE_PLACE_IDS.

    Format: "place_id=Property Name;other_place_id=Other Name".
    Entries without "=" are ignored.
    """
    places = {}
    for entry in raw.split(";"):
        if "=" not in entry:
            continue
        place_id, name = entry.split("=", 1)
        if place_id.strip() and name.strip():
            places[place_id.strip()] = name.strip()
    return places


@dataclass
class Settings:
    """All tunables for the service. Tests build this directly."""
    app_env: str = "development"
    data_dir: Path = PROJECT_ROOT / "data"

    # Providers
    hostaway_api_key: str = ""
    hostaway_account_id: str = ""
    hostaway_base_url: str = "https://api.hostaway.com/v1"
    google_places_api_key: str = ""
    google_places_base_url: str = "https://maps.googleapis.com/maps/api/place"
    google_place_ids: Dict[str, str] = field(default_factory=dict)
    provider_timeout_seconds: float = 10.0

    # Auth
    jwt_secret: str = DEV_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_expire_hours: int = 24
    default_manager_password: str = "admin123"

    # HTTP
    cors_origins: List[str] = field(default_factory=lambda: [
        "http://localhost:3000",
        "http://localhost:3001",
    ])

    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    def missing_production_secrets(self) -> List[str]:
        """Names of the variables a production deployment must set."""
        missing = []
        if self.jwt_secret == DEV_JWT_SECRET:
            missing.append("JWT_SECRET")
        if not self.hostaway_api_key:
            missing.append("HOSTAWAY_API_KEY")
        if not self.hostaway_account_id:
            missing.append("HOSTAWAY_ACCOUNT_ID")
        return missing


def load_settings(environ: Optional[Dict[str, str]] = None) -> Settings:
    """Build Settings from the environment (os.environ by default)."""
    env = os.environ if environ is None else environ
    defaults = Settings()

    cors = env.get("CORS_ORIGINS")
    return Settings(
        app_env=env.get("APP_ENV", defaults.app_env),
        data_dir=Path(env.get("DATA_DIR", str(defaults.data_dir))),
        hostaway_api_key=env.get("HOSTAWAY_API_KEY", ""),
        hostaway_account_id=env.get("HOSTAWAY_ACCOUNT_ID", ""),
        hostaway_base_url=env.get("HOSTAWAY_BASE_URL", defaults.hostaway_base_url),
        google_places_api_key=env.get("GOOGLE_PLACES_API_KEY", ""),
        google_places_base_url=env.get(
            "GOOGLE_PLACES_BASE_URL", defaults.google_places_base_url
        ),
        google_place_ids=parse_place_ids(env.get("GOOGLE_PLACE_IDS", "")),
        provider_timeout_seconds=float(
            env.get("PROVIDER_TIMEOUT_SECONDS", defaults.provider_timeout_seconds)
        ),
        jwt_secret=env.get("JWT_SECRET", defaults.jwt_secret),
        jwt_expire_hours=int(env.get("JWT_EXPIRE_HOURS", defaults.jwt_expire_hours)),
        default_manager_password=env.get(
            "DEFAULT_MANAGER_PASSWORD", defaults.default_manager_password
        ),
        cors_origins=(
            [o.strip() for o in cors.split(",") if o.strip()]
            if cors else defaults.cors_origins
        ),
        log_level=env.get("LOG_LEVEL", defaults.log_level),
    )


def setup_logging(log_level: str = "INFO") -> None:
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
