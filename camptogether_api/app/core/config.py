"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from environment
variables once, at import time.  Defaults are provided for all fields so
the API can start against the Firestore emulator without any setup.  In a
production deployment override these via environment variables (for
example in the Cloud Run service definition).
"""

import os
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional


DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173,"
    "http://localhost:3000,"
    "https://camptogether.gooddaybnb.com,"
    "https://camptogether.web.app,"
    "https://camptogether.firebaseapp.com"
)

GOOGLE_SECURETOKEN_JWKS_URL = (
    "https://www.googleapis.com/service_accounts/v1/jwk/securetoken@system.gserviceaccount.com"
)


def _split_csv(raw: str) -> List[str]:
    return [entry.strip() for entry in raw.split(",") if entry.strip()]


def parse_admin_emails(raw: str) -> FrozenSet[str]:
    """Normalise a comma separated list of e-mails into a lower-cased set."""
    return frozenset(entry.lower() for entry in _split_csv(raw))


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "CampTogether API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # "json" for Cloud Logging, "text" for local development.
    log_format: str = os.getenv("LOG_FORMAT", "json")
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8080"))

    # Per-client request budget in limits notation, e.g. "100/minute".
    rate_limit: str = os.getenv("RATE_LIMIT", "100/minute")
    rate_limit_enabled: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() in {"1", "true", "yes"}

    # Firebase / Firestore.  The project id doubles as the expected
    # audience of Firebase ID tokens.
    firebase_project_id: str = (
        os.getenv("FIREBASE_PROJECT_ID") or os.getenv("GCP_PROJECT_ID") or "camptogether"
    )
    firestore_database: Optional[str] = os.getenv("FIRESTORE_DATABASE") or None
    firestore_emulator_host: Optional[str] = os.getenv("FIRESTORE_EMULATOR_HOST") or None
    jwks_url: str = os.getenv("JWKS_URL", GOOGLE_SECURETOKEN_JWKS_URL)

    # Comma separated list of e-mails granted the admin role.  Parsed once;
    # an empty list means nobody is an admin.
    admin_emails: FrozenSet[str] = field(
        default_factory=lambda: parse_admin_emails(os.getenv("ADMIN_EMAILS", ""))
    )

    cors_origins: List[str] = field(
        default_factory=lambda: _split_csv(os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS))
    )


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must be
# set before importing this module.
settings = Settings()
