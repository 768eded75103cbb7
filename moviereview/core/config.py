# moviereview/core/config.py
from __future__ import annotations

"""
# MovieReview · Centralized Configuration (Pydantic v2)

Single `settings` object with strongly-typed, environment-driven config.

## Goals
- Safe defaults for local/dev (in-memory store); explicit where prod needs
  an identity provider and a managed document database.
- CSV → list helpers for CORS allow-lists.
- Optional Firestore/Firebase settings so imports never crash in dev.

## Usage
    from moviereview.core.config import settings
"""

import logging
from typing import List, Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

log = logging.getLogger(__name__)
load_dotenv()  # harmless in prod; convenient in dev

GOOGLE_SECURETOKEN_JWKS_URL = (
    "https://www.googleapis.com/service_accounts/v1/jwk/securetoken@system.gserviceaccount.com"
)


# ─────────────────────────────────────────────────────────────
# Small helpers
# ─────────────────────────────────────────────────────────────
def _split_csv(v: str | None) -> list[str]:
    """Split a comma-separated string into a trimmed list (empty-safe)."""
    if not v:
        return []
    return [s.strip() for s in str(v).split(",") if s and s.strip()]


# ─────────────────────────────────────────────────────────────
# Settings
# ─────────────────────────────────────────────────────────────
class Settings(BaseSettings):
    """
    Global application settings sourced from environment.

    Auth:
        - `AUTH_MODE=jwks` verifies RS256 ID tokens against a remote JWKS
          (Firebase conventions when `FIREBASE_PROJECT_ID` is set).
        - `AUTH_MODE=secret` verifies HS* tokens with `JWT_SECRET_KEY`.

    Storage:
        - `STORE_BACKEND=memory` keeps documents in-process (dev/tests).
        - `STORE_BACKEND=firestore` talks to Google Cloud Firestore.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # don't crash on unknown keys
    )

    # ── App meta ──────────────────────────────────────────────
    PROJECT_NAME: str = "MovieReview API"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"
    ENV: Literal["development", "staging", "production"] = "development"
    ENABLE_DOCS: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = Field(4000, ge=1, le=65535)

    # ── CORS ──────────────────────────────────────────────────
    # CSV of exact origins. Empty → any origin is reflected (credentials allowed).
    CORS_ALLOW_ORIGINS: Optional[str] = None

    # ── Auth / token verification ────────────────────────────
    AUTH_MODE: Literal["jwks", "secret"] = "jwks"
    JWT_SECRET_KEY: Optional[SecretStr] = None
    JWT_ALGORITHM: Literal["HS256", "HS384", "HS512"] = "HS256"
    JWKS_URL: str = GOOGLE_SECURETOKEN_JWKS_URL
    JWKS_CACHE_TTL_SECONDS: int = Field(3600, ge=0, le=24 * 60 * 60)
    JWKS_HTTP_TIMEOUT_SECONDS: float = Field(5.0, gt=0, le=60)
    FIREBASE_PROJECT_ID: Optional[str] = None
    TOKEN_ISSUER: Optional[str] = None
    TOKEN_AUDIENCE: Optional[str] = None

    # ── Document store ───────────────────────────────────────
    STORE_BACKEND: Literal["memory", "firestore"] = "memory"
    FIRESTORE_PROJECT_ID: Optional[str] = None
    FIRESTORE_CREDENTIALS_FILE: Optional[str] = None
    REVIEWS_COLLECTION: str = "reviews"
    LIST_ALL_LIMIT: int = Field(50, ge=1, le=1000)

    # ── Validators / normalizers ──────────────────────────────
    @field_validator("API_PREFIX", mode="before")
    @classmethod
    def _normalize_prefix(cls, v: str | None) -> str:
        s = (v or "").strip().rstrip("/")
        if s and not s.startswith("/"):
            s = "/" + s
        return s

    # ── Derived / convenience properties ─────────────────────
    @property
    def is_development(self) -> bool:
        return self.ENV.lower() == "development"

    @property
    def cors_origins_list(self) -> List[str]:
        """CORS allow-list; empty means every origin is reflected."""
        return _split_csv(self.CORS_ALLOW_ORIGINS)

    @property
    def token_issuer(self) -> Optional[str]:
        """Explicit `TOKEN_ISSUER`, else the Firebase issuer for the project."""
        if self.TOKEN_ISSUER:
            return self.TOKEN_ISSUER
        if self.FIREBASE_PROJECT_ID:
            return f"https://securetoken.google.com/{self.FIREBASE_PROJECT_ID}"
        return None

    @property
    def token_audience(self) -> Optional[str]:
        """Explicit `TOKEN_AUDIENCE`, else the Firebase project id."""
        return self.TOKEN_AUDIENCE or self.FIREBASE_PROJECT_ID or None

    @property
    def firestore_project(self) -> Optional[str]:
        return self.FIRESTORE_PROJECT_ID or self.FIREBASE_PROJECT_ID or None


# Singleton instance
settings = Settings()
