"""Ophelia Market configuration via pydantic-settings."""

import json
import warnings
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

_INSECURE_DEFAULTS = {
    "secret_key": "insecure-dev-key-change-me",
    "hmac_key": "insecure-hmac-key-change-me",
    "api_key": "insecure-admin-key-change-me",
}


class OpheliaSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="OPHELIA_")

    environment: str = "development"
    secret_key: str = "insecure-dev-key-change-me"
    log_level: str = "INFO"

    # Certificate signing keyring — JSON dict mapping version (int) to key string.
    # e.g. '{"0": "old-key", "1": "new-key"}'
    # When set, hmac_key is ignored.  When empty, hmac_key is used as version 0.
    hmac_key: str = "insecure-hmac-key-change-me"
    hmac_keys: str = ""

    # Database
    db_url: str = "sqlite+aiosqlite:///./data/ophelia.db"

    # API
    api_title: str = "Ophelia Market"
    api_version: str = "0.1.0"
    api_key: str = "insecure-admin-key-change-me"
    host: str = "0.0.0.0"
    port: int = 8080
    api_prefix: str = ""
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:8080"]

    # Originality check
    similarity_threshold: float = 0.8
    similarity_scan_limit: int = 500

    # Marketplace
    marketplace_page_size: int = 12
    max_page_size: int = 100

    # Generative content API
    content_api_key: str = ""
    content_api_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    content_model: str = "gemini-2.0-flash-exp"
    content_timeout: float = 60.0

    @property
    def hmac_keyring(self) -> dict[int, str]:
        """Return the signing keyring as {version_int: key_str}.

        If hmac_keys is set, parse it as JSON.
        Otherwise, fall back to scalar hmac_key as version 0.
        """
        if self.hmac_keys:
            try:
                raw = json.loads(self.hmac_keys)
            except (json.JSONDecodeError, TypeError) as exc:
                raise ValueError(
                    f"OPHELIA_HMAC_KEYS must be valid JSON (e.g. '{{\"0\": \"key\"}}'), got: {self.hmac_keys!r}"
                ) from exc
            return {int(k): v for k, v in raw.items()}
        return {0: self.hmac_key}

    @property
    def current_hmac_version(self) -> int:
        """Return the highest version number in the keyring."""
        return max(self.hmac_keyring.keys())

    @property
    def current_hmac_key(self) -> str:
        ring = self.hmac_keyring
        return ring[max(ring.keys())]

    def validate_for_production(self) -> None:
        """Raise if insecure defaults are used in non-development environments."""
        insecure_fields = [
            field
            for field, default in _INSECURE_DEFAULTS.items()
            if getattr(self, field) == default
        ]

        if self.environment != "development" and insecure_fields:
            env_vars = ", ".join(f"OPHELIA_{f.upper()}" for f in insecure_fields)
            raise RuntimeError(
                f"Insecure default values detected in '{self.environment}' environment. "
                f"Set these environment variables to secure values: {env_vars}. "
                "Generate secrets with: python -c \"import secrets; print(secrets.token_urlsafe(48))\""
            )

        if insecure_fields:
            warnings.warn(
                "Using insecure default keys; set OPHELIA_SECRET_KEY, OPHELIA_HMAC_KEY "
                "and OPHELIA_API_KEY for production",
                UserWarning,
                stacklevel=2,
            )


@lru_cache
def get_settings() -> OpheliaSettings:
    settings = OpheliaSettings()
    settings.validate_for_production()
    return settings
