"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - KMS_KEY_RESOURCE is required; missing or blank is a fatal startup condition
    - Settings are frozen: built once at process entry, read-only afterwards
    - load_settings() never leaks pydantic's ValidationError; it raises ConfigurationError

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-required settings (PORT=8080 matches Cloud Run)
"""

from functools import lru_cache
from typing import Any

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from kacls.core.errors import ConfigurationError

EXAMPLE_KEY_RESOURCE = (
    "projects/<PRJ>/locations/<LOC>/keyRings/<KR>/cryptoKeys/<CK>"
)


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, frozen=True, extra="ignore",
    )

    # Key management
    kms_key_resource: str
    kms_timeout_seconds: float | None = None

    @field_validator("kms_key_resource")
    @classmethod
    def require_key_resource(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    # HTTP
    host: str = "0.0.0.0"  # nosec B104
    port: int = 8080
    max_body_bytes: int = 2 * 1024 * 1024
    cors_default_origin: str = "https://client-side-encryption.google.com"

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


def load_settings(**overrides: Any) -> Settings:
    """Build Settings, mapping validation failures to ConfigurationError."""
    try:
        return Settings(**overrides)
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        setting = ", ".join(f.upper() for f in fields) or "settings"
        raise ConfigurationError(
            setting,
            f"{setting} missing or invalid. e.g. KMS_KEY_RESOURCE={EXAMPLE_KEY_RESOURCE}",
        ) from e


@lru_cache
def get_settings() -> Settings:
    return load_settings()
