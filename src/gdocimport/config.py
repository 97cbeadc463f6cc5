"""Importer configuration using pydantic-settings.

Every deployment-specific identifier (source document, repository URL and
credentials, parent locations) comes from environment variables prefixed
with ``GDOC_IMPORT_`` or from a ``.env`` file. None of them has a default.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gdocimport.errors import ConfigurationError


class Settings(BaseSettings):
    """Importer settings loaded from environment variables.

    Required for a real import:
    - GDOC_IMPORT_REPOSITORY_URL, _USERNAME, _PASSWORD: eZ Platform REST access
    - GDOC_IMPORT_DOCUMENT_PARENT_LOCATION: location path for documents
    - GDOC_IMPORT_IMAGE_PARENT_LOCATION: location path for images
    """

    model_config = SettingsConfigDict(
        env_prefix="GDOC_IMPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Source
    document_id: str | None = None
    google_access_token: str | None = None
    google_credentials_file: Path | None = None

    # Target repository
    repository_url: str | None = None
    repository_username: str | None = None
    repository_password: str | None = None
    language_code: str = "eng-GB"

    # Content model
    document_content_type: str = "google_docs_document"
    image_content_type: str = "image"
    document_parent_location: str | None = None
    image_parent_location: str | None = None

    # Runtime
    http_timeout: float = 60.0
    log_level: str = "INFO"
    json_logs: bool = False

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one loguru knows."""
        level = v.upper()
        allowed = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
        if level not in allowed:
            raise ValueError(f"log_level must be one of: {sorted(allowed)}")
        return level

    @field_validator("http_timeout")
    @classmethod
    def validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout must be positive")
        return v

    @field_validator("document_parent_location", "image_parent_location")
    @classmethod
    def normalize_location(cls, v: str | None) -> str | None:
        """Strip surrounding slashes from a location path such as ``/1/2/``."""
        if v is None:
            return None
        return v.strip().strip("/") or None

    def missing(self, *, dry_run: bool = False) -> list[str]:
        """Names of unset settings required for an import run.

        A dry run writes to memory only and needs no repository settings.
        """
        if dry_run:
            return []
        required = [
            "repository_url",
            "repository_username",
            "repository_password",
            "document_parent_location",
            "image_parent_location",
        ]
        return [
            "GDOC_IMPORT_" + name.upper()
            for name in required
            if not getattr(self, name)
        ]

    def require(self, *, dry_run: bool = False) -> None:
        """Raise ConfigurationError listing every missing setting."""
        missing = self.missing(dry_run=dry_run)
        if missing:
            raise ConfigurationError(
                "Configuration errors:\n  - "
                + "\n  - ".join(f"{name} must be set" for name in missing)
            )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
