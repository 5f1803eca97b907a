"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Expose the operational secrets as an immutable snapshot

Collaborators:
  - api/main.py: reads settings for CORS, pool and startup validation
  - container.py: builds OperationalSecrets and picks repository adapters
  - interfaces/api/http: reads upload limits and pagination caps

Constraints:
  - Lives in API/infrastructure layer, NOT in domain/application
  - No business logic, pure configuration

Notes:
  - Uses pydantic-settings for env parsing and validation
  - Singleton via lru_cache for performance
  - Use cases never read this module: they receive OperationalSecrets
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_TEST_ENVS = {"test", "testing", "ci"}
_INSECURE_SECRETS = {"changeme", "change-me", "password", "secret", "123456"}


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        database_url: PostgreSQL connection string (required outside test env)
        app_env: Application environment (development/production/test)
        host / port: bind address for `python -m obras`
        allowed_origins: Comma-separated CORS origins
        api_base_url: Public base URL exposed through /api/config
        super_admin_token / admin_token / user_token: role registration tokens
        confirm_case_token: secret that gates delivery confirmation
        delete_case_token: secret that gates case deletion
        upload_dir: Directory where PDF attachments are stored
        max_upload_bytes: Maximum attachment size (default: 2 MiB)
        delete_attachment_on_case_delete: Remove the PDF when its case is deleted
        max_body_bytes: Max request body size (default: 5 MiB)
        cases_page_max_limit: Upper bound for ?limit= on GET /casos
    """

    database_url: str = ""

    # Environment
    app_env: str = "development"
    host: str = "0.0.0.0"
    port: int = 3000

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # CORS configuration
    allowed_origins: str = "http://localhost:3000"
    cors_allow_credentials: bool = False

    # Frontend bootstrap
    api_base_url: str = "http://localhost:3000"

    # Operational secrets
    super_admin_token: str = ""
    admin_token: str = ""
    user_token: str = ""
    confirm_case_token: str = ""
    delete_case_token: str = ""

    # Attachments
    upload_dir: str = "uploads/pdfs"
    max_upload_bytes: int = 2 * 1024 * 1024  # 2 MiB
    delete_attachment_on_case_delete: bool = True

    # Security - Hardening
    max_body_bytes: int = 5 * 1024 * 1024  # 5 MiB

    # Listing
    cases_page_max_limit: int = 10000

    # Database - Connection Pool
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    db_statement_timeout_ms: int = 30000  # 30 seconds

    # Concurrency guard for status transitions
    status_update_max_attempts: int = 3

    @field_validator("max_upload_bytes", "max_body_bytes")
    @classmethod
    def limits_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("byte limits must be greater than 0")
        return v

    @field_validator("port")
    @classmethod
    def port_must_be_valid(cls, v: int) -> int:
        if not 0 < v < 65536:
            raise ValueError("port must be between 1 and 65535")
        return v

    @field_validator("status_update_max_attempts", "cases_page_max_limit")
    @classmethod
    def at_least_one(cls, v: int) -> int:
        if v < 1:
            raise ValueError("value must be >= 1")
        return v

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    @model_validator(mode="after")
    def validate_database_requirements(self):
        if self.is_test():
            return self
        if not self.database_url.strip():
            raise ValueError("DATABASE_URL is required unless APP_ENV=test")
        return self

    @model_validator(mode="after")
    def validate_security_requirements(self):
        if not self.is_production():
            return self

        for name in (
            "super_admin_token",
            "admin_token",
            "user_token",
            "confirm_case_token",
            "delete_case_token",
        ):
            value = (getattr(self, name) or "").strip()
            if not value or value.lower() in _INSECURE_SECRETS:
                raise ValueError(
                    f"{name.upper()} must be set to a non-default value in production"
                )
        return self

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    def is_test(self) -> bool:
        return self.app_env.strip().lower() in _TEST_ENVS

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@dataclass(frozen=True, slots=True)
class OperationalSecrets:
    """
    Snapshot inmutable de los secretos operativos.

    Se construye una vez (container) y se inyecta en los casos de uso que
    los necesitan; ningún caso de uso lee variables de entorno.
    """

    super_admin_token: str = ""
    admin_token: str = ""
    user_token: str = ""
    confirm_case_token: str = ""
    delete_case_token: str = ""

    @classmethod
    def from_settings(cls, settings: Settings) -> "OperationalSecrets":
        return cls(
            super_admin_token=settings.super_admin_token,
            admin_token=settings.admin_token,
            user_token=settings.user_token,
            confirm_case_token=settings.confirm_case_token,
            delete_case_token=settings.delete_case_token,
        )

    def role_tokens(self) -> dict[str, str]:
        """Tokens de registro por rol, con las claves que consume el frontend."""
        return {
            "SUPER_ADMIN_TOKEN": self.super_admin_token,
            "ADMIN_TOKEN": self.admin_token,
            "USER_TOKEN": self.user_token,
        }


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings singleton (cached after first call)
    """
    return Settings()
