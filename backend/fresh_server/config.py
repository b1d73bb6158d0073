"""Application configuration via environment variables and .env file."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings

from fresh_server.errors import ConfigError

DEFAULT_DATA_FILE = "state.db"


class AppConfig(BaseSettings):
    """Global application settings loaded from env / .env."""

    # Server - the port has no default, startup fails without it.
    serve_host: str = "localhost"
    serve_port: int = Field(ge=1, le=65535)

    # Database file
    serve_data: str = DEFAULT_DATA_FILE

    # Logging profile: "production", "development", anything else is silent
    serve_log_env: str = "development"

    # Build tag shown in the banner and attached to log records
    serve_release: str = "dev"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def address(self) -> str:
        """Return ``host:port`` for display."""
        return f"{self.serve_host}:{self.serve_port}"

    @property
    def resolved_data_path(self) -> Path:
        """Return an absolute path for the database file.

        Relative paths resolve against the current working directory.
        """
        return Path(self.serve_data).expanduser().resolve()

    @property
    def database_url(self) -> str:
        """Return the async SQLAlchemy database URL."""
        return f"sqlite+aiosqlite:///{self.resolved_data_path}"


_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Return the cached application config, creating it on first call.

    Raises :class:`ConfigError` when a required setting is missing or invalid.
    """
    global _config
    if _config is None:
        try:
            _config = AppConfig()
        except PydanticValidationError as e:
            fields = ", ".join(
                "SERVE_" + str(err["loc"][-1]).removeprefix("serve_").upper()
                for err in e.errors()
                if err.get("loc")
            )
            raise ConfigError(f"invalid or missing settings: {fields}") from e
    return _config


def reset_config() -> None:
    """Reset the cached config so the next get_config() picks up new env vars."""
    global _config
    _config = None
