"""Configuration management for the Freedcamp MCP server."""

from datetime import datetime
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..utils.errors import MissingConfigurationError
from .auth import Credential

DEFAULT_API_URL = "https://freedcamp.com/api/v1"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Field name -> environment variable that must be set before serving tools
REQUIRED_SETTINGS = {
    "freedcamp_api_key": "FREEDCAMP_API_KEY",
    "freedcamp_api_secret": "FREEDCAMP_API_SECRET",
    "freedcamp_project_id": "FREEDCAMP_PROJECT_ID",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Freedcamp API
    freedcamp_api_key: str | None = Field(default=None, description="Freedcamp public API key")
    freedcamp_api_secret: str | None = Field(
        default=None, description="Freedcamp API secret used to sign requests"
    )
    freedcamp_project_id: str | None = Field(
        default=None, description="Project that all task operations target"
    )
    freedcamp_api_url: str = Field(
        default=DEFAULT_API_URL, description="Base URL of the Freedcamp REST API"
    )
    freedcamp_timeout: float = Field(
        default=30.0, gt=0, description="Timeout in seconds for each Freedcamp request"
    )

    # MCP Server Configuration (HTTP transport)
    mcp_server_host: str = Field(default="0.0.0.0", description="HTTP server host")
    mcp_server_port: int = Field(
        default=3000,
        description="HTTP server port. Accepts MCP_SERVER_PORT or PORT.",
        validation_alias=AliasChoices("mcp_server_port", "port"),
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: Path | None = Field(
        default=None, description="Directory for log files. Unset logs to stderr only."
    )

    @field_validator("freedcamp_api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Validate that the API URL is http(s) and strip any trailing slash."""
        if not v.startswith(("https://", "http://")):
            raise ValueError("Freedcamp API URL must start with https:// or http://")
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate the log level name and normalize it to upper case."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {v!r}")
        return level

    def __init__(self, **kwargs):
        """Initialize settings and create the log directory if one is configured."""
        super().__init__(**kwargs)
        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)

    def missing_settings(self) -> list[str]:
        """Return the environment variable names of required settings that are unset."""
        return [env for name, env in REQUIRED_SETTINGS.items() if not getattr(self, name)]

    def require_credentials(self) -> None:
        """Fail fast when the credential set or project id is incomplete.

        Raises:
            MissingConfigurationError: naming every missing variable
        """
        missing = self.missing_settings()
        if missing:
            raise MissingConfigurationError(missing)

    def credential(self) -> Credential:
        """Build the configured credential. Call require_credentials() first."""
        self.require_credentials()
        return Credential(identifier=self.freedcamp_api_key, secret=self.freedcamp_api_secret)

    def get_log_file(self, component_name: str = "freedcamp_mcp") -> Path | None:
        """Get a log file path for a component, or None when file logging is off.

        Creates log files with the format: {component_name}_{date}.log
        e.g., freedcamp_mcp_2024-01-15.log
        """
        if self.log_dir is None:
            return None
        date_str = datetime.now().strftime("%Y-%m-%d")
        # Sanitize component name for filesystem
        safe_name = "".join(c if c.isalnum() or c in "_-" else "_" for c in component_name)
        return self.log_dir / f"{safe_name}_{date_str}.log"
