"""Utility modules for the Freedcamp MCP server."""

from .errors import (
    ConfigurationError,
    FreedcampMCPError,
    MissingConfigurationError,
    UpstreamError,
    UpstreamResponseError,
)
from .logging_config import setup_logging
from .tool_decorators import handle_tool_errors

__all__ = [
    "ConfigurationError",
    "FreedcampMCPError",
    "MissingConfigurationError",
    "UpstreamError",
    "UpstreamResponseError",
    "handle_tool_errors",
    "setup_logging",
]
