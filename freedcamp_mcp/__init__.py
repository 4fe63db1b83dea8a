"""Freedcamp MCP - Freedcamp task management exposed as MCP tools."""

__version__ = "1.0.0"

from .core.auth import AuthMaterial, Credential, sign
from .core.client import FreedcampClient
from .core.config import Settings
from .core.executor import BatchExecutor
from .core.models import ListResult, OperationResult
from .server.server import MCPServerBase, create_mcp_server
from .utils.errors import ConfigurationError, FreedcampMCPError, MissingConfigurationError

__all__ = [
    "AuthMaterial",
    "BatchExecutor",
    "Credential",
    "FreedcampClient",
    "ListResult",
    "MCPServerBase",
    "OperationResult",
    "Settings",
    "create_mcp_server",
    "sign",
    # Errors
    "ConfigurationError",
    "FreedcampMCPError",
    "MissingConfigurationError",
]
