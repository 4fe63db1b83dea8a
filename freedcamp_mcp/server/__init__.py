"""MCP server and transports."""

from .http import create_http_app, run_http_server
from .server import MCPServerBase, create_mcp_server, setup_task_tools

__all__ = [
    "MCPServerBase",
    "create_http_app",
    "create_mcp_server",
    "run_http_server",
    "setup_task_tools",
]
