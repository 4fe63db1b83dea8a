"""Base MCP server implementation.

This module provides the MCP server that registers the Freedcamp task tools
and serves them over stdio.
"""

import json
import logging
from collections.abc import Callable, Sequence
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import EmbeddedResource, ImageContent, TextContent, Tool

from .. import __version__
from ..core.client import FreedcampClient
from ..core.config import Settings
from ..core.executor import BatchExecutor
from ..tools import TaskTools, build_tool_schemas

logger = logging.getLogger(__name__)

SERVER_NAME = "freedcamp-mcp"


class MCPServerBase:
    """
    Base class for MCP servers with tool registration.

    This provides a clean interface for building MCP servers with automatic
    tool registration and error handling.
    """

    def __init__(
        self,
        name: str,
        version: str = __version__,
        client: FreedcampClient | None = None,
    ):
        """
        Initialize MCP server.

        Args:
            name: Server name
            version: Server version reported during initialization
            client: Freedcamp client the tools use, closed by aclose()
        """
        self.app = Server(name, version=version)
        self.tools: dict[str, dict[str, Any]] = {}
        self._tool_handlers: dict[str, Callable] = {}
        self._client = client
        self._handlers_ready = False

    def register_tool(
        self,
        name: str,
        description: str,
        input_schema: dict[str, Any],
        handler: Callable,
    ):
        """
        Register a tool with the server.

        Args:
            name: Tool name
            description: Tool description
            input_schema: JSON schema for tool inputs
            handler: Async function to handle tool calls
        """
        if name in self.tools:
            logger.warning(f"Tool {name} already registered, overwriting")
        self.tools[name] = {
            "name": name,
            "description": description,
            "input_schema": input_schema,
        }
        self._tool_handlers[name] = handler
        logger.info(f"Registered tool: {name}")

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> dict[str, Any]:
        """Run a registered tool and return its result payload."""
        if name not in self._tool_handlers:
            raise ValueError(f"Unknown tool: {name}")
        handler = self._tool_handlers[name]
        return await handler(**(arguments or {}))

    def setup_handlers(self) -> None:
        """Set up MCP handlers for tool listing and calling."""
        if self._handlers_ready:
            return

        @self.app.list_tools()
        async def list_tools() -> list[Tool]:
            """List available MCP tools."""
            logger.info("Listing available tools")
            return [
                Tool(
                    name=tool_info["name"],
                    description=tool_info["description"],
                    inputSchema=tool_info["input_schema"],
                )
                for tool_info in self.tools.values()
            ]

        @self.app.call_tool()
        async def call_tool(
            name: str, arguments: Any
        ) -> Sequence[TextContent | ImageContent | EmbeddedResource]:
            """Execute a tool with the given arguments."""
            logger.info(f"Calling tool: {name} with arguments: {arguments}")

            try:
                result = await self.call_tool(name, arguments)

                # Return as TextContent with JSON
                return [
                    TextContent(
                        type="text",
                        text=json.dumps(result, indent=2, default=str),
                    )
                ]

            except ValueError as e:
                logger.error(f"Validation error in {name}: {e}")
                return [
                    TextContent(
                        type="text",
                        text=json.dumps(
                            {
                                "error": "validation_error",
                                "message": str(e),
                                "tool": name,
                            }
                        ),
                    )
                ]

            except Exception as e:
                logger.exception(f"Error executing tool {name}: {e}")
                return [
                    TextContent(
                        type="text",
                        text=json.dumps(
                            {
                                "error": "execution_error",
                                "message": str(e),
                                "tool": name,
                            }
                        ),
                    )
                ]

        self._handlers_ready = True

    async def run(self) -> None:
        """Run the MCP server."""
        logger.info(f"Starting MCP Server: {self.app.name}")

        # Run the server using stdio transport
        async with stdio_server() as (read_stream, write_stream):
            logger.info("MCP server running on stdio")
            await self.app.run(
                read_stream,
                write_stream,
                self.app.create_initialization_options(),
            )

    async def aclose(self) -> None:
        """Release the Freedcamp HTTP client."""
        if self._client is not None:
            await self._client.close()


def setup_task_tools(server: MCPServerBase, task_tools: TaskTools) -> None:
    """Register every Freedcamp task tool on ``server``."""
    for schema in build_tool_schemas(task_tools):
        server.register_tool(
            name=schema["name"],
            description=schema["description"],
            input_schema=schema["input_schema"],
            handler=schema["handler"],
        )


def create_mcp_server(
    settings: Settings,
    client: FreedcampClient | None = None,
    name: str = SERVER_NAME,
) -> MCPServerBase:
    """
    Create an MCP server serving the Freedcamp task tools.

    Everything the tools need comes from ``settings``; nothing is read from
    the environment here.

    Args:
        settings: Validated settings (credential, project id, API URL, timeout)
        client: Optional pre-built Freedcamp client (used to stub Freedcamp in tests)
        name: Server name

    Returns:
        MCPServerBase with handlers set up

    Raises:
        MissingConfigurationError: If the credential set or project id is incomplete

    Example:
        ```python
        settings = Settings()
        server = create_mcp_server(settings)
        await server.run()
        ```
    """
    credential = settings.credential()

    if client is None:
        client = FreedcampClient(
            base_url=settings.freedcamp_api_url,
            timeout=settings.freedcamp_timeout,
        )

    server = MCPServerBase(name, client=client)
    executor = BatchExecutor(client, settings.freedcamp_project_id)
    setup_task_tools(server, TaskTools(credential, executor))
    server.setup_handlers()
    return server
