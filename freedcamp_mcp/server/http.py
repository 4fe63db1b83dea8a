"""Streamable HTTP transport for the Freedcamp MCP server.

Runs the MCP server statelessly: every POST to /mcp is handled by a fresh
transport with JSON responses, so concurrent clients never share session
state. There are no server-sent notifications and no sessions to terminate,
so GET and DELETE on /mcp are rejected.

Usage:
    uv run python -m freedcamp_mcp --transport http

Endpoints:
    GET  /health  Liveness check
    POST /mcp     MCP JSON-RPC requests
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.types import Receive, Scope, Send

from .. import __version__
from ..core.client import FreedcampClient
from ..core.config import Settings
from .server import MCPServerBase, create_mcp_server

logger = logging.getLogger(__name__)

MCP_PATH = "/mcp"


def _method_not_allowed() -> JSONResponse:
    return JSONResponse(
        status_code=405,
        content={
            "jsonrpc": "2.0",
            "error": {"code": -32000, "message": "Method not allowed."},
            "id": None,
        },
    )


class StreamableHTTPEndpoint:
    """ASGI endpoint handing /mcp requests to the session manager."""

    def __init__(self, session_manager: StreamableHTTPSessionManager):
        self.session_manager = session_manager

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.session_manager.handle_request(scope, receive, send)


def create_http_app(
    settings: Settings,
    mcp_server: MCPServerBase | None = None,
    client: FreedcampClient | None = None,
) -> FastAPI:
    """Create the FastAPI app serving MCP over streamable HTTP.

    Args:
        settings: Validated settings
        mcp_server: Optional pre-built server (built from ``settings`` otherwise)
        client: Optional Freedcamp client passed to create_mcp_server()

    Raises:
        MissingConfigurationError: If the credential set or project id is incomplete
    """
    server = mcp_server or create_mcp_server(settings, client=client)
    session_manager = StreamableHTTPSessionManager(
        app=server.app,
        json_response=True,
        stateless=True,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Run the session manager for the app's lifetime, then close the Freedcamp client."""
        async with session_manager.run():
            logger.info("Freedcamp MCP stateless HTTP server started")
            try:
                yield
            finally:
                await server.aclose()
                logger.info("Freedcamp MCP HTTP server stopped")

    app = FastAPI(
        title="Freedcamp MCP",
        version=__version__,
        lifespan=lifespan,
    )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {
            "status": "healthy",
            "timestamp": datetime.now(UTC).isoformat(),
            "version": __version__,
            "transport": "http-stateless",
        }

    @app.get(MCP_PATH)
    async def mcp_get() -> JSONResponse:
        logger.info("Received GET MCP request")
        return _method_not_allowed()

    @app.delete(MCP_PATH)
    async def mcp_delete() -> JSONResponse:
        logger.info("Received DELETE MCP request")
        return _method_not_allowed()

    app.add_route(MCP_PATH, StreamableHTTPEndpoint(session_manager), methods=["POST"])

    return app


def run_http_server(settings: Settings, host: str | None = None, port: int | None = None) -> None:
    """Serve the HTTP app with uvicorn until interrupted."""
    host = host or settings.mcp_server_host
    port = port or settings.mcp_server_port
    app = create_http_app(settings)

    logger.info(f"Freedcamp MCP stateless HTTP server listening on port {port}")
    logger.info(f"Health check available at: http://{host}:{port}/health")
    logger.info(f"MCP endpoint available at: http://{host}:{port}{MCP_PATH}")

    uvicorn.run(app, host=host, port=port, log_config=None)
