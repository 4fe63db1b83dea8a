"""Command-line entry point for the Freedcamp MCP server.

Usage:
    uv run python -m freedcamp_mcp                      # stdio (default)
    uv run python -m freedcamp_mcp --transport http     # stateless streamable HTTP
    uv run python -m freedcamp_mcp --transport http --port 3001

Requires FREEDCAMP_API_KEY, FREEDCAMP_API_SECRET and FREEDCAMP_PROJECT_ID in the
environment or a .env file.
"""

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv
from pydantic import ValidationError

from .core.config import LOG_LEVELS, Settings
from .server import create_mcp_server, run_http_server
from .utils.errors import ConfigurationError
from .utils.logging_config import setup_logging

logger = logging.getLogger("freedcamp_mcp")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="freedcamp-mcp",
        description="Serve Freedcamp task management tools over MCP.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    freedcamp-mcp                          # stdio transport for local MCP clients
    freedcamp-mcp --transport http         # HTTP on MCP_SERVER_PORT / PORT (default 3000)
""",
    )
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport to serve MCP over (default: stdio)",
    )
    parser.add_argument("--host", help="HTTP host (overrides MCP_SERVER_HOST)")
    parser.add_argument("--port", type=int, help="HTTP port (overrides MCP_SERVER_PORT / PORT)")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Log level (overrides LOG_LEVEL)",
    )
    return parser.parse_args(argv)


def log_configuration(settings: Settings) -> None:
    logger.info("Environment variables loaded:")
    logger.info(f"  FREEDCAMP_API_KEY: {'***' if settings.freedcamp_api_key else 'NOT SET'}")
    logger.info(f"  FREEDCAMP_API_SECRET: {'***' if settings.freedcamp_api_secret else 'NOT SET'}")
    logger.info(f"  FREEDCAMP_PROJECT_ID: {settings.freedcamp_project_id or 'NOT SET'}")
    logger.info(f"  FREEDCAMP_API_URL: {settings.freedcamp_api_url}")


async def run_stdio(settings: Settings) -> None:
    server = create_mcp_server(settings)
    logger.info(f"Registered tools: {list(server.tools.keys())}")
    try:
        await server.run()
    finally:
        await server.aclose()


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, validate configuration and run the chosen transport."""
    args = parse_args(argv)
    load_dotenv()

    # LOG_LEVEL is not validated until Settings loads, so start from a known level
    setup_logging("freedcamp_mcp", level=args.log_level or "INFO")

    try:
        settings = Settings()
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    setup_logging(
        "freedcamp_mcp",
        level=args.log_level or settings.log_level,
        log_file=settings.get_log_file(f"freedcamp_mcp_{args.transport}"),
    )

    try:
        settings.require_credentials()
    except ConfigurationError as e:
        logger.error(str(e))
        logger.error("Please ensure these environment variables are set:")
        logger.error("  FREEDCAMP_API_KEY - Your Freedcamp API key")
        logger.error("  FREEDCAMP_API_SECRET - Your Freedcamp API secret")
        logger.error("  FREEDCAMP_PROJECT_ID - Your Freedcamp project ID")
        return 1

    log_configuration(settings)

    try:
        if args.transport == "http":
            run_http_server(settings, host=args.host, port=args.port)
        else:
            logger.info("Initializing Freedcamp MCP server (stdio)...")
            asyncio.run(run_stdio(settings))
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.exception(f"Server error: {e}")
        raise

    return 0


if __name__ == "__main__":
    sys.exit(main())
