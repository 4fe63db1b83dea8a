"""Decorators for standardizing tool error handling."""

import functools
import logging
from collections.abc import Callable
from typing import Any, TypeVar

import httpx
import pydantic

from .errors import UpstreamError

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _format_validation_errors(error: pydantic.ValidationError) -> list[dict[str, str]]:
    """Flatten pydantic errors into ``{"field": "tasks.0.title", "message": ...}`` items."""
    return [
        {
            "field": ".".join(str(part) for part in item["loc"]),
            "message": item["msg"],
        }
        for item in error.errors()
    ]


def handle_tool_errors(func: F) -> F:
    """Standardize error handling for async tool functions.

    Catches common exceptions and returns consistent error format:
    {"status": "error", "message": "...", "error_type": "..."}

    Argument validation failures also carry a ``details`` list naming each
    offending field. On success, adds "status": "success" to the result if
    not already present.

    Example:
        @handle_tool_errors
        async def my_tool(tasks: list[dict]) -> dict[str, Any]:
            # If this raises, caller gets {"status": "error", "message": "...", ...}
            batch = AddTaskBatch.model_validate({"tasks": tasks})
            return {"results": await run(batch)}
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> dict[str, Any]:
        tool_name = func.__name__
        try:
            result = await func(*args, **kwargs)
            if isinstance(result, dict) and "status" not in result:
                result["status"] = "success"
            return result
        except pydantic.ValidationError as e:
            details = _format_validation_errors(e)
            logger.error(f"Tool {tool_name} rejected arguments: {details}")
            return {
                "status": "error",
                "message": f"Invalid arguments for {tool_name}",
                "error_type": "ValidationError",
                "details": details,
            }
        except httpx.RequestError as e:
            logger.error(f"Tool {tool_name} request failed: {e}")
            return {
                "status": "error",
                "message": f"Request failed: {e}",
                "error_type": "RequestError",
            }
        except UpstreamError as e:
            logger.error(f"Tool {tool_name} upstream error: {e}")
            return {
                "status": "error",
                "message": str(e),
                "error_type": type(e).__name__,
            }
        except ValueError as e:
            logger.error(f"Tool {tool_name} validation error: {e}")
            return {
                "status": "error",
                "message": str(e),
                "error_type": "ValidationError",
            }
        except Exception as e:
            logger.exception(f"Tool {tool_name} unexpected error: {e}")
            return {
                "status": "error",
                "message": f"Unexpected error: {e}",
                "error_type": type(e).__name__,
            }

    return wrapper  # type: ignore[return-value]
