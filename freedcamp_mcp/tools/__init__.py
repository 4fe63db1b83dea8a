"""MCP tools exposed by the Freedcamp server.

The task module exposes ``build_tool_schemas``, which returns dicts with
``name``, ``description``, ``input_schema`` and ``handler`` keys so server code
can register every tool in one loop.
"""

from .tasks import TaskTools, build_tool_schemas

__all__ = ["TaskTools", "build_tool_schemas"]
