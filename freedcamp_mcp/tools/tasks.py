"""Freedcamp task tools.

Tools for creating, updating, deleting and listing tasks in the configured
Freedcamp project. The batch tools take a ``{"tasks": [...]}`` wrapper and
report one result per item; a batch with failed items still succeeds as an
invocation.
"""

import logging
from typing import Any

from ..core.auth import Credential
from ..core.executor import BatchExecutor
from ..core.models import AddTaskBatch, DeleteTaskBatch, OperationResult, UpdateTaskBatch
from ..utils.tool_decorators import handle_tool_errors

logger = logging.getLogger(__name__)


def _batch_response(action: str, results: list[OperationResult]) -> dict[str, Any]:
    succeeded = sum(1 for r in results if r.succeeded)
    return {
        "results": [r.to_dict() for r in results],
        "total": len(results),
        "succeeded": succeeded,
        "failed": len(results) - succeeded,
        "message": f"{action} {succeeded} of {len(results)} task(s)",
    }


class TaskTools:
    """Tool handlers bound to one credential set and one project."""

    def __init__(self, credential: Credential, executor: BatchExecutor):
        self.credential = credential
        self.executor = executor

    @handle_tool_errors
    async def add_task(self, tasks: Any = None, **extra: Any) -> dict[str, Any]:
        """
        Create tasks in the configured Freedcamp project.

        Args:
            tasks: List of {title, description?, due_date?, assigned_to_id?, priority?}

        Returns:
            Dictionary containing:
                - status: "success" or "error"
                - results: One {succeeded, message, task_id, raw_upstream_payload} per task
                - total / succeeded / failed: Counts
                - message: Summary
        """
        batch = AddTaskBatch.model_validate({"tasks": tasks, **extra})
        logger.info(f"Adding {len(batch.tasks)} task(s)")
        results = await self.executor.execute(batch.tasks, self.credential.sign())
        return _batch_response("Created", results)

    @handle_tool_errors
    async def update_task(self, tasks: Any = None, **extra: Any) -> dict[str, Any]:
        """
        Update tasks. Only the fields given for a task are changed.

        Args:
            tasks: List of {task_id, title?, description?, due_date?, assigned_to_id?,
                priority?, status?}
        """
        batch = UpdateTaskBatch.model_validate({"tasks": tasks, **extra})
        logger.info(f"Updating {len(batch.tasks)} task(s)")
        results = await self.executor.execute(batch.tasks, self.credential.sign())
        return _batch_response("Updated", results)

    @handle_tool_errors
    async def delete_task(self, tasks: Any = None, **extra: Any) -> dict[str, Any]:
        """Delete tasks by id."""
        batch = DeleteTaskBatch.model_validate({"tasks": tasks, **extra})
        logger.info(f"Deleting {len(batch.tasks)} task(s)")
        results = await self.executor.execute(batch.tasks, self.credential.sign())
        return _batch_response("Deleted", results)

    @handle_tool_errors
    async def list_tasks(self, **extra: Any) -> dict[str, Any]:
        """
        List all tasks in the configured project.

        Returns:
            Dictionary containing:
                - status: "success" or "error"
                - tasks: Task records exactly as Freedcamp returns them
                - count: Number of tasks
                - message: Status message

        Network failures come back as error_type "RequestError" and unreadable
        replies as "UpstreamResponseError"; a Freedcamp refusal is "UpstreamError".
        """
        if extra:
            raise ValueError(f"list_tasks takes no arguments, got: {', '.join(sorted(extra))}")

        result = await self.executor.list_all(self.credential.sign())
        if not result.succeeded:
            return {
                "status": "error",
                "message": result.message,
                "error_type": "UpstreamError",
                "details": result.raw_upstream_payload,
            }
        return {
            "tasks": result.tasks,
            "count": len(result.tasks),
            "message": result.message,
        }


# Shared pieces of the item schemas
_DESCRIPTION = {"type": "string", "description": "Task description"}
_DUE_DATE = {"type": "string", "format": "date", "description": "Due date (YYYY-MM-DD)"}
_ASSIGNED_TO = {
    "type": ["string", "integer"],
    "description": "Freedcamp user ID to assign the task to",
}
_PRIORITY = {
    "type": "integer",
    "minimum": 0,
    "maximum": 3,
    "description": "Task priority (0=none, 1=low, 2=medium, 3=high)",
}
_STATUS = {
    "type": "integer",
    "minimum": 0,
    "maximum": 2,
    "description": "Task status (0=open, 1=completed, 2=in progress)",
}
_TASK_ID = {"type": ["string", "integer"], "description": "Freedcamp task ID"}


def _batch_schema(item: dict[str, Any]) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "tasks": {
                "type": "array",
                "items": item,
                "description": "Tasks to process. Each one becomes a separate Freedcamp call.",
            },
        },
        "required": ["tasks"],
        "additionalProperties": False,
    }


def build_tool_schemas(task_tools: TaskTools) -> list[dict[str, Any]]:
    """Return ``name``/``description``/``input_schema``/``handler`` dicts for every task tool."""
    return [
        {
            "name": "add_task",
            "description": (
                "Create new tasks in the configured Freedcamp project. "
                "Accepts a list of tasks; each is created independently and gets its own "
                "result with the new task ID, so one failure does not stop the others."
            ),
            "input_schema": _batch_schema(
                {
                    "type": "object",
                    "properties": {
                        "title": {"type": "string", "minLength": 1, "description": "Task title"},
                        "description": _DESCRIPTION,
                        "due_date": _DUE_DATE,
                        "assigned_to_id": _ASSIGNED_TO,
                        "priority": _PRIORITY,
                    },
                    "required": ["title"],
                    "additionalProperties": False,
                }
            ),
            "handler": task_tools.add_task,
        },
        {
            "name": "update_task",
            "description": (
                "Update existing Freedcamp tasks. Only the fields provided for a task are "
                "changed; omitted fields are left as they are. Use status to complete a task."
            ),
            "input_schema": _batch_schema(
                {
                    "type": "object",
                    "properties": {
                        "task_id": _TASK_ID,
                        "title": {"type": "string", "minLength": 1, "description": "New task title"},
                        "description": _DESCRIPTION,
                        "due_date": _DUE_DATE,
                        "assigned_to_id": _ASSIGNED_TO,
                        "priority": _PRIORITY,
                        "status": _STATUS,
                    },
                    "required": ["task_id"],
                    "additionalProperties": False,
                }
            ),
            "handler": task_tools.update_task,
        },
        {
            "name": "delete_task",
            "description": "Delete Freedcamp tasks by ID. Deletion cannot be undone.",
            "input_schema": _batch_schema(
                {
                    "type": "object",
                    "properties": {"task_id": _TASK_ID},
                    "required": ["task_id"],
                    "additionalProperties": False,
                }
            ),
            "handler": task_tools.delete_task,
        },
        {
            "name": "list_tasks",
            "description": (
                "List all tasks in the configured Freedcamp project, with their IDs, titles "
                "and every other field Freedcamp returns."
            ),
            "input_schema": {
                "type": "object",
                "properties": {},
                "required": [],
            },
            "handler": task_tools.list_tasks,
        },
    ]
