"""Batch execution of Freedcamp task operations.

Each operation in a batch becomes one independent upstream call. Calls run
concurrently and every outcome is collected, in input order, before the batch
returns. A failing item (upstream error, network error, bad reply) turns into
a failed OperationResult and never cancels or hides its siblings.
"""

import asyncio
import logging
from collections.abc import Sequence
from urllib.parse import quote

from .auth import AuthMaterial
from .client import FreedcampClient, UpstreamReply
from .models import (
    AddTaskRequest,
    DeleteTaskRequest,
    ListResult,
    OperationResult,
    TaskOperation,
    UpdateTaskRequest,
)

logger = logging.getLogger(__name__)

TASKS_PATH = "tasks"


def _task_path(task_id: str, *suffix: str) -> str:
    return "/".join([TASKS_PATH, quote(task_id, safe=""), *suffix])


def _created_task_id(data: object) -> str | None:
    """Pull the new id out of ``data.tasks[0].id`` in a create reply."""
    if not isinstance(data, dict):
        return None
    tasks = data.get("tasks")
    if not isinstance(tasks, list) or not tasks or not isinstance(tasks[0], dict):
        return None
    task_id = tasks[0].get("id")
    return None if task_id is None else str(task_id)


class BatchExecutor:
    """Run batches of add/update/delete operations against one Freedcamp project."""

    def __init__(self, client: FreedcampClient, project_id: str):
        self.client = client
        self.project_id = project_id

    async def execute(
        self, operations: Sequence[TaskOperation], auth: AuthMaterial
    ) -> list[OperationResult]:
        """Run every operation and return one result per operation, in input order.

        Args:
            operations: Batch items (AddTaskRequest, UpdateTaskRequest or DeleteTaskRequest)
            auth: Auth material shared by every call of this batch

        Returns:
            List of OperationResult, same length and order as ``operations``
        """
        if not operations:
            return []

        logger.info(f"Executing batch of {len(operations)} operation(s)")
        # gather() keeps input order, and _run_one never raises
        results = await asyncio.gather(*(self._run_one(op, auth) for op in operations))

        failed = sum(1 for r in results if not r.succeeded)
        if failed:
            logger.warning(f"Batch finished: {len(results) - failed} succeeded, {failed} failed")
        else:
            logger.info(f"Batch finished: {len(results)} succeeded")
        return list(results)

    async def _run_one(self, operation: TaskOperation, auth: AuthMaterial) -> OperationResult:
        try:
            if isinstance(operation, AddTaskRequest):
                return await self._add(operation, auth)
            if isinstance(operation, UpdateTaskRequest):
                return await self._update(operation, auth)
            if isinstance(operation, DeleteTaskRequest):
                return await self._delete(operation, auth)
            raise TypeError(f"Unsupported operation: {type(operation).__name__}")
        except Exception as e:
            logger.exception(f"Error processing {type(operation).__name__}: {e}")
            return OperationResult(
                succeeded=False,
                message=f"Request failed: {e}",
                task_id=getattr(operation, "task_id", None),
            )

    async def _add(self, request: AddTaskRequest, auth: AuthMaterial) -> OperationResult:
        body = {"project_id": self.project_id, **request.upstream_fields()}
        reply = await self.client.send("POST", TASKS_PATH, auth, body=body)
        if not reply.ok:
            logger.error(f'Error adding task "{request.title}": {reply.error}')
            return self._failure(reply)

        task_id = _created_task_id(reply.data)
        return OperationResult(
            succeeded=True,
            message=f'Task "{request.title}" created with ID: {task_id}',
            task_id=task_id,
            raw_upstream_payload=reply.data,
        )

    async def _update(self, request: UpdateTaskRequest, auth: AuthMaterial) -> OperationResult:
        path = _task_path(request.task_id, "edit")
        reply = await self.client.send("POST", path, auth, body=request.upstream_fields())
        if not reply.ok:
            logger.error(f'Error updating task ID "{request.task_id}": {reply.error}')
            return self._failure(reply, request.task_id)

        return OperationResult(
            succeeded=True,
            message=f'Task ID "{request.task_id}" updated.',
            task_id=request.task_id,
            raw_upstream_payload=reply.data,
        )

    async def _delete(self, request: DeleteTaskRequest, auth: AuthMaterial) -> OperationResult:
        reply = await self.client.send("DELETE", _task_path(request.task_id), auth)
        if not reply.ok:
            logger.error(f'Error deleting task ID "{request.task_id}": {reply.error}')
            return self._failure(reply, request.task_id)

        return OperationResult(
            succeeded=True,
            message=f'Task ID "{request.task_id}" deleted successfully.',
            task_id=request.task_id,
            raw_upstream_payload=reply.data,
        )

    @staticmethod
    def _failure(reply: UpstreamReply, task_id: str | None = None) -> OperationResult:
        return OperationResult(
            succeeded=False,
            message=reply.error or "Unknown error",
            task_id=task_id,
            raw_upstream_payload=reply.payload,
        )

    async def list_all(self, auth: AuthMaterial) -> ListResult:
        """List every task of the project.

        An upstream refusal is reported as one failed ListResult for the whole
        call.

        Raises:
            httpx.RequestError: On network failures
            UpstreamResponseError: When a successful reply is not JSON
        """
        reply = await self.client.send(
            "GET", f"{TASKS_PATH}/", auth, params={"project_id": self.project_id}
        )
        if not reply.ok:
            logger.error(f"Error listing tasks: {reply.error}")
            return ListResult(
                succeeded=False,
                message=reply.error or "Unknown error",
                raw_upstream_payload=reply.payload,
            )

        data = reply.data if isinstance(reply.data, dict) else {}
        tasks = data.get("tasks") or []
        logger.info(f"Found {len(tasks)} tasks in project {self.project_id}")
        return ListResult(
            succeeded=True,
            message=f"Found {len(tasks)} tasks",
            tasks=tasks,
            raw_upstream_payload=reply.data,
        )
