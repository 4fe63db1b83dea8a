"""Request and result models for Freedcamp task operations."""

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field

# Freedcamp codes: priority 0=none, 1=low, 2=medium, 3=high;
# status 0=open, 1=completed, 2=in progress
Priority = Annotated[int, Field(ge=0, le=3)]
Status = Annotated[int, Field(ge=0, le=2)]


class TaskOperation(BaseModel):
    """Base for one item of a task batch."""

    # Agents often send numeric ids; Freedcamp ids are strings on the wire
    model_config = ConfigDict(extra="forbid", coerce_numbers_to_str=True)

    def upstream_fields(self) -> dict[str, Any]:
        """Fields to send upstream: only those the caller explicitly set.

        Freedcamp treats an explicitly sent field as "set this value", so
        unset and null fields are left out rather than sent empty.
        """
        return self.model_dump(
            mode="json", exclude_unset=True, exclude_none=True, exclude={"task_id"}
        )


class AddTaskRequest(TaskOperation):
    title: str = Field(..., min_length=1, description="Task title")
    description: str | None = None
    due_date: date | None = Field(default=None, description="Due date (YYYY-MM-DD)")
    assigned_to_id: str | None = None
    priority: Priority | None = None


class UpdateTaskRequest(TaskOperation):
    task_id: str = Field(..., min_length=1, description="ID of the task to update")
    title: str | None = Field(default=None, min_length=1, description="New task title")
    description: str | None = None
    due_date: date | None = Field(default=None, description="Due date (YYYY-MM-DD)")
    assigned_to_id: str | None = None
    priority: Priority | None = None
    status: Status | None = None


class DeleteTaskRequest(TaskOperation):
    task_id: str = Field(..., min_length=1, description="ID of the task to delete")


class AddTaskBatch(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tasks: list[AddTaskRequest]


class UpdateTaskBatch(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tasks: list[UpdateTaskRequest]


class DeleteTaskBatch(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tasks: list[DeleteTaskRequest]


@dataclass
class OperationResult:
    """Outcome of one operation in a batch.

    Attributes:
        succeeded: Whether Freedcamp accepted the operation
        message: Human-readable confirmation, or the upstream/transport error message
        task_id: Created task id (add) or the input task id (update/delete)
        raw_upstream_payload: Response ``data`` on success, the parsed error body on failure
    """

    succeeded: bool
    message: str
    task_id: str | None = None
    raw_upstream_payload: Any = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ListResult:
    """Outcome of a list call: one result for the whole call."""

    succeeded: bool
    message: str
    tasks: list[dict[str, Any]] = field(default_factory=list)
    raw_upstream_payload: Any = None
