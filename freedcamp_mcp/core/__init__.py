"""Core Freedcamp client, request signing and batch execution."""

from .auth import AuthMaterial, Credential, generate_signature, sign
from .client import FreedcampClient, UpstreamReply
from .config import Settings
from .executor import BatchExecutor
from .models import (
    AddTaskBatch,
    AddTaskRequest,
    DeleteTaskBatch,
    DeleteTaskRequest,
    ListResult,
    OperationResult,
    UpdateTaskBatch,
    UpdateTaskRequest,
)

__all__ = [
    "AddTaskBatch",
    "AddTaskRequest",
    "AuthMaterial",
    "BatchExecutor",
    "Credential",
    "DeleteTaskBatch",
    "DeleteTaskRequest",
    "FreedcampClient",
    "ListResult",
    "OperationResult",
    "Settings",
    "UpdateTaskBatch",
    "UpdateTaskRequest",
    "UpstreamReply",
    "generate_signature",
    "sign",
]
