"""Pytest configuration and fixtures for freedcamp_mcp tests."""

import json
import re
from typing import Any
from urllib.parse import parse_qs

import httpx
import pytest

from freedcamp_mcp.core.auth import AuthMaterial, Credential
from freedcamp_mcp.core.client import FreedcampClient
from freedcamp_mcp.core.config import Settings
from freedcamp_mcp.core.executor import BatchExecutor
from freedcamp_mcp.tools.tasks import TaskTools

API_URL = "https://freedcamp.test/api/v1"
PROJECT_ID = "42"
SIGNED_AT = 1_700_000_000

_EDIT_PATH = re.compile(r"^/api/v1/tasks/([^/]+)/edit$")
_TASK_PATH = re.compile(r"^/api/v1/tasks/([^/]+)$")


def envelope(data: Any = None, http_code: int = 200, msg: str = "") -> dict[str, Any]:
    return {"http_code": http_code, "msg": msg, "data": data if data is not None else []}


class StubFreedcamp:
    """In-process stand-in for the Freedcamp tasks API.

    Keeps tasks in memory and records every request it receives. Unknown
    tasks answer like Freedcamp does: HTTP 200 with an embedded 404 for
    edits, HTTP 404 for deletes.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.tasks: dict[str, dict[str, Any]] = {}
        self._next_id = 1000

    @staticmethod
    def form_fields(request: httpx.Request) -> dict[str, str]:
        """Decode a form-encoded request body into a flat dict."""
        parsed = parse_qs(request.content.decode(), keep_blank_values=True)
        return {key: values[0] for key, values in parsed.items()}

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def add(self, title: str, **fields: Any) -> dict[str, Any]:
        task_id = str(self._next_id)
        self._next_id += 1
        task = {"id": task_id, "title": title, "project_id": PROJECT_ID, **fields}
        self.tasks[task_id] = task
        return task

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.method == "GET" and path == "/api/v1/tasks/":
            return httpx.Response(200, json=envelope({"tasks": list(self.tasks.values())}))

        if request.method == "POST" and path == "/api/v1/tasks":
            data = json.loads(self.form_fields(request)["data"])
            project_id = data.pop("project_id")
            task = self.add(**data)
            task["project_id"] = project_id
            return httpx.Response(200, json=envelope({"tasks": [task]}))

        match = _EDIT_PATH.match(path)
        if request.method == "POST" and match:
            task = self.tasks.get(match.group(1))
            if task is None:
                return httpx.Response(200, json=envelope(http_code=404, msg="Task not found"))
            task.update(json.loads(self.form_fields(request)["data"]))
            return httpx.Response(200, json=envelope({"tasks": [task]}))

        match = _TASK_PATH.match(path)
        if request.method == "DELETE" and match:
            if self.tasks.pop(match.group(1), None) is None:
                return httpx.Response(404, json=envelope(http_code=404, msg="Task not found"))
            return httpx.Response(200, json=envelope())

        return httpx.Response(404, json=envelope(http_code=404, msg="Unknown endpoint"))


@pytest.fixture
def settings(monkeypatch, tmp_path) -> Settings:
    """Settings with a complete credential set, isolated from any .env file."""
    monkeypatch.chdir(tmp_path)
    return Settings(
        freedcamp_api_key="test-key",
        freedcamp_api_secret="test-secret",  # pragma: allowlist secret
        freedcamp_project_id=PROJECT_ID,
        freedcamp_api_url=API_URL,
        _env_file=None,
    )


@pytest.fixture
def stub() -> StubFreedcamp:
    return StubFreedcamp()


@pytest.fixture
def client(stub: StubFreedcamp) -> FreedcampClient:
    """Freedcamp client wired to the in-process stub."""
    return FreedcampClient(base_url=API_URL, transport=stub.transport)


@pytest.fixture
def credential() -> Credential:
    return Credential(identifier="test-key", secret="test-secret")  # pragma: allowlist secret


@pytest.fixture
def auth(credential: Credential) -> AuthMaterial:
    return credential.sign(now=SIGNED_AT)


@pytest.fixture
def executor(client: FreedcampClient) -> BatchExecutor:
    return BatchExecutor(client, PROJECT_ID)


@pytest.fixture
def task_tools(credential: Credential, executor: BatchExecutor) -> TaskTools:
    return TaskTools(credential, executor)
