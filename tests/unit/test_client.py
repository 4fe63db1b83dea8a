"""Tests for the Freedcamp HTTP client."""

import json

import httpx
import pytest

from freedcamp_mcp.core.auth import AuthMaterial
from freedcamp_mcp.core.client import FreedcampClient, UpstreamReply
from freedcamp_mcp.utils.errors import UpstreamResponseError
from tests.conftest import API_URL, SIGNED_AT, StubFreedcamp, envelope


def client_returning(response: httpx.Response, seen: list[httpx.Request]) -> FreedcampClient:
    """Build a client whose every call gets ``response``."""

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return response

    return FreedcampClient(base_url=API_URL, transport=httpx.MockTransport(handler))


class TestRequestShape:
    """Tests for how requests are encoded."""

    @pytest.mark.asyncio
    async def test_body_sent_as_json_in_data_field(self, client, stub, auth):
        """The payload goes JSON-encoded into ``data``, auth fields alongside."""
        await client.send("POST", "tasks", auth, body={"project_id": "42", "title": "Write report"})

        request = stub.requests[0]
        assert request.method == "POST"
        assert request.headers["content-type"] == "application/x-www-form-urlencoded"

        fields = StubFreedcamp.form_fields(request)
        assert json.loads(fields["data"]) == {"project_id": "42", "title": "Write report"}
        assert fields["api_key"] == "test-key"
        assert fields["timestamp"] == str(SIGNED_AT)
        assert fields["hash"] == auth.signature

    @pytest.mark.asyncio
    async def test_delete_carries_auth_in_query(self, client, stub, auth):
        """A bodyless DELETE sends auth as query parameters and no body."""
        stub.add("Doomed")

        await client.send("DELETE", "tasks/1000", auth)

        request = stub.requests[0]
        assert request.content == b""
        assert request.url.params["api_key"] == "test-key"
        assert request.url.params["timestamp"] == str(SIGNED_AT)
        assert request.url.params["hash"] == auth.signature

    @pytest.mark.asyncio
    async def test_get_merges_params_and_auth(self, client, stub, auth):
        await client.send("GET", "tasks/", auth, params={"project_id": "42"})

        params = stub.requests[0].url.params
        assert params["project_id"] == "42"
        assert params["api_key"] == "test-key"

    @pytest.mark.asyncio
    async def test_unsigned_auth_sends_only_key(self, client, stub):
        await client.send("GET", "tasks/", AuthMaterial(identifier="bare-key"))

        params = stub.requests[0].url.params
        assert params["api_key"] == "bare-key"
        assert "hash" not in params
        assert "timestamp" not in params

    def test_url_joins_base_and_path(self):
        client = FreedcampClient(base_url="https://freedcamp.test/api/v1/")

        assert client.url("tasks/5/edit") == "https://freedcamp.test/api/v1/tasks/5/edit"
        assert client.url("/tasks") == "https://freedcamp.test/api/v1/tasks"


class TestReplyParsing:
    """Tests for success and failure detection."""

    @pytest.mark.asyncio
    async def test_success_reply(self, auth):
        seen: list[httpx.Request] = []
        client = client_returning(httpx.Response(200, json=envelope({"tasks": []})), seen)

        reply = await client.send("GET", "tasks/", auth)

        assert reply.ok
        assert reply.status_code == 200
        assert reply.data == {"tasks": []}

    @pytest.mark.asyncio
    async def test_embedded_error_code_fails_despite_200(self, auth):
        """HTTP 200 with http_code >= 400 in the body is a failure."""
        seen: list[httpx.Request] = []
        body = envelope(http_code=404, msg="Task not found")
        client = client_returning(httpx.Response(200, json=body), seen)

        reply = await client.send("POST", "tasks/1/edit", auth, body={})

        assert not reply.ok
        assert reply.error == "Task not found"
        assert reply.payload == body

    @pytest.mark.asyncio
    async def test_http_error_uses_upstream_message(self, auth):
        seen: list[httpx.Request] = []
        client = client_returning(
            httpx.Response(403, json=envelope(http_code=403, msg="Access denied")), seen
        )

        reply = await client.send("GET", "tasks/", auth)

        assert not reply.ok
        assert reply.status_code == 403
        assert reply.error == "Access denied"

    @pytest.mark.asyncio
    async def test_http_error_without_message_uses_status_text(self, auth):
        seen: list[httpx.Request] = []
        client = client_returning(httpx.Response(500, text="<html>oops</html>"), seen)

        reply = await client.send("GET", "tasks/", auth)

        assert not reply.ok
        assert reply.payload is None
        assert reply.error == "Internal Server Error"

    @pytest.mark.asyncio
    async def test_non_json_success_raises(self, auth):
        seen: list[httpx.Request] = []
        client = client_returning(httpx.Response(200, text="not json"), seen)

        with pytest.raises(UpstreamResponseError) as exc_info:
            await client.send("GET", "tasks/", auth)

        assert exc_info.value.status_code == 200

    @pytest.mark.asyncio
    async def test_non_numeric_http_code_ignored(self, auth):
        seen: list[httpx.Request] = []
        client = client_returning(httpx.Response(200, json={"http_code": "n/a", "data": {}}), seen)

        reply = await client.send("GET", "tasks/", auth)

        assert reply.ok

    @pytest.mark.asyncio
    async def test_network_error_propagates(self, auth):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = FreedcampClient(base_url=API_URL, transport=httpx.MockTransport(handler))

        with pytest.raises(httpx.ConnectError):
            await client.send("GET", "tasks/", auth)


class TestUpstreamReply:
    def test_data_of_non_dict_payload(self):
        assert UpstreamReply(status_code=200, payload=["x"]).data is None

    def test_ok_follows_error(self):
        assert UpstreamReply(status_code=200).ok
        assert not UpstreamReply(status_code=200, error="boom").ok


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_context_manager_closes_client(self, stub, auth):
        async with FreedcampClient(base_url=API_URL, transport=stub.transport) as client:
            await client.send("GET", "tasks/", auth)
            assert client._client is not None

        assert client._client is None

    @pytest.mark.asyncio
    async def test_reopens_after_close(self, client, auth):
        await client.send("GET", "tasks/", auth)
        await client.close()

        reply = await client.send("GET", "tasks/", auth)

        assert reply.ok
