"""
Tests for the API client and envelope
"""
import asyncio
import json
import pytest

import httpx

from ireporter.core.errors import ErrorCode, InvalidInput
from ireporter.transport import ApiClient, CredentialStore, Envelope, MemoryCredentialStore


class TestEnvelope:
    """Test suite for Envelope."""

    def test_ok(self):
        """Test successful envelope carries data."""
        envelope = Envelope.ok({"id": 1}, 200)
        assert envelope.success
        assert envelope.data == {"id": 1}
        assert envelope.error is None

    def test_fail_defaults_to_server_error(self):
        """Test failed envelope default code."""
        envelope = Envelope.fail("boom")
        assert not envelope.success
        assert envelope.code == ErrorCode.SERVER_ERROR

    def test_from_error(self):
        """Test conversion of a client-side error."""
        envelope = Envelope.from_error(InvalidInput("Title is required"))
        assert not envelope.success
        assert envelope.error == "Title is required"
        assert envelope.code == ErrorCode.INVALID_INPUT

    def test_to_dict(self):
        """Test serialization."""
        assert Envelope.ok([1]).to_dict() == {"success": True, "data": [1]}
        assert Envelope.fail("x", ErrorCode.TIMEOUT).to_dict() == {
            "success": False,
            "error": "x",
            "code": "TIMEOUT",
        }


class TestApiClientHeaders:
    """Test suite for authentication headers."""

    async def test_bearer_token_attached(self, fake_api):
        """Test token is sent when present."""
        fake_api.add("GET", "/reports", json_body=[])
        client = fake_api.client(token="abc123")

        await client.get("/reports")

        request = fake_api.requests[0]
        assert request.headers["Authorization"] == "Bearer abc123"
        assert request.headers["Accept"] == "application/json"

    async def test_no_token_no_header(self, fake_api):
        """Test no Authorization header without a token."""
        fake_api.add("GET", "/reports", json_body=[])
        client = fake_api.client(token=None)

        await client.get("/reports")

        assert "Authorization" not in fake_api.requests[0].headers

    async def test_auth_not_required(self, fake_api):
        """Test token is withheld when auth is not required."""
        fake_api.add("POST", "/auth/login", json_body={})
        client = fake_api.client(token="abc123")

        await client.post("/auth/login", {"email": "a@b.co"}, auth_required=False)

        assert "Authorization" not in fake_api.requests[0].headers

    async def test_json_body(self, fake_api):
        """Test JSON requests carry the JSON content type."""
        fake_api.add("PUT", "/reports/1", json_body={})
        client = fake_api.client()

        await client.put("/reports/1", {"title": "New title here"})

        request = fake_api.requests[0]
        assert request.headers["Content-Type"] == "application/json"
        assert json.loads(request.content) == {"title": "New title here"}


class TestApiClientUpload:
    """Test suite for multipart uploads."""

    async def test_multipart_with_files(self, fake_api):
        """Test upload keeps the token and lets httpx set the boundary."""
        fake_api.add("POST", "/reports", status=201, json_body={"id": "1"})
        client = fake_api.client(token="abc123")

        await client.upload(
            "/reports",
            fields={"title": "Bribery at the registry"},
            files=[("images", ("a.png", b"\x89PNG", "image/png"))],
        )

        request = fake_api.requests[0]
        assert request.headers["Content-Type"].startswith("multipart/form-data; boundary=")
        assert request.headers["Authorization"] == "Bearer abc123"
        body = request.content
        assert b'name="title"' in body
        assert b'name="images"; filename="a.png"' in body

    async def test_multipart_without_files(self, fake_api):
        """Test plain fields still go out as multipart."""
        fake_api.add("POST", "/reports", status=201, json_body={"id": "1"})
        client = fake_api.client()

        await client.upload("/reports", fields={"title": "Bribery at the registry"})

        request = fake_api.requests[0]
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        assert b"Bribery at the registry" in request.content

    async def test_upload_put(self, fake_api):
        """Test upload honours the method."""
        fake_api.add("PUT", "/reports/1", json_body={"id": "1"})
        client = fake_api.client()

        envelope = await client.upload("/reports/1", fields={"title": "x"}, method="put")

        assert envelope.success
        assert fake_api.requests[0].method == "PUT"


class TestApiClientResponses:
    """Test suite for response normalization."""

    async def test_success_payload(self, fake_api):
        """Test 2xx JSON payload is returned."""
        fake_api.add("GET", "/reports", json_body=[{"id": "1"}])
        envelope = await fake_api.client().get("/reports")

        assert envelope.success
        assert envelope.data == [{"id": "1"}]
        assert envelope.status_code == 200

    async def test_data_wrapper_unwrapped(self, fake_api):
        """Test {"data": ...} wrapper is removed."""
        fake_api.add("GET", "/reports/1", json_body={"success": True, "data": {"id": "1"}})
        envelope = await fake_api.client().get("/reports/1")

        assert envelope.data == {"id": "1"}

    async def test_error_message_from_body(self, fake_api):
        """Test non-2xx uses the server's error message."""
        fake_api.add("POST", "/reports", status=400, json_body={"error": "Title is required"})
        envelope = await fake_api.client().post("/reports", {})

        assert not envelope.success
        assert envelope.error == "Title is required"
        assert envelope.code == ErrorCode.SERVER_ERROR
        assert envelope.status_code == 400

    async def test_message_key_fallback(self, fake_api):
        """Test 'message' is used when 'error' is absent."""
        fake_api.add("GET", "/reports", status=403, json_body={"message": "Forbidden"})
        envelope = await fake_api.client().get("/reports")

        assert envelope.error == "Forbidden"

    async def test_generic_status_message(self, fake_api):
        """Test non-JSON error bodies fall back to the status code."""
        fake_api.add("GET", "/reports", handler=lambda r: httpx.Response(502, text="Bad gateway"))
        envelope = await fake_api.client().get("/reports")

        assert envelope.error == "Request failed with status 502"
        assert envelope.status_code == 502

    async def test_malformed_json(self, fake_api):
        """Test unparseable JSON on success is reported as malformed."""
        fake_api.add(
            "GET",
            "/reports",
            handler=lambda r: httpx.Response(
                200, content=b"{not json", headers={"content-type": "application/json"}
            ),
        )
        envelope = await fake_api.client().get("/reports")

        assert not envelope.success
        assert envelope.code == ErrorCode.MALFORMED_RESPONSE

    async def test_network_error(self, fake_api):
        """Test connection failures become NETWORK_ERROR."""
        def refuse(request):
            raise httpx.ConnectError("Connection refused", request=request)

        fake_api.add("GET", "/reports", handler=refuse)
        envelope = await fake_api.client().get("/reports")

        assert not envelope.success
        assert envelope.code == ErrorCode.NETWORK_ERROR
        assert "Connection refused" in envelope.error

    async def test_timeout(self, fake_api):
        """Test slow responses are cut off by the per-call timeout."""
        async def slow(request):
            await asyncio.sleep(5)
            return httpx.Response(200, json=[])

        fake_api.add("GET", "/reports", handler=slow)
        envelope = await fake_api.client(timeout=0.05).get("/reports")

        assert not envelope.success
        assert envelope.code == ErrorCode.TIMEOUT
        assert envelope.error == "Request timeout - please try again"

    async def test_caller_cancellation_propagates(self, fake_api):
        """Test cancelling the caller is not turned into an envelope."""
        async def slow(request):
            await asyncio.sleep(5)
            return httpx.Response(200, json=[])

        fake_api.add("GET", "/reports", handler=slow)
        task = asyncio.ensure_future(fake_api.client().get("/reports"))
        await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task


class TestCredentials:
    """Test suite for the in-memory credential store."""

    def test_set_and_clear(self):
        """Test token lifecycle."""
        store = MemoryCredentialStore()
        assert store.get() is None

        store.set("tok")
        assert store.get() == "tok"

        store.clear()
        assert store.get() is None

    async def test_token_read_per_request(self, fake_api):
        """Test a token set after construction is picked up."""
        fake_api.add("GET", "/reports", json_body=[])
        store = MemoryCredentialStore()
        client = ApiClient(
            base_url="http://testserver/api",
            credentials=store,
            transport=httpx.MockTransport(fake_api),
        )

        store.set("late-token")
        await client.get("/reports")

        assert fake_api.requests[0].headers["Authorization"] == "Bearer late-token"

    def test_incomplete_store_rejected(self):
        """Test a store missing methods cannot be constructed."""
        class ReadOnlyStore(CredentialStore):
            def get(self):
                return "tok"

        with pytest.raises(TypeError):
            ReadOnlyStore()
