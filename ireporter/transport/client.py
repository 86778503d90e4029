"""
iReporter - API Client

Authenticated request primitive used by every other component. Wraps an
httpx.AsyncClient with a per-call timeout and normalizes every failure
(network fault, non-2xx status, timeout, malformed body) into a failed
Envelope.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx

from ireporter.core.config import settings
from ireporter.core.constants import TIMEOUT_MESSAGE
from ireporter.core.errors import ErrorCode
from ireporter.transport.credentials import CredentialStore
from ireporter.transport.envelope import Envelope

logger = logging.getLogger(__name__)

# (field name, (filename, content, content type))
FilePart = Tuple[str, Tuple[Optional[str], bytes, Optional[str]]]

DEFAULT_HEADERS: Dict[str, str] = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


class ApiClient:
    """
    Async client for the iReporter REST API.

    Usage:
        async with ApiClient(credentials=store) as client:
            envelope = await client.get("/reports")
            if envelope.success:
                ...

    Every call resolves to an Envelope; callers never handle transport
    exceptions. Caller cancellation is propagated unchanged.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        credentials: Optional[CredentialStore] = None,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize API client.

        Args:
            base_url: API root, e.g. "http://localhost:5001/api"
            timeout: Per-call timeout in seconds
            credentials: Source of the bearer token
            headers: Extra default headers merged over the JSON defaults
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.api_timeout_seconds
        self.credentials = credentials
        self.default_headers = {**DEFAULT_HEADERS, **(headers or {})}
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _build_headers(
        self,
        auth_required: bool = True,
        include_content_type: bool = True
    ) -> Dict[str, str]:
        """Build request headers, attaching the bearer token when available."""
        headers = dict(self.default_headers)
        if not include_content_type:
            headers.pop("Content-Type", None)

        if auth_required and self.credentials is not None:
            token = self.credentials.get()
            if token:
                headers["Authorization"] = f"Bearer {token}"

        return headers

    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        body: Optional[Any] = None,
        auth_required: bool = True,
        params: Optional[Dict[str, Any]] = None,
    ) -> Envelope:
        """
        Send a JSON request.

        Args:
            endpoint: Path relative to the base URL
            method: HTTP verb
            body: JSON-serializable request body
            auth_required: Attach the bearer token if one is present
            params: Query string parameters

        Returns:
            Envelope with the (unwrapped) response payload or an error message
        """
        kwargs: Dict[str, Any] = {
            "headers": self._build_headers(auth_required),
        }
        if params:
            kwargs["params"] = params
        if body is not None:
            kwargs["json"] = body

        return await self._send(method.upper(), endpoint, **kwargs)

    async def get(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        auth_required: bool = True
    ) -> Envelope:
        return await self.request(endpoint, "GET", params=params, auth_required=auth_required)

    async def post(self, endpoint: str, body: Optional[Any] = None, auth_required: bool = True) -> Envelope:
        return await self.request(endpoint, "POST", body=body, auth_required=auth_required)

    async def put(self, endpoint: str, body: Optional[Any] = None, auth_required: bool = True) -> Envelope:
        return await self.request(endpoint, "PUT", body=body, auth_required=auth_required)

    async def patch(self, endpoint: str, body: Optional[Any] = None, auth_required: bool = True) -> Envelope:
        return await self.request(endpoint, "PATCH", body=body, auth_required=auth_required)

    async def delete(self, endpoint: str, auth_required: bool = True) -> Envelope:
        return await self.request(endpoint, "DELETE", auth_required=auth_required)

    async def upload(
        self,
        endpoint: str,
        fields: Optional[Dict[str, str]] = None,
        files: Optional[Sequence[FilePart]] = None,
        method: str = "POST",
        auth_required: bool = True,
    ) -> Envelope:
        """
        Send a multipart/form-data request.

        The JSON Content-Type default is dropped so httpx can set the
        multipart boundary header; the bearer token is still attached.

        Args:
            endpoint: Path relative to the base URL
            fields: Plain form fields
            files: File parts as (field, (filename, content, content_type))
            method: HTTP verb (POST or PUT)
            auth_required: Attach the bearer token if one is present

        Returns:
            Envelope with the (unwrapped) response payload or an error message
        """
        fields = {k: str(v) for k, v in (fields or {}).items()}
        parts: List[FilePart] = list(files or [])

        kwargs: Dict[str, Any] = {
            "headers": self._build_headers(auth_required, include_content_type=False),
        }
        if parts:
            kwargs["data"] = fields
            kwargs["files"] = parts
        else:
            # httpx only encodes multipart when file parts exist, so plain
            # fields go in as filename-less parts
            kwargs["files"] = [
                (name, (None, value.encode("utf-8"), None)) for name, value in fields.items()
            ]

        return await self._send(method.upper(), endpoint, **kwargs)

    async def _send(self, method: str, endpoint: str, **kwargs) -> Envelope:
        """Perform the HTTP exchange under the per-call timeout."""
        logger.debug(f"{method} {endpoint}")

        try:
            response = await asyncio.wait_for(
                self._client.request(method, endpoint, **kwargs),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.warning(f"{method} {endpoint} timed out after {self.timeout}s")
            return Envelope.fail(TIMEOUT_MESSAGE, ErrorCode.TIMEOUT)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {endpoint} failed: {e}")
            return Envelope.fail(str(e) or "Network error", ErrorCode.NETWORK_ERROR)

        return self._parse_response(method, endpoint, response)

    def _parse_response(self, method: str, endpoint: str, response: httpx.Response) -> Envelope:
        """Decode the body and fold the status code into an Envelope."""
        status = response.status_code
        content_type = response.headers.get("content-type", "")

        payload: Any
        if "application/json" in content_type:
            try:
                payload = response.json()
            except ValueError:
                if response.is_success:
                    logger.warning(f"{method} {endpoint} returned malformed JSON")
                    return Envelope.fail(
                        "Malformed response from server",
                        ErrorCode.MALFORMED_RESPONSE,
                        status,
                    )
                payload = None
        else:
            payload = response.text or None

        if not response.is_success:
            message = None
            if isinstance(payload, dict):
                message = payload.get("error") or payload.get("message")
            message = message or f"Request failed with status {status}"
            logger.warning(f"{method} {endpoint} -> {status}: {message}")
            return Envelope.fail(message, ErrorCode.SERVER_ERROR, status)

        if isinstance(payload, dict) and "data" in payload:
            payload = payload["data"]

        return Envelope.ok(payload, status)
