"""
Authentication service
Signup, login, logout and current-user lookup against /auth.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from ireporter.core.errors import ErrorCode, InvalidInput
from ireporter.transport.client import ApiClient
from ireporter.transport.credentials import CredentialStore
from ireporter.transport.envelope import Envelope

logger = logging.getLogger(__name__)

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class LoginCredentials(BaseModel):
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=6)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    def to_payload(self) -> Dict[str, str]:
        return {"email": self.email, "password": self.password}


class SignupCredentials(LoginCredentials):
    first_name: str = Field(min_length=2)
    last_name: str = Field(min_length=2)

    def to_payload(self) -> Dict[str, str]:
        payload = super().to_payload()
        payload["firstName"] = self.first_name
        payload["lastName"] = self.last_name
        return payload


_FIELD_MESSAGES = {
    "email": "Invalid email address",
    "password": "Password must be at least 6 characters",
    "first_name": "First name must be at least 2 characters",
    "last_name": "Last name must be at least 2 characters",
}


@dataclass
class User:
    """An authenticated iReporter user."""
    id: str
    email: str
    first_name: str
    last_name: str
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_api(cls, data: Any) -> "User":
        if not isinstance(data, dict):
            raise TypeError(f"Expected user object, got {type(data).__name__}")
        return cls(
            id=str(data["id"]),
            email=data["email"],
            first_name=data.get("firstName", data.get("first_name", "")),
            last_name=data.get("lastName", data.get("last_name", "")),
            role=data.get("role", "user"),
        )


class AuthService:
    """
    Talks to the /auth endpoints and keeps the credential store in step.

    logout() and make_admin() ignore remote failures: clearing the local
    token is the part that must succeed.
    """

    def __init__(self, client: ApiClient, credentials: CredentialStore):
        self.client = client
        self.credentials = credentials

    def _session(self, envelope: Envelope) -> Envelope:
        """Store the returned token and extract the user."""
        if not envelope.success:
            return envelope
        payload = envelope.data if isinstance(envelope.data, dict) else {}
        try:
            user = User.from_api(payload.get("user"))
        except (KeyError, TypeError) as e:
            logger.warning(f"Could not parse user payload: {e}")
            return Envelope.fail(
                "Unexpected response from server",
                ErrorCode.MALFORMED_RESPONSE,
                envelope.status_code,
            )

        token = payload.get("token")
        if token:
            self.credentials.set(token)
        return Envelope.ok(user, envelope.status_code)

    @staticmethod
    def _validate(model, data):
        if isinstance(data, model):
            return data
        try:
            return model.model_validate(dict(data))
        except ValidationError as e:
            field = str(e.errors()[0]["loc"][0])
            raise InvalidInput(_FIELD_MESSAGES.get(field, e.errors()[0]["msg"])) from None

    async def signup(self, data: Union[SignupCredentials, Mapping[str, Any]]) -> Envelope:
        """Register a new account and start a session."""
        try:
            credentials = self._validate(SignupCredentials, data)
        except InvalidInput as e:
            return Envelope.from_error(e)

        envelope = await self.client.post("/auth/signup", credentials.to_payload(), auth_required=False)
        result = self._session(envelope)
        if result.success:
            logger.info(f"Signed up {result.data.email}")
        return result

    async def login(self, data: Union[LoginCredentials, Mapping[str, Any]]) -> Envelope:
        """Log in and start a session."""
        try:
            credentials = self._validate(LoginCredentials, data)
        except InvalidInput as e:
            return Envelope.from_error(e)

        envelope = await self.client.post("/auth/login", credentials.to_payload(), auth_required=False)
        result = self._session(envelope)
        if result.success:
            logger.info(f"Logged in {result.data.email}")
        return result

    async def current_user(self) -> Envelope:
        """Get the user owning the current token."""
        if not self.credentials.get():
            return Envelope.fail("Not authenticated", ErrorCode.NOT_AUTHENTICATED)

        envelope = await self.client.get("/auth/me")
        if not envelope.success:
            return envelope

        payload = envelope.data
        if isinstance(payload, dict) and "user" in payload:
            payload = payload["user"]
        try:
            return Envelope.ok(User.from_api(payload), envelope.status_code)
        except (KeyError, TypeError) as e:
            logger.warning(f"Could not parse user payload: {e}")
            return Envelope.fail(
                "Unexpected response from server",
                ErrorCode.MALFORMED_RESPONSE,
                envelope.status_code,
            )

    async def logout(self) -> None:
        """End the session. The local token is cleared even if the server call fails."""
        envelope = await self.client.post("/auth/logout")
        if not envelope.success:
            logger.info(f"Remote logout failed, clearing local session anyway: {envelope.error}")
        self.credentials.clear()

    async def make_admin(self, email: str) -> None:
        """Grant admin role to a user (development helper, best effort)."""
        envelope = await self.client.post("/auth/make-admin", {"email": email})
        if not envelope.success:
            logger.info(f"make-admin for {email} failed: {envelope.error}")
