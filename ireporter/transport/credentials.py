"""
Bearer token sources for the transport layer.

The ApiClient only reads the token; login/logout write it through the auth
service.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

logger = logging.getLogger(__name__)


class CredentialStore(ABC):
    """Interface for get/set/clear of a bearer token."""

    @abstractmethod
    def get(self) -> Optional[str]:
        raise NotImplementedError

    @abstractmethod
    def set(self, token: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        raise NotImplementedError


class MemoryCredentialStore(CredentialStore):
    """Keeps the token in process memory for the lifetime of the session."""

    def __init__(self, token: Optional[str] = None):
        self._token = token or None

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token or None
        logger.debug("Auth token stored")

    def clear(self) -> None:
        self._token = None
        logger.debug("Auth token cleared")
