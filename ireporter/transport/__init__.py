"""
iReporter - Transport Layer
Authenticated HTTP access to the iReporter API and the geocoder.
"""

from ireporter.transport.client import ApiClient, DEFAULT_HEADERS
from ireporter.transport.credentials import CredentialStore, MemoryCredentialStore
from ireporter.transport.envelope import Envelope

__all__ = [
    "ApiClient",
    "DEFAULT_HEADERS",
    "CredentialStore",
    "MemoryCredentialStore",
    "Envelope",
]
