"""
iReporter - Application Entry Point
Wires the client core together from settings.

Usage:
    async with IReporterApp() as app:
        await app.auth.login({"email": "jane@example.com", "password": "secret1"})
        await app.reports.list()

        search = app.new_search(on_location_change=print)
        search.on_query_change("Kampala")
"""

from typing import Optional

import httpx

from ireporter.auth.service import AuthService
from ireporter.core.config import settings
from ireporter.core.logging import get_logger, setup_logging
from ireporter.media.pipeline import MediaPipeline
from ireporter.notifications.channel import NotificationChannel
from ireporter.reports.controller import ReportController
from ireporter.reports.service import ReportService
from ireporter.search.coordinator import LocationCallback, SearchCoordinator, UpdateCallback
from ireporter.search.geocoder import NominatimGeocoder
from ireporter.transport.client import ApiClient
from ireporter.transport.credentials import CredentialStore, MemoryCredentialStore

logger = get_logger(__name__)


class IReporterApp:
    """
    One session of the client core.

    Owns the API client and geocoder; report, auth and search components
    share the same credential store.
    """

    def __init__(
        self,
        credentials: Optional[CredentialStore] = None,
        notifier: Optional[NotificationChannel] = None,
        geocoder: Optional[NominatimGeocoder] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        configure_logging: bool = True
    ):
        """
        Build the application.

        Args:
            credentials: Token store; in-memory when omitted
            notifier: Sink for user-visible notifications
            geocoder: Location search backend; Nominatim when omitted
            transport: Custom httpx transport for the API client
            configure_logging: Call setup_logging() with the configured level
        """
        if configure_logging:
            setup_logging()

        self.credentials = credentials or MemoryCredentialStore()
        self.api = ApiClient(credentials=self.credentials, transport=transport)
        self.geocoder = geocoder or NominatimGeocoder()

        self.auth = AuthService(self.api, self.credentials)
        self.reports = ReportController(ReportService(self.api), notifier=notifier)

        logger.info(f"iReporter client ready ({settings.app_env}, API {self.api.base_url})")

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()

    def new_media(self) -> MediaPipeline:
        """Fresh attachment pipeline for one report form."""
        return MediaPipeline()

    def new_search(
        self,
        on_location_change: Optional[LocationCallback] = None,
        on_update: Optional[UpdateCallback] = None
    ) -> SearchCoordinator:
        """Search coordinator for one location picker."""
        return SearchCoordinator(
            self.geocoder,
            on_location_change=on_location_change,
            on_update=on_update,
        )

    async def aclose(self) -> None:
        await self.api.aclose()
        await self.geocoder.aclose()
