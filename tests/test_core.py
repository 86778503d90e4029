"""
Tests for configuration, geography helpers, notifications and application wiring
"""
import logging
import pytest

import httpx

from ireporter import app as app_module
from ireporter.app import IReporterApp
from ireporter.core.config import Settings
from ireporter.core.errors import ErrorCode, FileTooLarge, TooManyMediaFiles
from ireporter.core.geo import Location, is_valid_coordinate
from ireporter.core.logging import get_logger, setup_logging
from ireporter.notifications import (
    LoggingNotificationChannel,
    MemoryNotificationChannel,
    NotificationChannel,
    NotificationVariant,
)
from ireporter.search import NominatimGeocoder
from ireporter.transport import ApiClient


class TestSettings:
    """Test suite for Settings."""

    def test_defaults(self):
        """Test default values."""
        settings = Settings(_env_file=None)

        assert settings.api_base_url == "http://localhost:5001/api"
        assert settings.api_timeout_seconds == 30.0
        assert settings.max_media_files == 4
        assert settings.max_file_size_bytes == 50 * 1024 * 1024
        assert settings.search_debounce_seconds == 0.4
        assert settings.is_development

    def test_env_override(self, monkeypatch):
        """Test environment variables override defaults."""
        monkeypatch.setenv("API_TIMEOUT_SECONDS", "5")
        monkeypatch.setenv("APP_ENV", "production")

        settings = Settings(_env_file=None)

        assert settings.api_timeout_seconds == 5.0
        assert settings.is_production


class TestGeo:
    """Test suite for geographic helpers."""

    def test_valid_coordinate(self):
        """Test bounds checking."""
        assert is_valid_coordinate(0.3476, 32.5825)
        assert is_valid_coordinate(-90, 180)
        assert not is_valid_coordinate(91, 0)
        assert not is_valid_coordinate(0, -181)

    def test_location_from_json_string(self):
        """Test JSON-encoded location parsing."""
        assert Location.from_api('{"lat": 1.5, "lng": 2.5}') == Location(lat=1.5, lng=2.5)

    def test_location_from_lon_key(self):
        """Test lat/lon spelling."""
        assert Location.from_api({"lat": "1.5", "lon": "2.5"}) == Location(lat=1.5, lng=2.5)

    def test_location_invalid(self):
        """Test unusable values return None."""
        assert Location.from_api(None) is None
        assert Location.from_api("null") is None
        assert Location.from_api("{broken") is None
        assert Location.from_api({"lat": 100, "lng": 0}) is None

    def test_location_to_json(self):
        """Test JSON encoding."""
        assert Location(lat=1.5, lng=2.5).to_json() == '{"lat": 1.5, "lng": 2.5}'


class TestErrors:
    """Test suite for error messages."""

    def test_too_many_media_files(self):
        """Test limit appears in the message."""
        error = TooManyMediaFiles(4)
        assert error.code == ErrorCode.TOO_MANY_MEDIA_FILES
        assert error.message == "Maximum 4 media files allowed"

    def test_file_too_large(self):
        """Test size limit is shown in MB."""
        error = FileTooLarge("clip.mp4", 60 * 1024 * 1024, 50 * 1024 * 1024)
        assert error.message == "clip.mp4: Files must be less than 50MB"


class TestNotifications:
    """Test suite for notification channels."""

    def test_memory_channel(self):
        """Test notifications are recorded and forwarded."""
        forwarded = []
        channel = MemoryNotificationChannel(on_notify=forwarded.append)

        channel.info("Report created!", "Your report has been submitted successfully.")
        channel.error("Error", "Upload failed")

        assert [n.title for n in channel.sent] == ["Report created!", "Error"]
        assert channel.errors[0].variant == NotificationVariant.DESTRUCTIVE
        assert forwarded == channel.sent

    def test_logging_channel(self, caplog):
        """Test errors are logged as warnings."""
        channel = LoggingNotificationChannel()

        with caplog.at_level(logging.INFO, logger="ireporter.notifications.channel"):
            channel.error("Cannot delete", "Report not found")

        assert "Cannot delete" in caplog.text
        assert caplog.records[-1].levelno == logging.WARNING

    def test_channel_requires_notify(self):
        """Test a channel without notify cannot be constructed."""
        class SilentChannel(NotificationChannel):
            pass

        with pytest.raises(TypeError):
            SilentChannel()


class TestLogging:
    """Test suite for logging setup."""

    def test_setup_logging(self):
        """Test package logger level is applied."""
        setup_logging("DEBUG")
        assert logging.getLogger("ireporter").level == logging.DEBUG

    def test_get_logger(self):
        """Test loggers are namespaced."""
        assert get_logger("ireporter.reports").name == "ireporter.reports"


class TestIReporterApp:
    """Test suite for application wiring."""

    async def test_session_shared_across_components(self, fake_api, user_payload, report_payload):
        """Test a login token is used by the report controller."""
        fake_api.add("POST", "/auth/login", json_body={"token": "jwt-1", "user": user_payload})
        fake_api.add("GET", "/reports", json_body={"reports": [report_payload]})

        async with IReporterApp(
            transport=httpx.MockTransport(fake_api),
            geocoder=NominatimGeocoder(
                client=ApiClient(base_url="https://nominatim.test", transport=httpx.MockTransport(fake_api)),
                min_interval=0,
            ),
            configure_logging=False,
        ) as app:
            await app.auth.login({"email": "jane@example.com", "password": "secret1"})
            envelope = await app.reports.list()

        assert envelope.success
        assert [r.id for r in app.reports.reports] == ["1"]
        assert fake_api.requests[1].headers["Authorization"] == "Bearer jwt-1"

    async def test_factories(self):
        """Test per-form helpers use configured limits."""
        app = IReporterApp(configure_logging=False)

        media = app.new_media()
        search = app.new_search()

        assert media.max_files == 4
        assert search.geocoder is app.geocoder
        await app.aclose()

    def test_configures_logging(self, monkeypatch):
        """Test logging is set up on construction."""
        calls = []
        monkeypatch.setattr(app_module, "setup_logging", lambda: calls.append(True))

        IReporterApp()

        assert calls == [True]
