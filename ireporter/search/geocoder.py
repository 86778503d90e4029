"""
iReporter - Geocoding Client
Free-text place lookup through OpenStreetMap Nominatim.
"""

import asyncio
import logging
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ireporter.core.config import settings
from ireporter.core.errors import ErrorCode
from ireporter.core.geo import Location
from ireporter.transport.client import ApiClient
from ireporter.transport.envelope import Envelope

logger = logging.getLogger(__name__)


class SearchResult(BaseModel):
    """A geocoded place: coordinates plus a display label."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)
    label: str = Field(min_length=1)

    @classmethod
    def from_nominatim(cls, item: Any) -> "SearchResult":
        """
        Validate one Nominatim search item.

        Raises:
            pydantic.ValidationError: Item lacks usable coordinates or a label
        """
        if not isinstance(item, dict):
            item = {}
        return cls(lat=item.get("lat"), lon=item.get("lon"), label=item.get("display_name"))

    def to_location(self) -> Location:
        return Location(lat=self.lat, lng=self.lon)


class NominatimGeocoder:
    """
    Client for the Nominatim search API.

    Nominatim's usage policy allows at most one request per second, so calls
    are spaced by min_interval.
    """

    def __init__(
        self,
        client: Optional[ApiClient] = None,
        limit: Optional[int] = None,
        min_interval: float = 1.0
    ):
        """
        Initialize the geocoder.

        Args:
            client: Unauthenticated ApiClient pointed at a Nominatim instance
            limit: Maximum number of results per query
            min_interval: Minimum seconds between two requests
        """
        self._client = client or ApiClient(
            base_url=settings.geocoder_base_url,
            headers={"User-Agent": settings.geocoder_user_agent},
        )
        self.limit = limit if limit is not None else settings.search_result_limit
        self.min_interval = min_interval
        self._last_request_time: Optional[float] = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _rate_limit(self) -> None:
        """Ensure we don't exceed rate limits."""
        loop = asyncio.get_running_loop()
        if self._last_request_time is not None:
            elapsed = loop.time() - self._last_request_time
            if elapsed < self.min_interval:
                await asyncio.sleep(self.min_interval - elapsed)
        self._last_request_time = loop.time()

    async def search(self, query: str, limit: Optional[int] = None) -> Envelope:
        """
        Geocode an address or place name.

        Args:
            query: Free-text place query
            limit: Override the default result limit

        Returns:
            Envelope with a list of SearchResult; malformed items are dropped
        """
        await self._rate_limit()

        params = {
            "q": query,
            "format": "json",
            "limit": limit if limit is not None else self.limit,
            "addressdetails": 1,
        }
        envelope = await self._client.get("/search", params=params, auth_required=False)
        if not envelope.success:
            return envelope

        if not isinstance(envelope.data, list):
            return Envelope.fail(
                "Unexpected geocoder response",
                ErrorCode.MALFORMED_RESPONSE,
                envelope.status_code,
            )

        results: List[SearchResult] = []
        for item in envelope.data:
            try:
                results.append(SearchResult.from_nominatim(item))
            except ValidationError as e:
                logger.warning(f"Skipping malformed geocoder result: {e.errors()[0]['msg']}")
                continue

        logger.debug(f"Geocoded '{query}': {len(results)} results")
        return Envelope.ok(results, envelope.status_code)

    async def reverse(self, lat: float, lng: float) -> Envelope:
        """
        Reverse geocode coordinates to a display label.

        Args:
            lat: Latitude
            lng: Longitude

        Returns:
            Envelope with the address string
        """
        await self._rate_limit()

        params = {
            "lat": lat,
            "lon": lng,
            "format": "json",
        }
        envelope = await self._client.get("/reverse", params=params, auth_required=False)
        if not envelope.success:
            return envelope

        label = envelope.data.get("display_name") if isinstance(envelope.data, dict) else None
        if not label:
            return Envelope.fail(
                "No address found for this location",
                ErrorCode.MALFORMED_RESPONSE,
                envelope.status_code,
            )
        return Envelope.ok(label, envelope.status_code)
