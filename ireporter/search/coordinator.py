"""
Location search coordinator
Debounced, cancelable free-text lookup driving location selection.
"""

import asyncio
import logging
from typing import Callable, List, Optional

from ireporter.core.config import settings
from ireporter.core.constants import DEFAULT_MAP_CENTER
from ireporter.core.errors import ErrorCode, InvalidInput
from ireporter.core.geo import Location, is_valid_coordinate
from ireporter.search.geocoder import SearchResult
from ireporter.transport.envelope import Envelope

logger = logging.getLogger(__name__)

LocationCallback = Callable[[Location], None]
UpdateCallback = Callable[[List[SearchResult], bool], None]


class SearchCoordinator:
    """
    Turns keystrokes into geocoder lookups.

    Each query change bumps a generation counter, cancels the pending lookup
    and clears the results. A lookup starts only after a quiet period, and
    its response is applied only if its generation is still current.
    Lookup failures leave the results empty and are not surfaced.

    Must be driven from a running event loop.
    """

    def __init__(
        self,
        geocoder,
        on_location_change: Optional[LocationCallback] = None,
        on_update: Optional[UpdateCallback] = None,
        debounce_seconds: Optional[float] = None,
        min_query_length: Optional[int] = None
    ):
        """
        Initialize the coordinator.

        Args:
            geocoder: Object with async search(query) -> Envelope[list[SearchResult]]
            on_location_change: Called with the chosen Location
            on_update: Called with (results, loading) whenever either changes
            debounce_seconds: Quiet period before a lookup is issued
            min_query_length: Shorter queries clear results without a lookup
        """
        self.geocoder = geocoder
        self.on_location_change = on_location_change
        self.on_update = on_update
        self.debounce_seconds = (
            debounce_seconds if debounce_seconds is not None else settings.search_debounce_seconds
        )
        self.min_query_length = (
            min_query_length if min_query_length is not None else settings.search_min_query_length
        )

        self.query = ""
        self.results: List[SearchResult] = []
        self.loading = False
        self.generation = 0
        self.center = Location(*DEFAULT_MAP_CENTER)

        self._task: Optional[asyncio.Task] = None

    def on_query_change(self, text: str) -> None:
        """Handle a change of the search box text."""
        self.query = text
        self._cancel_pending()
        self.generation += 1
        self._set_state([], False)

        query = text.strip()
        if len(query) < self.min_query_length:
            return

        self._task = asyncio.get_running_loop().create_task(
            self._lookup(query, self.generation)
        )

    async def _lookup(self, query: str, generation: int) -> None:
        await asyncio.sleep(self.debounce_seconds)

        self._set_state(self.results, True)
        logger.debug(f"Searching '{query}' (generation {generation})")
        try:
            envelope = await self.geocoder.search(query)
        except Exception as e:
            logger.warning(f"Geocoder raised for '{query}': {e}")
            envelope = Envelope.fail(str(e) or "Location search failed", ErrorCode.NETWORK_ERROR)
        self.apply_results(generation, envelope)

    def apply_results(self, generation: int, envelope: Envelope) -> bool:
        """
        Apply a lookup response if it belongs to the current generation.

        Returns:
            False if the response was stale and ignored
        """
        if generation != self.generation:
            logger.debug(f"Discarding stale results (generation {generation} < {self.generation})")
            return False

        if envelope.success:
            self._set_state(list(envelope.data or []), False)
        else:
            logger.warning(f"Location search failed: {envelope.error}")
            self._set_state([], False)
        return True

    def select(self, result: SearchResult) -> Location:
        """
        Choose a search result.

        Hands the coordinates to on_location_change, shows the label in the
        search box without searching again, and clears the results.
        """
        location = result.to_location()

        self._cancel_pending()
        self.generation += 1
        self.query = result.label
        self.center = location

        if self.on_location_change:
            self.on_location_change(location)

        self._set_state([], False)
        return location

    def pick_point(self, lat: float, lng: float) -> Location:
        """
        Choose a location directly, e.g. from a map click.

        Raises:
            InvalidInput: Coordinates out of range
        """
        if not is_valid_coordinate(lat, lng):
            raise InvalidInput(f"Invalid coordinates: ({lat}, {lng})")

        location = Location(lat=lat, lng=lng)
        self.center = location
        if self.on_location_change:
            self.on_location_change(location)
        return location

    async def wait_idle(self) -> None:
        """Wait until the pending lookup, if any, has finished or been cancelled."""
        task = self._task
        if task is not None and not task.done():
            await asyncio.wait([task])

    async def aclose(self) -> None:
        self._cancel_pending()
        self.generation += 1
        await self.wait_idle()
        self._set_state(self.results, False)

    def _cancel_pending(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()

    def _set_state(self, results: List[SearchResult], loading: bool) -> None:
        changed = results != self.results or loading != self.loading
        self.results = results
        self.loading = loading
        if changed and self.on_update:
            self.on_update(list(results), loading)
