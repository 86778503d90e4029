"""
iReporter - Location Search
Geocoding client and the debounced search coordinator.
"""

from ireporter.search.geocoder import NominatimGeocoder, SearchResult
from ireporter.search.coordinator import SearchCoordinator

__all__ = [
    "NominatimGeocoder",
    "SearchResult",
    "SearchCoordinator",
]
