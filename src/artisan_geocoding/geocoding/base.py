"""
Abstract base classes for the geocoding system.

These define the interfaces that all concrete implementations must follow.
"""

from abc import ABC, abstractmethod
from typing import Optional, List

from .models import AddressRecord, Coordinates, LookupOutcome


class Normalizer(ABC):
    """
    Abstract base for address string normalizers.

    Normalizers transform a free-text address into a form suitable
    for a geocoding text query (e.g., "BAT A, 12 rue X" → "12 rue X").
    """

    @abstractmethod
    def normalize(self, value: str, context: Optional[str] = None) -> str:
        """
        Normalize a string value.

        Args:
            value: String to normalize
            context: Optional context (unused by the address normalizers)

        Returns:
            Normalized string, empty when nothing usable remains
        """
        pass


class Geocoder(ABC):
    """
    Abstract base for geocoders.

    Geocoders find coordinates for a free-text query. They never raise
    on upstream failures: every failure is reported through the outcome.
    """

    @abstractmethod
    def search(self, query: Optional[str]) -> LookupOutcome:
        """
        Run a single text search.

        Args:
            query: Free-text address query

        Returns:
            LookupOutcome with coordinates or the failure status
        """
        pass

    def lookup(self, query: Optional[str]) -> Optional[Coordinates]:
        """Coordinates for `query`, or None for any kind of failure."""
        outcome = self.search(query)
        return outcome.coordinates if outcome.is_success() else None

    def close(self) -> None:
        """Release connections. Geocoders without any hold nothing to release."""
        pass


class CandidateStore(ABC):
    """
    Abstract base for the persistence store holding service providers.

    Only the two coordinate fields are ever written by the pipeline.
    """

    @abstractmethod
    def fetch_candidates(self) -> List[AddressRecord]:
        """Return every service provider with an address but no coordinates."""
        pass

    @abstractmethod
    def update_coordinates(self, record_id: str, coordinates: Coordinates) -> None:
        """Set latitude/longitude on one record, leaving every other field untouched."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close connections/cleanup resources."""
        pass


class RateLimiter(ABC):
    """
    Abstract base for rate limiters.

    Rate limiters control the rate at which requests are made,
    useful for respecting API usage policies.
    """

    @abstractmethod
    def wait(self) -> None:
        """Block until it's safe to make another request."""
        pass
