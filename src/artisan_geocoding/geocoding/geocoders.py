"""
Nominatim search API wrapper implementing the Geocoder interface.

Uses the OpenStreetMap Nominatim free-text search, restricted to one
country and one candidate per query.

Reference: https://nominatim.org/release-docs/latest/api/Search/
"""

from typing import Any, Optional
import logging
import requests

from .base import Geocoder
from .models import Coordinates, LookupOutcome, LookupStatus, GeocodingPipelineConfig

logger = logging.getLogger(__name__)


class NominatimGeocoder(Geocoder):
    """
    Nominatim search wrapper.

    Issues a single GET per query and never raises: network faults,
    non-2xx responses, malformed payloads and empty candidate lists are all
    reported through the returned LookupOutcome.

    The client does not throttle itself; callers space their requests
    (see MultiPassResolver and throttling.SimpleRateGate).
    """

    def __init__(
        self,
        api_base_url: str = "https://nominatim.openstreetmap.org/search",
        user_agent: str = "MonolithePortal/1.0 (contact@monolithe.pro)",
        country_code: str = "fr",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize Nominatim wrapper.

        Args:
            api_base_url: Search endpoint URL
            user_agent: Client identifier sent with every request
            country_code: ISO country code the search is restricted to
            timeout: HTTP request timeout in seconds
            session: Optional requests session (one is created if omitted)
        """
        self.api_base_url = api_base_url
        self.user_agent = user_agent
        self.country_code = country_code
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        })

        logger.info(
            f"Initialized NominatimGeocoder: {api_base_url}, "
            f"country={country_code}, timeout={timeout}s"
        )

    @classmethod
    def from_config(cls, config: GeocodingPipelineConfig, **kwargs: Any) -> "NominatimGeocoder":
        return cls(
            api_base_url=config.api_base_url,
            user_agent=config.user_agent,
            country_code=config.country_code,
            timeout=config.api_timeout,
            **kwargs,
        )

    def _extract_first_candidate(self, payload: Any) -> Optional[Coordinates]:
        """
        Extract coordinates from the first candidate of a search response.

        Returns:
            Coordinates, or None when the candidate list is empty

        Raises:
            ValueError, KeyError, TypeError, IndexError on malformed payloads
        """
        if not payload:
            return None
        if not isinstance(payload, list):
            raise TypeError(f"Expected a list of candidates, got {type(payload).__name__}")

        candidate = payload[0]
        coords = Coordinates(
            latitude=float(candidate["lat"]),
            longitude=float(candidate["lon"]),
        )
        if not coords.is_valid():
            raise ValueError(f"Coordinates out of range: {coords}")
        return coords

    def search(self, query: Optional[str]) -> LookupOutcome:
        """
        Run one text search.

        Args:
            query: Free-text address

        Returns:
            LookupOutcome with coordinates or the failure status
        """
        text = (query or "").strip()
        if not text:
            return LookupOutcome(query=text, status=LookupStatus.INVALID_INPUT)

        params = {
            "q": text,
            "format": "json",
            "limit": 1,
            "countrycodes": self.country_code,
        }

        logger.debug(f"Querying Nominatim: {text}")

        try:
            response = self.session.get(self.api_base_url, params=params, timeout=self.timeout)
            logger.debug(f"Nominatim query status: {response.status_code}")
            response.raise_for_status()
            coords = self._extract_first_candidate(response.json())
        except (requests.RequestException, ValueError, KeyError, TypeError, IndexError) as e:
            logger.warning(f"Lookup failed for '{text}': {e}")
            return LookupOutcome(
                query=text,
                status=LookupStatus.API_ERROR,
                error=str(e)[:500],
            )

        if coords is None:
            return LookupOutcome(query=text, status=LookupStatus.NOT_FOUND)

        return LookupOutcome(query=text, status=LookupStatus.OK, coordinates=coords)

    def close(self) -> None:
        self.session.close()
