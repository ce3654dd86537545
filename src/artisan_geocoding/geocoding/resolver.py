"""
Multi-pass address resolution.

Tries progressively coarser query shapes against a Geocoder and stops at
the first success:

1. full       - the cleaned address
2. no-number  - the cleaned address without its house number
3. city-only  - "<postcode> <city>, France" taken from the raw address

A missing result is preferable to a wrong one, so the city-only pass only
runs when a valid postcode + city fragment exists.
"""

import logging
from typing import List, Optional

from .base import Geocoder, RateLimiter
from .models import Coordinates, GeocodePass, LookupOutcome, PassAttempt, ResolutionResult
from .normalizers import AddressCleaner, StreetNumberStripper, PostcodeCityExtractor
from .throttling import NoOpRateLimiter

logger = logging.getLogger(__name__)


class MultiPassResolver:
    """
    Resolves a raw address to coordinates through three ordered passes.

    Every request to the geocoder goes through `rate_limiter` first, so the
    pacing contract holds across passes and across records when the same
    resolver is reused.
    """

    def __init__(
        self,
        geocoder: Geocoder,
        rate_limiter: Optional[RateLimiter] = None,
        cleaner: Optional[AddressCleaner] = None,
        stripper: Optional[StreetNumberStripper] = None,
        extractor: Optional[PostcodeCityExtractor] = None,
    ):
        self.geocoder = geocoder
        self.rate_limiter = rate_limiter or NoOpRateLimiter()
        self.cleaner = cleaner or AddressCleaner()
        self.stripper = stripper or StreetNumberStripper()
        self.extractor = extractor or PostcodeCityExtractor()

    def _attempt(
        self,
        pass_name: GeocodePass,
        query: str,
        attempts: List[PassAttempt],
    ) -> LookupOutcome:
        self.rate_limiter.wait()
        outcome = self.geocoder.search(query)
        attempts.append(PassAttempt(pass_name=pass_name, query=query, status=outcome.status))
        logger.debug(f"Pass {pass_name}: '{query}' -> {outcome.status}")
        return outcome

    def resolve(self, raw_address: Optional[str]) -> ResolutionResult:
        """
        Resolve one raw address.

        Args:
            raw_address: The address as stored, never modified

        Returns:
            ResolutionResult; `coordinates` is None when every pass failed or
            was skipped
        """
        cleaned = self.cleaner.clean(raw_address)
        if cleaned is None:
            logger.debug(f"Nothing to geocode in {raw_address!r}")
            return ResolutionResult()

        attempts: List[PassAttempt] = []
        candidates = [(GeocodePass.FULL, cleaned)]

        street_only = self.stripper.strip_number(cleaned)
        if street_only and street_only != cleaned:
            candidates.append((GeocodePass.NO_NUMBER, street_only))

        for pass_name, query in candidates:
            outcome = self._attempt(pass_name, query, attempts)
            if outcome.is_success():
                return self._resolved(pass_name, query, outcome.coordinates, cleaned, attempts)

        # From the raw address, not the cleaned one
        city_only = self.extractor.extract(raw_address)
        if city_only:
            outcome = self._attempt(GeocodePass.CITY_ONLY, city_only, attempts)
            if outcome.is_success():
                return self._resolved(
                    GeocodePass.CITY_ONLY, city_only, outcome.coordinates, cleaned, attempts
                )

        logger.info(f"No coordinates after {len(attempts)} attempt(s) for '{cleaned}'")
        return ResolutionResult(cleaned_address=cleaned, attempts=attempts)

    def _resolved(
        self,
        pass_name: GeocodePass,
        query: str,
        coordinates: Coordinates,
        cleaned: str,
        attempts: List[PassAttempt],
    ) -> ResolutionResult:
        if pass_name == GeocodePass.CITY_ONLY:
            logger.warning(f"Low precision: '{cleaned}' resolved from '{query}' only")
        else:
            logger.info(f"Resolved '{cleaned}' via {pass_name} pass")
        return ResolutionResult(
            coordinates=coordinates,
            pass_used=pass_name,
            address_variant_used=query,
            cleaned_address=cleaned,
            attempts=attempts,
        )

    def close(self) -> None:
        """Close the underlying geocoder's connections."""
        self.geocoder.close()
