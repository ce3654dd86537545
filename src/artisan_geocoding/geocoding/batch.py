"""
Sequential geocoding sweep over every service provider missing coordinates.

Records are processed one at a time; the resolver's rate limiter spaces
every request to the geocoding service, so there is no fan-out across
records or across passes.
"""

import logging
from typing import Optional

from .base import CandidateStore
from .models import BatchSummary, GeocodingPipelineConfig
from .report import ProgressReporter
from .resolver import MultiPassResolver

logger = logging.getLogger(__name__)


class BatchRunner:
    """
    Runs one full sweep: fetch candidates, resolve each, persist coordinates.

    A record is written only when the resolver produced coordinates, and
    only its coordinates are written. A failed write is logged and counted
    as a failure; the sweep continues with the next record.
    """

    def __init__(
        self,
        store: CandidateStore,
        resolver: MultiPassResolver,
        reporter: Optional[ProgressReporter] = None,
    ):
        self.store = store
        self.resolver = resolver
        self.reporter = reporter

    @classmethod
    def from_config(
        cls,
        config: GeocodingPipelineConfig,
        store: CandidateStore,
        reporter: Optional[ProgressReporter] = None,
    ) -> "BatchRunner":
        """Wire a Nominatim-backed runner paced by `config.min_request_interval_s`."""
        from .geocoders import NominatimGeocoder
        from .throttling import rate_limiter_for_interval

        resolver = MultiPassResolver(
            geocoder=NominatimGeocoder.from_config(config),
            rate_limiter=rate_limiter_for_interval(config.min_request_interval_s),
        )
        return cls(store=store, resolver=resolver, reporter=reporter)

    def run(self, limit: Optional[int] = None) -> BatchSummary:
        """
        Run the sweep.

        Args:
            limit: Optional limit on number of records to process

        Returns:
            BatchSummary with fixed/failed counts and unresolved records
        """
        candidates = self.store.fetch_candidates()
        if limit is not None:
            candidates = candidates[:limit]

        summary = BatchSummary(total=len(candidates))
        logger.info(f"Found {len(candidates)} records without coordinates")
        if self.reporter:
            self.reporter.start(len(candidates))

        for i, record in enumerate(candidates, start=1):
            result = self.resolver.resolve(record.raw_address)
            persist_error = None

            if result.is_success():
                try:
                    self.store.update_coordinates(record.id, result.coordinates)
                except Exception as e:
                    logger.exception(f"Could not store coordinates for {record.id}")
                    persist_error = str(e)[:500]
                    summary.record_failed(record, persist_error=persist_error)
                else:
                    summary.record_fixed(result.pass_used)
                    logger.info(
                        f"{record.id} ({record.display_name}): {result.pass_used} -> {result.coordinates}"
                    )
            else:
                summary.record_failed(record)
                logger.info(f"{record.id} ({record.display_name}): no coordinates")

            if self.reporter:
                self.reporter.record(i, len(candidates), record, result, persist_error=persist_error)

        logger.info(f"Geocoding complete: {summary.fixed} fixed, {summary.failed} failed")
        if self.reporter and candidates:
            self.reporter.summary(summary)
        return summary
