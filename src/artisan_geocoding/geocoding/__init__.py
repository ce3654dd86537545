"""
- Models: Data structures (AddressRecord, Coordinates, ResolutionResult, ...)
- Base classes: Abstract interfaces
- Normalizers: Address cleaning, street-number stripping, postcode/city extraction
- Geocoders: Nominatim text search
- Throttling: Request pacing
- Resolver: Three-pass fallback resolution
- Storage: DuckDB candidate store
- Batch: Sequential sweep over records missing coordinates
"""

from .models import (
    GeocodePass,
    LookupStatus,
    Coordinates,
    AddressRecord,
    LookupOutcome,
    PassAttempt,
    ResolutionResult,
    BatchSummary,
    GeocodingPipelineConfig,
)

from .base import (
    Normalizer,
    Geocoder,
    CandidateStore,
    RateLimiter,
)

from .normalizers import (
    AddressCleaner,
    StreetNumberStripper,
    PostcodeCityExtractor,
)

from .throttling import (
    SimpleRateGate,
    NoOpRateLimiter,
    rate_limiter_for_interval,
)

from .geocoders import (
    NominatimGeocoder,
)

from .resolver import (
    MultiPassResolver,
)

from .storage import (
    DuckDBCandidateStore,
    export_unresolved_csv,
)

from .report import (
    ProgressReporter,
)

from .batch import (
    BatchRunner,
)

__all__ = [
    # Models
    "GeocodePass",
    "LookupStatus",
    "Coordinates",
    "AddressRecord",
    "LookupOutcome",
    "PassAttempt",
    "ResolutionResult",
    "BatchSummary",
    "GeocodingPipelineConfig",
    # Base classes
    "Normalizer",
    "Geocoder",
    "CandidateStore",
    "RateLimiter",
    # Normalizers
    "AddressCleaner",
    "StreetNumberStripper",
    "PostcodeCityExtractor",
    # Throttling
    "SimpleRateGate",
    "NoOpRateLimiter",
    "rate_limiter_for_interval",
    # Geocoders
    "NominatimGeocoder",
    # Resolution
    "MultiPassResolver",
    # Storage
    "DuckDBCandidateStore",
    "export_unresolved_csv",
    # Reporting / batch
    "ProgressReporter",
    "BatchRunner",
]
