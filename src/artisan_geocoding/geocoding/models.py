"""
Core data models for address resolution and geocoding operations.

These immutable, frozen dataclasses serve as the contract between
different components of the geocoding pipeline.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, List, Dict
from enum import StrEnum
from pathlib import Path

import pandas as pd


class GeocodePass(StrEnum):
    """Query shape used for one resolution attempt, most precise first."""
    FULL = "full"
    NO_NUMBER = "no-number"
    CITY_ONLY = "city-only"


class LookupStatus(StrEnum):
    """Status of a single lookup against the geocoding service."""
    OK = "ok"
    NOT_FOUND = "not_found"
    INVALID_INPUT = "invalid_input"
    API_ERROR = "api_error"


@dataclass(frozen=True)
class Coordinates:
    """A WGS84 point returned by the geocoding service."""
    latitude: float
    longitude: float

    def is_valid(self) -> bool:
        """Check that both values are within valid geographic ranges."""
        try:
            return -90 <= self.latitude <= 90 and -180 <= self.longitude <= 180
        except (TypeError, ValueError):
            return False

    def __str__(self) -> str:
        return f"{self.latitude:.4f}, {self.longitude:.4f}"


@dataclass(frozen=True)
class AddressRecord:
    """
    A persisted service provider whose address lacks coordinates.

    Owned by the store; the resolver only ever reads `raw_address`.
    """
    id: str
    display_name: str
    raw_address: str


@dataclass(frozen=True)
class LookupOutcome:
    """The result of one request to the geocoding service."""
    query: str
    status: LookupStatus = LookupStatus.NOT_FOUND
    coordinates: Optional[Coordinates] = None
    error: Optional[str] = None

    def is_success(self) -> bool:
        return (
            self.status == LookupStatus.OK
            and self.coordinates is not None
            and self.coordinates.is_valid()
        )


@dataclass(frozen=True)
class PassAttempt:
    """One pass that was actually sent to the geocoding service."""
    pass_name: GeocodePass
    query: str
    status: LookupStatus


@dataclass(frozen=True)
class ResolutionResult:
    """
    The outcome of resolving one raw address.

    Transient: only `coordinates` is ever written back to the store.
    `attempts` lists the passes that reached the geocoding service, in order.
    """
    coordinates: Optional[Coordinates] = None
    pass_used: Optional[GeocodePass] = None
    address_variant_used: Optional[str] = None
    cleaned_address: Optional[str] = None
    attempts: List[PassAttempt] = field(default_factory=list)

    def is_success(self) -> bool:
        return self.coordinates is not None and self.coordinates.is_valid()


@dataclass
class BatchSummary:
    """Counters and leftovers of one geocoding sweep."""
    total: int = 0
    fixed: int = 0
    failed: int = 0
    unresolved: List[AddressRecord] = field(default_factory=list)
    persist_errors: Dict[str, str] = field(default_factory=dict)
    passes: Dict[str, int] = field(default_factory=dict)

    def record_fixed(self, pass_used: GeocodePass) -> None:
        self.fixed += 1
        self.passes[pass_used.value] = self.passes.get(pass_used.value, 0) + 1

    def record_failed(self, record: AddressRecord, persist_error: Optional[str] = None) -> None:
        self.failed += 1
        self.unresolved.append(record)
        if persist_error is not None:
            self.persist_errors[record.id] = persist_error

    def to_frame(self) -> pd.DataFrame:
        """Unresolved records as a DataFrame, one row per record."""
        rows = [
            {
                "id": r.id,
                "name": r.display_name,
                "address": r.raw_address,
                "reason": "persist_error" if r.id in self.persist_errors else "not_found",
                "error": self.persist_errors.get(r.id, ""),
            }
            for r in self.unresolved
        ]
        return pd.DataFrame(rows, columns=["id", "name", "address", "reason", "error"])


@dataclass
class GeocodingPipelineConfig:
    """Configuration for the geocoding pipeline."""
    # API settings
    api_base_url: str = "https://nominatim.openstreetmap.org/search"
    user_agent: str = "MonolithePortal/1.0 (contact@monolithe.pro)"
    country_code: str = "fr"
    api_timeout: float = 10.0

    # Pacing between consecutive lookups; <= 0 disables it
    min_request_interval_s: float = 1.1

    # Persistence
    db_path: Optional[Path] = None
    unresolved_report_path: Optional[Path] = None

    @classmethod
    def from_settings(cls, settings: Any = None, **overrides: Any) -> "GeocodingPipelineConfig":
        """Create a config from application settings, with explicit overrides winning.

        Args:
            settings: A `Settings` instance (defaults to the module-level one)
            **overrides: Field values that take precedence over settings

        Returns:
            GeocodingPipelineConfig
        """
        if settings is None:
            # Lazy import so models stay importable without reading the environment
            from ..settings import settings as app_settings
            settings = app_settings

        cfg_values: Dict[str, Any] = {
            "api_base_url": settings.geocoder_url,
            "user_agent": settings.geocoder_user_agent,
            "country_code": settings.geocoder_country,
            "api_timeout": settings.geocoder_timeout,
            "min_request_interval_s": settings.geocoder_min_interval,
            "db_path": settings.db_path,
        }
        cfg_values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**cfg_values)
