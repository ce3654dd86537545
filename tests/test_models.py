from __future__ import annotations

from pathlib import Path

from artisan_geocoding.geocoding.models import (
    AddressRecord,
    BatchSummary,
    Coordinates,
    GeocodePass,
    GeocodingPipelineConfig,
    LookupOutcome,
    LookupStatus,
)
from artisan_geocoding.settings import Settings


def test_coordinates_validity_and_format():
    assert Coordinates(43.6045, 1.444).is_valid()
    assert not Coordinates(-91, 0).is_valid()
    assert str(Coordinates(43.60451, 1.44398)) == "43.6045, 1.4440"


def test_lookup_outcome_success_requires_valid_coordinates():
    assert LookupOutcome("q", LookupStatus.OK, Coordinates(1, 1)).is_success()
    assert not LookupOutcome("q", LookupStatus.OK, Coordinates(100, 1)).is_success()
    assert not LookupOutcome("q", LookupStatus.NOT_FOUND).is_success()


def test_config_from_settings_with_overrides():
    settings = Settings(
        db_path=Path("/tmp/portal.duckdb"),
        geocoder_url="http://localhost/search",
        geocoder_min_interval=2.0,
    )

    config = GeocodingPipelineConfig.from_settings(settings, min_request_interval_s=0.5, db_path=None)

    assert config.api_base_url == "http://localhost/search"
    assert config.min_request_interval_s == 0.5
    assert config.db_path == Path("/tmp/portal.duckdb")
    assert config.country_code == "fr"


def test_summary_counts_passes_and_frames_unresolved():
    summary = BatchSummary(total=3)
    summary.record_fixed(GeocodePass.FULL)
    summary.record_fixed(GeocodePass.CITY_ONLY)
    summary.record_failed(AddressRecord("a3", "Gamma", "Nowhere road"))

    assert summary.passes == {"full": 1, "city-only": 1}
    frame = summary.to_frame()
    assert list(frame.columns) == ["id", "name", "address", "reason", "error"]
    assert frame.iloc[0]["reason"] == "not_found"


def test_empty_summary_frame_has_columns():
    assert list(BatchSummary().to_frame().columns) == ["id", "name", "address", "reason", "error"]
