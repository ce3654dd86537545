from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Optional

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from artisan_geocoding.geocoding.base import Geocoder
from artisan_geocoding.geocoding.models import Coordinates, LookupOutcome, LookupStatus
from artisan_geocoding.geocoding.storage import DuckDBCandidateStore

TOULOUSE = Coordinates(latitude=43.6045, longitude=1.4440)


class StubGeocoder(Geocoder):
    """Answers from a callable and records every query it receives."""

    def __init__(self, answer: Callable[[str], Optional[Coordinates]] = lambda q: None):
        self.answer = answer
        self.queries: list[str] = []

    def search(self, query):
        self.queries.append(query)
        coords = self.answer(query)
        if coords is None:
            return LookupOutcome(query=query, status=LookupStatus.NOT_FOUND)
        return LookupOutcome(query=query, status=LookupStatus.OK, coordinates=coords)


@pytest.fixture
def stub_geocoder():
    return StubGeocoder


@pytest.fixture
def store(tmp_path):
    s = DuckDBCandidateStore(tmp_path / "portal.duckdb")
    yield s
    s.close()


def add_user(store, user_id, name, address, role="ARTISAN", email=None, lat=None, lng=None):
    store.con.execute(
        "INSERT INTO users (id, name, email, role, address, lat, lng) VALUES (?, ?, ?, ?, ?, ?, ?)",
        [user_id, name, email or f"{user_id}@example.fr", role, address, lat, lng],
    )
