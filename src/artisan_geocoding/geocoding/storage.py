"""
DuckDB storage for service providers and their coordinates.

The pipeline reads candidates from the `users` table and writes back
only the `lat`/`lng` pair; the stored address is never touched.
"""

import logging
from pathlib import Path
from typing import Optional, List, Dict, Any

import pandas as pd
import duckdb

from ..db.db import connect
from .base import CandidateStore
from .models import AddressRecord, BatchSummary, Coordinates


logger = logging.getLogger(__name__)

SERVICE_PROVIDER_ROLE = "ARTISAN"


class DuckDBCandidateStore(CandidateStore):
    """
    DuckDB-backed candidate store.

    Selects service providers that have an address but no coordinates,
    and persists coordinates record by record.
    """

    SELECT_CANDIDATES = """
    SELECT id, name, address
    FROM users
    WHERE role = ?
      AND lat IS NULL
      AND address IS NOT NULL
      AND trim(address) <> ''
    ORDER BY name, id
    """

    def __init__(self, db_path: Path | str | None = None, con: Optional[duckdb.DuckDBPyConnection] = None):
        """
        Initialize DuckDB storage.

        Args:
            db_path: Path to DuckDB database file (defaults to settings.db_path)
            con: Existing connection to reuse instead of opening db_path
        """
        self.db_path = db_path
        self.con = con if con is not None else connect(db_path)
        logger.info(f"Initialized DuckDB candidate store: {db_path or 'default path'}")

    def __enter__(self) -> "DuckDBCandidateStore":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def fetch_candidates(self) -> List[AddressRecord]:
        rows = self.con.execute(self.SELECT_CANDIDATES, [SERVICE_PROVIDER_ROLE]).fetchall()
        return [
            AddressRecord(id=str(row[0]), display_name=row[1] or "", raw_address=row[2])
            for row in rows
        ]

    def update_coordinates(self, record_id: str, coordinates: Coordinates) -> None:
        """Store coordinates on one record."""
        if coordinates is None or not coordinates.is_valid():
            raise ValueError(f"Refusing to store invalid coordinates for {record_id}: {coordinates}")

        self.con.execute(
            "UPDATE users SET lat = ?, lng = ? WHERE id = ?",
            [coordinates.latitude, coordinates.longitude, record_id],
        )

    def email_exists(self, email: str) -> bool:
        row = self.con.execute(
            "SELECT 1 FROM users WHERE lower(email) = lower(?) LIMIT 1", [email]
        ).fetchone()
        return row is not None

    def insert_artisan(
        self,
        record_id: str,
        name: str,
        email: str,
        phone: str,
        company_name: Optional[str] = None,
        specialty: Optional[str] = None,
        address: Optional[str] = None,
        coordinates: Optional[Coordinates] = None,
    ) -> None:
        """Insert a new, not yet onboarded service provider."""
        if coordinates is not None and not coordinates.is_valid():
            raise ValueError(f"Refusing to store invalid coordinates for {record_id}: {coordinates}")

        self.con.execute(
            """
            INSERT INTO users
            (id, name, email, role, is_onboarded, company_name, specialty,
             address, phone, lat, lng, documents_status)
            VALUES (?, ?, ?, ?, FALSE, ?, ?, ?, ?, ?, ?, 'missing')
            """,
            [
                record_id,
                name,
                email,
                SERVICE_PROVIDER_ROLE,
                company_name,
                specialty,
                address,
                phone,
                coordinates.latitude if coordinates else None,
                coordinates.longitude if coordinates else None,
            ],
        )

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics."""
        result = self.con.execute(
            """
            SELECT
                COUNT(*),
                COUNT(*) FILTER (WHERE lat IS NOT NULL)
            FROM users WHERE role = ?
            """,
            [SERVICE_PROVIDER_ROLE],
        ).fetchone()
        total, located = (result or (0, 0))

        return {
            'service_providers': total,
            'with_coordinates': located,
            'without_coordinates': total - located,
        }

    def close(self) -> None:
        """Close database connection."""
        if self.con:
            self.con.close()
            self.con = None
            logger.info("Closed DuckDB connection")


def export_unresolved_csv(summary: BatchSummary, csv_path: Path | str) -> int:
    """
    Export the records left without coordinates to CSV for manual follow-up.

    Args:
        summary: Summary of a finished sweep
        csv_path: Path to output CSV file

    Returns:
        Number of records exported
    """
    csv_path = Path(csv_path)
    frame: pd.DataFrame = summary.to_frame()

    if len(frame) > 0:
        csv_path.parent.mkdir(parents=True, exist_ok=True)
        frame.to_csv(csv_path, index=False)
        logger.info(f"Exported {len(frame)} unresolved records to {csv_path}")

    return len(frame)
