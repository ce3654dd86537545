"""Import service providers (artisans) from a CSV export.

Column headers in these exports vary in spelling and encoding, so columns
are located by case-insensitive substring match rather than by exact name.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..geocoding.report import ProgressReporter
from ..geocoding.resolver import MultiPassResolver
from ..geocoding.storage import DuckDBCandidateStore
from ..utils.errors import DataValidationError

logger = logging.getLogger(__name__)

# Column key -> header fragments, first match wins
COLUMN_CANDIDATES: dict[str, tuple[str, ...]] = {
    'email': ('mail',),
    'phone': ('phone', 'telephone', 'phon'),
    'legal_rep': ('sentant', 'legal'),
    'address': ('siege', 'siège', 'Ã¨ge'),
    'category': ('gorie',),
}
COMPANY_COLUMN = 'Name'


def find_column(columns: Iterable[Any], *candidates: str) -> Optional[str]:
    """Return the first column whose header contains one of `candidates`."""
    for col in columns:
        header = str(col).lower()
        for c in candidates:
            if c.lower() in header:
                return col
    return None


class ArtisanColumns(BaseModel):
    """Header names resolved from one CSV file."""
    email: str
    phone: str
    company: Optional[str] = None
    legal_rep: Optional[str] = None
    address: Optional[str] = None
    category: Optional[str] = None

    @model_validator(mode='after')
    def _has_name_source(self) -> 'ArtisanColumns':
        if not self.company and not self.legal_rep:
            raise ValueError("needs a company 'Name' or a legal representative column")
        return self


class ArtisanRow(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    email: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    name: str = Field(min_length=1)
    company_name: Optional[str] = None
    specialty: Optional[str] = None
    address: Optional[str] = None

    @field_validator('email')
    @classmethod
    def _lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator('company_name', 'specialty', 'address')
    @classmethod
    def _empty_to_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


@dataclass
class ImportSummary:
    total: int = 0
    inserted: int = 0
    skipped: int = 0
    duplicates: int = 0
    geocoded: int = 0


class ArtisanImporter:
    """Reads a CSV export, geocodes each new artisan and inserts it.

    Artisans whose address cannot be resolved are still inserted, without
    coordinates, so a later geocoding sweep can pick them up.
    """

    def __init__(
        self,
        store: DuckDBCandidateStore,
        resolver: MultiPassResolver,
        reporter: Optional[ProgressReporter] = None,
    ):
        self.store = store
        self.resolver = resolver
        self.reporter = reporter

    @staticmethod
    def resolve_columns(columns: Iterable[Any], source: str = 'csv') -> ArtisanColumns:
        columns = list(columns)
        found: dict[str, Any] = {
            key: find_column(columns, *candidates) for key, candidates in COLUMN_CANDIDATES.items()
        }
        found['company'] = next(
            (c for c in columns if str(c).strip().lower() == COMPANY_COLUMN.lower()), None
        )
        try:
            return ArtisanColumns.model_validate(found)
        except ValidationError as e:
            raise DataValidationError.from_pydantic(source, e) from e

    @staticmethod
    def read_csv(csv_path: Path | str) -> pd.DataFrame:
        return pd.read_csv(csv_path, dtype=str, keep_default_na=False, encoding='utf-8-sig')

    @staticmethod
    def _row_values(raw: dict[str, Any], columns: ArtisanColumns) -> dict[str, Any]:
        def get(col: Optional[str]) -> str:
            return str(raw.get(col) or '').strip() if col else ''

        company = get(columns.company)
        category = get(columns.category)
        return {
            'email': get(columns.email),
            'phone': get(columns.phone),
            'name': get(columns.legal_rep) or company,
            'company_name': company,
            'specialty': category.split(',')[0].strip(),
            'address': get(columns.address),
        }

    @staticmethod
    def new_id() -> str:
        return f'art_{uuid.uuid4().hex[:12]}'

    def import_csv(self, csv_path: Path | str) -> ImportSummary:
        """
        Import every usable row of a CSV file.

        Args:
            csv_path: Path to the CSV export

        Returns:
            ImportSummary with inserted/skipped/duplicate counts

        Raises:
            DataValidationError: the file lacks a required column
        """
        frame = self.read_csv(csv_path)
        columns = self.resolve_columns(frame.columns, source=str(csv_path))
        logger.info(f"Columns: {' | '.join(map(str, frame.columns))}")

        records = frame.to_dict(orient='records')
        summary = ImportSummary(total=len(records))
        seen: set[str] = set()

        for i, raw in enumerate(records, start=1):
            values = self._row_values(raw, columns)
            label = values['company_name'] or values['name'] or '?'

            try:
                row = ArtisanRow(**values)
            except ValidationError as e:
                missing = sorted({str(err['loc'][0]) for err in e.errors() if err.get('loc')})
                summary.skipped += 1
                self._report(i, summary.total, 'SKIP', label, f"missing: {' '.join(missing)}")
                continue

            if row.email in seen or self.store.email_exists(row.email):
                summary.duplicates += 1
                self._report(i, summary.total, 'DUPE', row.email)
                continue
            seen.add(row.email)

            result = self.resolver.resolve(row.address)
            self.store.insert_artisan(
                record_id=self.new_id(),
                name=row.name,
                email=row.email,
                phone=row.phone,
                company_name=row.company_name,
                specialty=row.specialty,
                address=row.address,
                coordinates=result.coordinates if result.is_success() else None,
            )
            summary.inserted += 1
            if result.is_success():
                summary.geocoded += 1

            self._report(
                i, summary.total, 'OK', label,
                f'{result.coordinates} [{result.pass_used}]' if result.is_success() else 'no coords',
            )

        logger.info(
            f"Import complete: {summary.inserted} inserted, {summary.skipped} skipped, "
            f"{summary.duplicates} duplicates"
        )
        if self.reporter:
            self.reporter.import_summary(summary)
        return summary

    def _report(self, index: int, total: int, status: str, label: str, detail: str = '') -> None:
        logger.debug(f"{status} {label} {detail}")
        if self.reporter:
            self.reporter.import_row(index, total, status, label, detail)
