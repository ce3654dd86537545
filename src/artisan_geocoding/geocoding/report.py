"""Console report for geocoding sweeps and imports."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Optional, TextIO

from colorama import Fore, Style

from .models import AddressRecord, BatchSummary, GeocodePass, ResolutionResult

if TYPE_CHECKING:
    from ..importers.artisans import ImportSummary

NAME_WIDTH = 25


class ProgressReporter:
    """Prints one line per record and a closing summary.

    Usage:
        reporter = ProgressReporter()
        reporter.start(total)
        reporter.record(1, total, record, result)
        reporter.summary(summary)
    """

    def __init__(self, stream: Optional[TextIO] = None, show_cleaning: bool = True):
        self.stream = stream or sys.stdout
        self.show_cleaning = show_cleaning

    def _print(self, text: str = '') -> None:
        print(text, file=self.stream)

    @staticmethod
    def counter(index: int, total: int) -> str:
        width = max(3, len(str(total)))
        return f'[{index:0{width}d}/{total}]'

    def start(self, total: int) -> None:
        self._print(f'Found {total} service providers without coordinates')
        if not total:
            self._print('Nothing to do.')

    def record(
        self,
        index: int,
        total: int,
        record: AddressRecord,
        result: ResolutionResult,
        persist_error: Optional[str] = None,
    ) -> None:
        """Print the progress line of one record."""
        name = (record.display_name or record.id)[:NAME_WIDTH].ljust(NAME_WIDTH)
        line = f'{self.counter(index, total)} {name}'

        if self.show_cleaning and result.cleaned_address and result.cleaned_address != record.raw_address:
            self._print(line)
            self._print(f'  original: {record.raw_address}')
            self._print(f'  cleaned:  {result.cleaned_address}')
            line = '  result:  '

        if persist_error is not None:
            self._print(f'{line} {Fore.RED}NOT SAVED{Style.RESET_ALL}  ({persist_error})')
        elif result.is_success():
            colour = Fore.YELLOW if result.pass_used == GeocodePass.CITY_ONLY else Fore.GREEN
            self._print(f'{line} {colour}OK{Style.RESET_ALL}  [{result.pass_used}]  {result.coordinates}')
        else:
            self._print(
                f'{line} {Fore.RED}FAILED{Style.RESET_ALL}  ({result.cleaned_address or "no address"})'
            )

    def summary(self, summary: BatchSummary, list_unresolved: bool = True) -> None:
        self._print()
        self._print('-' * 40)
        self._print(f'Fixed:  {summary.fixed}')
        for pass_name, count in summary.passes.items():
            self._print(f'  {pass_name:<10} {count}')
        hint = '  <-- check addresses above' if summary.failed else ''
        self._print(f'Failed: {summary.failed}{hint}')
        self._print('-' * 40)

        if list_unresolved and summary.unresolved:
            self._print('Still unresolved:')
            for rec in summary.unresolved:
                self._print(f'  {rec.id}  {rec.display_name}  {rec.raw_address}')

    def import_row(self, index: int, total: int, status: str, label: str, detail: str = '') -> None:
        colour = {'OK': Fore.GREEN, 'SKIP': Fore.YELLOW, 'DUPE': Fore.YELLOW}.get(status, '')
        text = f'{self.counter(index, total)} {colour}{status:<7}{Style.RESET_ALL} {label[:30]:<30}'
        self._print(f'{text}  {detail}'.rstrip())

    def import_summary(self, summary: ImportSummary) -> None:
        self._print()
        self._print('-' * 40)
        self._print(f'Inserted:   {summary.inserted}  ({summary.geocoded} with coordinates)')
        self._print(f'Skipped:    {summary.skipped}')
        self._print(f'Duplicates: {summary.duplicates}')
        self._print('-' * 40)
