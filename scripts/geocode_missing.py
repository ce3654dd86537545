# Geocode service providers that have an address but no coordinates
from argparse import ArgumentParser
import logging
from pathlib import Path

from artisan_geocoding.geocoding import (
    BatchRunner,
    DuckDBCandidateStore,
    GeocodingPipelineConfig,
    ProgressReporter,
    export_unresolved_csv,
)
from artisan_geocoding.settings import settings

if __name__ == '__main__':
    settings.log_path.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s', filename=str(settings.log_path / 'geocode_missing.log'))

    parser = ArgumentParser(description='Geocode service providers missing coordinates')
    parser.add_argument('--db', type=Path, default=None, help='DuckDB database (default: DB_PATH)')
    parser.add_argument('--interval', '-i', type=float, default=None, help='Seconds between requests (default: 1.1)')
    parser.add_argument('--report', '-r', type=Path, default=None, help='Write unresolved records to this CSV')
    parser.add_argument('--limit', '-n', type=int, default=None)
    args = parser.parse_args()

    config = GeocodingPipelineConfig.from_settings(
        settings,
        db_path=args.db,
        min_request_interval_s=args.interval,
        unresolved_report_path=args.report,
    )

    with DuckDBCandidateStore(config.db_path) as store:
        runner = BatchRunner.from_config(config, store=store, reporter=ProgressReporter())
        try:
            summary = runner.run(limit=args.limit)
        finally:
            runner.resolver.close()
        totals = store.get_summary()

    print(f"Located: {totals['with_coordinates']}/{totals['service_providers']} service providers")

    if config.unresolved_report_path and summary.unresolved:
        n = export_unresolved_csv(summary, config.unresolved_report_path)
        print(f'Wrote {n} unresolved records to {config.unresolved_report_path}')
