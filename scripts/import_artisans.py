# Import artisans from a CSV export and geocode their head-office address
from argparse import ArgumentParser
import logging
import sys
from pathlib import Path

from artisan_geocoding.geocoding import (
    DuckDBCandidateStore,
    GeocodingPipelineConfig,
    MultiPassResolver,
    NominatimGeocoder,
    ProgressReporter,
    rate_limiter_for_interval,
)
from artisan_geocoding.importers import ArtisanImporter
from artisan_geocoding.settings import settings
from artisan_geocoding.utils.errors import DataValidationError

if __name__ == '__main__':
    settings.log_path.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s', filename=str(settings.log_path / 'import_artisans.log'))

    parser = ArgumentParser(description='Import artisans from CSV')
    parser.add_argument('csv', type=Path)
    parser.add_argument('--db', type=Path, default=None, help='DuckDB database (default: DB_PATH)')
    parser.add_argument('--interval', '-i', type=float, default=None, help='Seconds between requests (default: 1.1)')
    args = parser.parse_args()

    if not args.csv.exists():
        print(f'CSV not found: {args.csv}', file=sys.stderr)
        sys.exit(1)

    config = GeocodingPipelineConfig.from_settings(settings, db_path=args.db, min_request_interval_s=args.interval)
    resolver = MultiPassResolver(
        geocoder=NominatimGeocoder.from_config(config),
        rate_limiter=rate_limiter_for_interval(config.min_request_interval_s),
    )

    with DuckDBCandidateStore(config.db_path) as store:
        importer = ArtisanImporter(store, resolver, reporter=ProgressReporter())
        try:
            importer.import_csv(args.csv)
        except DataValidationError as e:
            print(f'{e}\n{e.summary()}', file=sys.stderr)
            sys.exit(2)
        finally:
            resolver.close()
        totals = store.get_summary()

    print(f"Service providers: {totals['service_providers']} ({totals['without_coordinates']} still without coordinates)")
