#!/usr/bin/env python3
"""
Roster - Holiday date migration

Older holiday records stored a full YYYY-MM-DD date. Holidays recur every
year, so the stored form is MM-DD plus numeric month/day fields. This script
rewrites every record still in the old shape.

Usage:
    python scripts/migrate_holidays.py --dry-run
    python scripts/migrate_holidays.py --env production
"""
import argparse
import logging
import sys
from pathlib import Path

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from roster import create_app  # noqa: E402
from roster.error_handlers.exceptions import AppException  # noqa: E402
from roster.services import get_services  # noqa: E402


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Rewrite legacy YYYY-MM-DD holiday dates to MM-DD')
    parser.add_argument('--dry-run', action='store_true', help='Report changes without writing them')
    parser.add_argument('--env', default=None, help='Configuration name (development, testing, production)')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    logger = logging.getLogger('migrate_holidays')

    app = create_app(args.env)
    with app.app_context():
        try:
            changes = get_services().holidays.migrate_legacy_dates(dry_run=args.dry_run)
        except AppException as e:
            logger.error(f"Migration failed: {e}")
            return 1

    for holiday_id, old_date, new_date in changes:
        logger.info(f"{holiday_id}: {old_date} -> {new_date}")

    verb = 'would be updated' if args.dry_run else 'updated'
    logger.info(f"{len(changes)} holiday record(s) {verb}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
