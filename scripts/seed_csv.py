"""CLI entry point for CSV seeding.

Usage:
    python -m scripts.seed_csv --db-url sqlite:///data.db --seeder UsersTableSeeder
    python -m scripts.seed_csv --db-url sqlite:///data.db --table users --file users.csv.gz \
        [--delimiter ';'] [--offset 0] [--chunk-size 50] [--mapping 0=id,2=name]
"""

import argparse
import logging
import os
import sys

from csvseed import create_service
from csvseed.seeding import CsvSeeder, Pbkdf2Hasher, SeedConfig, parse_column_mapping
from csvseed.seeding.hashing import PBKDF2_ITERATIONS

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Seed a database table from a CSV file")
    parser.add_argument(
        "--db-url",
        default=os.environ.get("DATABASE_URL"),
        help="Database URL (sqlite:/// or postgresql://); defaults to $DATABASE_URL",
    )
    parser.add_argument(
        "--seeder", help="Seeder name, e.g. UsersTableSeeder; derives table and file"
    )
    parser.add_argument("--table", help="Destination table")
    parser.add_argument("--file", help="Path to the CSV file (plain or gzipped)")
    parser.add_argument(
        "--base-path", default=".", help="Project root holding database/seeds/csvs"
    )
    parser.add_argument("--delimiter", default=";", help="Field delimiter")
    parser.add_argument("--offset", type=int, default=0, help="Rows to skip before the header")
    parser.add_argument("--chunk-size", type=int, default=50, help="Rows per insert")
    parser.add_argument(
        "--no-trim", action="store_true", help="Keep leading/trailing whitespace"
    )
    parser.add_argument("--hashable", default="password", help="Column to hash one-way")
    parser.add_argument("--no-hash", action="store_true", help="Disable hashing")
    parser.add_argument(
        "--hash-iterations",
        type=int,
        default=PBKDF2_ITERATIONS,
        help="PBKDF2 rounds per hashed value",
    )
    parser.add_argument("--mapping", help="Explicit column mapping, e.g. 0=id,2=name")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    return parser


def build_config(args: argparse.Namespace) -> SeedConfig:
    options = {
        "delimiter": args.delimiter,
        "offset_rows": args.offset,
        "insert_chunk_size": args.chunk_size,
        "trim_whitespace": not args.no_trim,
        "hashable": None if args.no_hash else args.hashable,
        "column_mapping": parse_column_mapping(args.mapping) if args.mapping else None,
    }
    if args.table:
        options["table"] = args.table
    if args.file:
        options["filename"] = args.file

    if args.seeder:
        return SeedConfig.for_seeder(args.seeder, args.base_path, **options)
    if not (args.table and args.file):
        raise ValueError("Either --seeder or both --table and --file are required")
    return SeedConfig(**options)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if not args.db_url:
        logger.error("No database URL. Pass --db-url or set DATABASE_URL.")
        return 1

    try:
        config = build_config(args)
        hasher = Pbkdf2Hasher(args.hash_iterations)
    except ValueError as e:
        parser.error(str(e))

    service = create_service(args.db_url)
    service.connect()
    try:
        result = CsvSeeder(service, config, hasher).run()
    finally:
        service.close()

    if not result:
        return 1
    logger.info("Done. %d rows seeded into %s.", result.inserted, config.table)
    return 0


if __name__ == "__main__":
    sys.exit(main())
