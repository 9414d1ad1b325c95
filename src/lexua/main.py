#!/usr/bin/env python
import argparse
import logging
import os
import sys

from dotenv import load_dotenv

load_dotenv()

from lexua.core.http import HttpClient
from lexua.core.utils import set_logging_level
from lexua.legislation.models import LegislationSource
from lexua.legislation.pipeline import SeedStore, ingest_laws
from lexua.legislation.verify import VerificationStatus, verify_official_match
from lexua.settings import HTTP_CACHE_DIR, SEED_DIR, SOURCE_DIR, SOURCE_NAME_MAPPING

logger = logging.getLogger(__name__)


def run_ingest(args: argparse.Namespace) -> int:
    source = LegislationSource(args.source)
    logger.info(f"Portal: {SOURCE_NAME_MAPPING[source.value]}")

    http_client = HttpClient(enable_cache=args.http_cache, cache_dir=HTTP_CACHE_DIR)
    stats = ingest_laws(
        source=source,
        limit=args.limit,
        skip_fetch=args.skip_fetch,
        http_client=http_client,
        source_dir=args.source_dir,
        store=SeedStore(args.seed_dir),
    )

    for doc_id, error in stats.failures:
        logger.warning(f"FAILED {doc_id}: {error}")
    print("\nIngestion Summary\n-----------------")
    print(stats.summary())
    print(f"Seed dir:    {os.path.abspath(args.seed_dir)}")

    return 1 if stats.failed and not stats.processed else 0


def run_verify(args: argparse.Namespace) -> int:
    results = verify_official_match(
        fetcher=HttpClient(enable_cache=args.http_cache, cache_dir=HTTP_CACHE_DIR),
        store=SeedStore(args.seed_dir),
    )
    for result in results:
        print(result)

    return 0 if all(result.status == VerificationStatus.MATCH for result in results) else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lexua",
        description="Ingest legislation from official portals into structured seed records",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--seed-dir", type=str, default=SEED_DIR, help="Directory for seed JSON files"
    )
    parser.add_argument(
        "--http-cache",
        action="store_true",
        help="Cache successful HTTP responses on disk between runs",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    ingest = subparsers.add_parser("ingest", help="Fetch, parse and seed the curated laws")
    ingest.add_argument(
        "-l",
        "--limit",
        type=int,
        default=None,
        help="Limit number of laws to process (default: no limit)",
    )
    ingest.add_argument(
        "--skip-fetch",
        action="store_true",
        help="Reuse cached source pages when they exist instead of fetching",
    )
    ingest.add_argument(
        "-s",
        "--source",
        type=str,
        choices=[source.value for source in LegislationSource],
        default=LegislationSource.RADA.value,
        help="Portal to ingest from (default: rada)",
    )
    ingest.add_argument(
        "--source-dir", type=str, default=SOURCE_DIR, help="Directory for cached source pages"
    )
    ingest.set_defaults(handler=run_ingest)

    verify = subparsers.add_parser(
        "verify", help="Compare stored provisions with the official print pages"
    )
    verify.set_defaults(handler=run_verify)

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Command line interface for ingestion and verification runs
    """
    args = build_parser().parse_args(argv)
    set_logging_level(logging.DEBUG if args.verbose else logging.INFO, service_name=args.command)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
