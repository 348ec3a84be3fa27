"""Command line entry point.

Usage:
    python -m solana_exposure_scanner scan <address> [--network devnet] [--json]
    python -m solana_exposure_scanner config
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from pydantic import ValidationError

from solana_exposure_scanner import __version__
from solana_exposure_scanner.config import Settings, get_settings
from solana_exposure_scanner.ingestor.models import SolanaNetwork
from solana_exposure_scanner.pipeline import (
    ExposurePipeline,
    InvalidAddressError,
    NoDataError,
)
from solana_exposure_scanner.reporter.formatter import format_report

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_ADDRESS = 2
EXIT_NO_DATA = 3


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="solana-exposure-scanner",
        description="Estimate how exposed a Solana address is to de-anonymization",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan = subparsers.add_parser("scan", help="Scan an address and print its exposure score")
    scan.add_argument("address", help="Base58 Solana address")
    scan.add_argument(
        "--network",
        choices=[n.value for n in SolanaNetwork],
        default=None,
        help="Solana cluster (default: HELIUS_NETWORK)",
    )
    scan.add_argument("--json", action="store_true", help="Print the raw result as JSON")
    scan.add_argument("--no-cache", action="store_true", help="Bypass the result cache")

    subparsers.add_parser("config", help="Print the effective configuration (secrets redacted)")
    return parser


async def run_scan(args: argparse.Namespace, settings: Settings) -> int:
    network = SolanaNetwork(args.network) if args.network else settings.helius.network
    pipeline = ExposurePipeline.from_settings(settings)
    try:
        result = await pipeline.scan(args.address, network=network, use_cache=not args.no_cache)
    except InvalidAddressError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INVALID_ADDRESS
    except NoDataError:
        print(f"No data found for {args.address} on {network.value}", file=sys.stderr)
        return EXIT_NO_DATA
    finally:
        await pipeline.close()

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(format_report(result))
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = create_parser().parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_FAILURE

    logging.basicConfig(
        level=settings.get_logging_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings.validate_requirements(command=args.command)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if args.command == "config":
        print(json.dumps(settings.redacted_summary(), indent=2))
        return EXIT_OK

    try:
        return asyncio.run(run_scan(args, settings))
    except Exception as e:
        logger.error("Scan failed: %s", e)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
