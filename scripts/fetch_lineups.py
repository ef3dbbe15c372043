#!/usr/bin/env python3
"""
Fetch RotoWire predicted lineups matched to FPL players.

Prints the same JSON the /api/lineups endpoint serves.

Usage:
    # Whole lineup map to stdout
    python scripts/fetch_lineups.py

    # One fixture (home FPL team id 12 vs away 7)
    python scripts/fetch_lineups.py --fixture 12-7

    # Write to a file with debug logging
    python scripts/fetch_lineups.py --output lineups.json --log-level DEBUG
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rotolink.config import settings
from rotolink.scrape.base import UpstreamError
from rotolink.services.lineups import fetch_lineups, serialize_lineups

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch RotoWire lineups matched to FPL players")
    parser.add_argument("--output", type=Path, help="Write JSON here instead of stdout")
    parser.add_argument("--fixture", help="Only output this fixture key, e.g. 12-7")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format=settings.log_format,
        datefmt="%H:%M:%S",
    )

    try:
        result = asyncio.run(fetch_lineups(settings))
    except UpstreamError as exc:
        logger.error("Could not build lineups (%s): %s", exc.code, exc)
        return 1

    payload = serialize_lineups(result)
    if args.fixture:
        if args.fixture not in payload:
            logger.error("Fixture %s not in lineups (%d fixtures)", args.fixture, len(payload))
            return 1
        payload = {args.fixture: payload[args.fixture]}

    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if args.output:
        args.output.write_text(text + "\n", encoding="utf-8")
        logger.info("Wrote %d fixtures to %s", len(payload), args.output)
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
