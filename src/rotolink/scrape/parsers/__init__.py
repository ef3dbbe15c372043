"""
Parsers for scraped lineup data.

This module contains parsers for:
- The RotoWire soccer lineups page (match blocks, sides, player items)
"""

from rotolink.scrape.parsers.lineup import (
    LineupParseError,
    MatchBlock,
    RawPlayerEntry,
    parse_lineup_document,
)

__all__ = [
    "LineupParseError",
    "MatchBlock",
    "RawPlayerEntry",
    "parse_lineup_document",
]
