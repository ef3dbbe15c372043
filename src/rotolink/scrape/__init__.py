"""
Upstream data collection.

- SourceClient: async httpx client for the RotoWire page and FPL roster
- parsers.lineup: RotoWire lineups page parser (BeautifulSoup)

No retries are attempted; a failed fetch raises UpstreamFetchError.
"""

from rotolink.scrape.base import (
    FPL,
    ROTOWIRE,
    SourceClient,
    UpstreamDecodeError,
    UpstreamError,
    UpstreamFetchError,
    parse_roster,
)

__all__ = [
    "FPL",
    "ROTOWIRE",
    "SourceClient",
    "UpstreamDecodeError",
    "UpstreamError",
    "UpstreamFetchError",
    "parse_roster",
]
