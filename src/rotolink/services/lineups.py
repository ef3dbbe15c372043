"""
Lineup service: RotoWire predicted lineups matched to FPL players.

This is the main entry point for lineup data. It:
1. Fetches the RotoWire lineups page and the FPL roster concurrently
2. Parses the page into match blocks (one per fixture)
3. Maps both team abbreviations to FPL team ids, dropping unmapped fixtures
4. Resolves every entry to an FPL player within its own team
5. Classifies position and lineup status for every entry

The result is keyed "<home_team_id>-<away_team_id>" in document order.
Nothing is cached or stored here; caching is left to the HTTP layer.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from rotolink.config import Settings
from rotolink.lineup_statuses import ABSENT, classify_status
from rotolink.players.identity import CanonicalPlayer, PlayerMatcher
from rotolink.players.positions import classify_position
from rotolink.scrape.base import SourceClient
from rotolink.scrape.parsers.lineup import MatchBlock, RawPlayerEntry, parse_lineup_document
from rotolink.tables import LookupTables, get_default_tables
from rotolink.teams import TeamCodeMapper

logger = logging.getLogger(__name__)


@dataclass
class LineupOutputEntry:
    """
    One player in the lineups response.

    ``canonical_id`` is None when no FPL player matched; ``display_name``
    then falls back to the RotoWire name.
    """
    canonical_id: Optional[int]
    display_name: str
    raw_name: str
    canonical_position: str
    status: str
    absence_reason: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the response field names."""
        payload: dict[str, Any] = {
            "fpl_id": self.canonical_id,
            "web_name": self.display_name,
            "rw_name": self.raw_name,
            "rw_position": self.canonical_position,
            "status": self.status,
        }
        if self.status == ABSENT:
            payload["reason"] = self.absence_reason
        return payload


@dataclass
class FixtureLineup:
    """Both sides of one fixture."""
    home: list[LineupOutputEntry] = field(default_factory=list)
    away: list[LineupOutputEntry] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.home and not self.away

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {
            "home": [entry.to_dict() for entry in self.home],
            "away": [entry.to_dict() for entry in self.away],
        }


# Fixture key -> lineup, in document order
LineupResult = dict[str, FixtureLineup]


@dataclass
class LineupBuildStats:
    """Statistics from one lineup build."""
    blocks_seen: int = 0
    fixtures_built: int = 0
    skipped_unmapped_team: int = 0
    skipped_empty: int = 0
    players_matched: int = 0
    players_unmatched: int = 0
    unmapped_abbreviations: list[str] = field(default_factory=list)

    def summary(self) -> str:
        """Return a human-readable summary of the build."""
        lines = [
            "Lineup build complete:",
            f"  Match blocks parsed:      {self.blocks_seen}",
            f"  Fixtures built:           {self.fixtures_built}",
            f"  Skipped (unmapped team):  {self.skipped_unmapped_team}",
            f"  Skipped (no players):     {self.skipped_empty}",
            f"  Players matched:          {self.players_matched}",
            f"  Players unmatched:        {self.players_unmatched}",
        ]
        if self.unmapped_abbreviations:
            lines.append(f"  Unmapped abbreviations: {', '.join(sorted(set(self.unmapped_abbreviations)))}")
        return "\n".join(lines)


def fixture_key(home_team_id: int, away_team_id: int) -> str:
    """Result key for a fixture, e.g. "12-7"."""
    return f"{home_team_id}-{away_team_id}"


def build_entry(
    entry: RawPlayerEntry,
    team_id: int,
    matcher: PlayerMatcher,
    tables: LookupTables,
    stats: Optional[LineupBuildStats] = None,
) -> LineupOutputEntry:
    """Resolve, classify and package one RawPlayerEntry."""
    player = matcher.match(entry.raw_name, team_id)
    if stats is not None:
        if player is None:
            stats.players_unmatched += 1
        else:
            stats.players_matched += 1

    lineup_status = classify_status(entry.section, entry.inline_tag)
    return LineupOutputEntry(
        canonical_id=player.id if player else None,
        display_name=player.display_name if player else entry.raw_name,
        raw_name=entry.raw_name,
        canonical_position=classify_position(entry.raw_position, tables.positions),
        status=lineup_status.status,
        absence_reason=lineup_status.reason,
    )


def build_fixture(
    block: MatchBlock,
    home_team_id: int,
    away_team_id: int,
    matcher: PlayerMatcher,
    tables: LookupTables,
    stats: Optional[LineupBuildStats] = None,
) -> FixtureLineup:
    return FixtureLineup(
        home=[build_entry(e, home_team_id, matcher, tables, stats) for e in block.home],
        away=[build_entry(e, away_team_id, matcher, tables, stats) for e in block.away],
    )


def build_lineups(
    document: str,
    roster: Sequence[CanonicalPlayer],
    tables: Optional[LookupTables] = None,
) -> tuple[LineupResult, LineupBuildStats]:
    """
    Turn a lineups page and a roster into the lineup map.

    Synchronous and side-effect free. Fixtures with an unknown team
    abbreviation or with no players on either side are left out; a fixture
    key that appears twice keeps the later block.

    Args:
        document: RotoWire lineups page HTML
        roster: Canonical players, in provider order
        tables: Lookup tables; defaults to the configured tables

    Returns:
        Tuple of (lineups keyed by fixture, build statistics)
    """
    tables = tables or get_default_tables()
    teams = TeamCodeMapper.from_tables(tables)
    matcher = PlayerMatcher(roster, substitutions=tables.letter_substitutions)
    stats = LineupBuildStats()
    result: LineupResult = {}

    for block in parse_lineup_document(document):
        stats.blocks_seen += 1

        home_team_id = teams.resolve(block.home_abbr)
        away_team_id = teams.resolve(block.away_abbr)
        if home_team_id is None or away_team_id is None:
            stats.skipped_unmapped_team += 1
            stats.unmapped_abbreviations.extend(
                abbr for abbr, team_id in ((block.home_abbr, home_team_id), (block.away_abbr, away_team_id))
                if team_id is None
            )
            logger.info("Skipping %s vs %s: unmapped team abbreviation", block.home_abbr, block.away_abbr)
            continue

        fixture = build_fixture(block, home_team_id, away_team_id, matcher, tables, stats)
        if fixture.is_empty():
            stats.skipped_empty += 1
            continue

        key = fixture_key(home_team_id, away_team_id)
        if key in result:
            logger.warning("Fixture %s appears twice; keeping the later block", key)
        result[key] = fixture

    stats.fixtures_built = len(result)
    return result, stats


def serialize_lineups(result: LineupResult) -> dict[str, dict[str, list[dict[str, Any]]]]:
    """JSON-ready form of a LineupResult."""
    return {key: fixture.to_dict() for key, fixture in result.items()}


async def fetch_sources(client: SourceClient) -> tuple[str, list[CanonicalPlayer]]:
    """
    Fetch the lineups page and the roster concurrently.

    If either fetch fails (or the caller is cancelled) the other request is
    cancelled and the error propagates unchanged.
    """
    document_task = asyncio.ensure_future(client.fetch_lineups_page())
    roster_task = asyncio.ensure_future(client.fetch_roster())
    try:
        document, roster = await asyncio.gather(document_task, roster_task)
    except BaseException:
        for task in (document_task, roster_task):
            task.cancel()
        raise
    return document, roster


async def fetch_inputs(
    config: Optional[Settings] = None,
    client: Optional[SourceClient] = None,
) -> tuple[str, list[CanonicalPlayer]]:
    """
    Fetch the lineups page and the decoded roster.

    Args:
        config: Settings for upstream URLs and headers
        client: Pre-built SourceClient (must not be entered yet)

    Raises:
        UpstreamFetchError: If either source fails
        UpstreamDecodeError: If the roster cannot be decoded
    """
    client = client or SourceClient(config)
    async with client:
        document, roster = await fetch_sources(client)

    logger.info("Fetched lineups page (%d chars) and %d roster players", len(document), len(roster))
    return document, roster


def build_lineup_result(
    document: str,
    roster: Sequence[CanonicalPlayer],
    tables: Optional[LookupTables] = None,
) -> LineupResult:
    """build_lineups() with the build statistics logged."""
    result, stats = build_lineups(document, roster, tables)
    logger.info(stats.summary())
    return result


async def fetch_lineups(
    config: Optional[Settings] = None,
    tables: Optional[LookupTables] = None,
    client: Optional[SourceClient] = None,
) -> LineupResult:
    """
    Fetch both sources and build the lineup map.

    The build runs on the calling thread.

    Args:
        config: Settings for upstream URLs and headers
        tables: Lookup tables; defaults to the configured tables
        client: Pre-built SourceClient (must not be entered yet)

    Returns:
        LineupResult

    Raises:
        UpstreamFetchError: If either source fails
        UpstreamDecodeError: If the roster cannot be decoded
    """
    document, roster = await fetch_inputs(config, client)
    return build_lineup_result(document, roster, tables)
