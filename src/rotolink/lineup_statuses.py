"""Shared lineup-status definitions and helpers.

This module is the single source of truth for the statuses written into the
lineups response and for how consumers (the notifier, the app) turn them into
an availability indicator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

# Document sections.
PREDICTED_LINEUP = "predicted_lineup"
INJURY_LIST = "injury_list"
SECTIONS: tuple[str, ...] = (PREDICTED_LINEUP, INJURY_LIST)

# Inline tags printed next to a player.
TAG_DOUBT = "QUES"
TAG_SUSPENDED = "SUS"
TAG_OUT = "OUT"

# Lineup statuses.
STARTER = "starter"
STARTER_DOUBT = "starter_doubt"
DOUBT = "doubt"
ABSENT = "absent"
ALL_LINEUP_STATUSES: tuple[str, ...] = (STARTER, STARTER_DOUBT, DOUBT, ABSENT)

# Reasons attached to ABSENT.
SUSPENDED = "suspended"
RULED_OUT = "ruled_out"

# Availability indicator shown to users.
STARTING = "starting"
AVAILABILITY_DOUBT = "doubt"
OUT = "out"
UNKNOWN = "unknown"

AVAILABILITY_BY_STATUS: dict[str, str] = {
    STARTER: STARTING,
    STARTER_DOUBT: AVAILABILITY_DOUBT,
    DOUBT: AVAILABILITY_DOUBT,
    ABSENT: OUT,
}

# FPL chance_of_playing values that still count as a doubt rather than out.
DOUBTFUL_CHANCES: frozenset[int] = frozenset({50, 75})


@dataclass(frozen=True)
class LineupStatus:
    """Status of one lineup entry; ``reason`` is only set for ABSENT."""
    status: str
    reason: str | None = None


def classify_status(section: str, inline_tag: str | None) -> LineupStatus:
    """Derive a lineup status from the document section and inline tag.

    ==================  =============  ======================
    section             inline tag     status
    ==================  =============  ======================
    predicted lineup    none           starter
    predicted lineup    QUES           starter_doubt
    predicted lineup    SUS            absent (suspended)
    predicted lineup    OUT            absent (ruled out)
    injury list         OUT            absent (ruled out)
    injury list         SUS            absent (suspended)
    injury list         anything else  doubt
    ==================  =============  ======================

    Unknown tags in the predicted lineup are treated as no tag.
    """
    tag = (inline_tag or "").strip().upper()

    if tag == TAG_OUT:
        return LineupStatus(ABSENT, RULED_OUT)
    if tag == TAG_SUSPENDED:
        return LineupStatus(ABSENT, SUSPENDED)

    if section == INJURY_LIST:
        return LineupStatus(DOUBT)
    if tag == TAG_DOUBT:
        return LineupStatus(STARTER_DOUBT)
    return LineupStatus(STARTER)


def availability_from_chance(chance_of_playing: int | None) -> str:
    """Availability from the roster provider's chance of playing alone.

    None (no flag) and 100 mean available; 75 and 50 are doubts; anything
    lower is out.
    """
    if chance_of_playing is None or chance_of_playing == 100:
        return STARTING
    if chance_of_playing in DOUBTFUL_CHANCES:
        return AVAILABILITY_DOUBT
    return OUT


def _entry_field(entry: Any, attr: str, wire_key: str) -> Any:
    if isinstance(entry, Mapping):
        return entry.get(wire_key)
    return getattr(entry, attr, None)


def _fixture_entries(fixture: Any) -> Iterable[Any]:
    if fixture is None:
        return ()
    if isinstance(fixture, Mapping):
        return [*(fixture.get("home") or ()), *(fixture.get("away") or ())]
    return [*fixture.home, *fixture.away]


def player_availability(
    lineups: Mapping[str, Any],
    fixture_key: str,
    player_id: int,
    chance_of_playing: int | None = None,
    *,
    has_roster_flag: bool = True,
) -> str:
    """Availability indicator for one player in one fixture.

    Looks the player up by canonical id in both sides of the fixture's lineup.
    When the document has no entry for them, falls back to the roster
    provider's chance of playing.

    Args:
        lineups: Lineups response, either the serialized JSON map or a map of
            FixtureLineup objects
        fixture_key: "<home_team_id>-<away_team_id>"
        player_id: Canonical player id
        chance_of_playing: Roster provider's chance of playing next round
        has_roster_flag: False when the roster provider has no record of the
            player at all, in which case there is nothing to fall back to

    Returns:
        One of "starting", "doubt", "out", "unknown"
    """
    for entry in _fixture_entries(lineups.get(fixture_key)):
        if _entry_field(entry, "canonical_id", "fpl_id") == player_id:
            status = _entry_field(entry, "status", "status")
            if status in AVAILABILITY_BY_STATUS:
                return AVAILABILITY_BY_STATUS[status]

    if has_roster_flag:
        return availability_from_chance(chance_of_playing)
    return UNKNOWN
