"""
rotolink services.

Usage:
    from rotolink.services import fetch_lineups, build_lineups
"""

from rotolink.services.lineups import (
    FixtureLineup,
    LineupBuildStats,
    LineupOutputEntry,
    build_lineup_result,
    build_lineups,
    fetch_inputs,
    fetch_lineups,
    serialize_lineups,
)

__all__ = [
    "FixtureLineup",
    "LineupBuildStats",
    "LineupOutputEntry",
    "build_lineup_result",
    "build_lineups",
    "fetch_inputs",
    "fetch_lineups",
    "serialize_lineups",
]
