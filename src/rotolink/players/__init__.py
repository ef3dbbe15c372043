"""
Player identity module.

Matches RotoWire player names to canonical FPL player records. The two
providers never share an id, so matching works on names only, scoped to a
single team.

Key components:
- normalize_name: Accent/punctuation-insensitive name canonicalization
- classify_position: RotoWire position codes to GK/DEF/MID/FWD
- PlayerMatcher: Ordered cascade of name matching strategies

The matching strategy (in priority order) is documented in identity.py;
the first strategy to find a teammate wins.
"""

from rotolink.players.aliases import normalize_name
from rotolink.players.identity import (
    MATCH_STRATEGIES,
    CanonicalPlayer,
    MatchStrategy,
    PlayerMatch,
    PlayerMatcher,
    match_player,
)
from rotolink.players.positions import classify_position

__all__ = [
    "CanonicalPlayer",
    "MATCH_STRATEGIES",
    "MatchStrategy",
    "PlayerMatch",
    "PlayerMatcher",
    "classify_position",
    "match_player",
    "normalize_name",
]
