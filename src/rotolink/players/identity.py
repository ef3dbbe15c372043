"""
Player identity matching between RotoWire and FPL.

RotoWire and FPL never share an identifier, so a RotoWire entry has to be
resolved to an FPL player from its printed name alone. The matcher works on
one team at a time (a name is only ever compared with players of the team
the entry was listed under) and tries an ordered cascade of strategies:

1. Exact display name                  ("Salah" / "Salah")
2. Display name is a suffix            ("Mohamed Salah" / "Salah")
3. Display name contained, length >= 4
4. Display name contained, length >= 3 ("Bukayo Saka" / "Saka")
5. Last raw token equals/ends display  ("Bruno Fernandes" / "B.Fernandes")
6. Hyphenated display name contained   ("Trent Alexander-Arnold")
7. First + last name equals raw name
8. Last raw token equals last name     ("Idrissa Gueye" / second_name "Gueye")
9. First name matches                  ("Alisson", "Rodri")
10. Any raw token (>= 4) inside display

The first strategy that finds anything wins, and within a strategy the first
player in roster order wins. There is no scoring: two teammates with the same
surname resolve to whichever comes first in the roster.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from rotolink.players.aliases import (
    first_token,
    last_token,
    normalize_name,
    split_name_tokens,
)
from rotolink.players.positions import position_from_element_type
from rotolink.tables import get_default_tables

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CanonicalPlayer:
    """
    A player record from the canonical (FPL) roster.

    Loaded fresh for every lineup request and never mutated.
    """
    id: int
    display_name: str
    first_name: str
    last_name: str
    team_id: int
    position_code: str = ""
    # FPL chance_of_playing_next_round; None means no availability flag
    chance_of_playing: Optional[int] = None

    @classmethod
    def from_fpl_element(cls, element: Mapping[str, Any]) -> "CanonicalPlayer":
        """
        Build a player from an FPL bootstrap-static element.

        Raises:
            KeyError: If a required field is missing
            TypeError, ValueError: If id or team are not numeric
        """
        return cls(
            id=int(element["id"]),
            display_name=element["web_name"] or "",
            first_name=element.get("first_name") or "",
            last_name=element.get("second_name") or "",
            team_id=int(element["team"]),
            position_code=position_from_element_type(element.get("element_type")),
            chance_of_playing=element.get("chance_of_playing_next_round"),
        )

    def __repr__(self) -> str:
        return f"<CanonicalPlayer(id={self.id}, name='{self.display_name}', team={self.team_id})>"


@dataclass(frozen=True)
class Candidate:
    """A roster player with its names pre-normalized for matching."""
    player: CanonicalPlayer
    display: str
    first: str
    last: str
    full: str

    @property
    def team_id(self) -> int:
        return self.player.team_id


def prepare_roster(
    players: Iterable[CanonicalPlayer],
    substitutions: Optional[Mapping[str, str]] = None,
) -> list[Candidate]:
    """
    Normalize every roster name once, preserving roster order.

    Args:
        players: Canonical roster
        substitutions: Letter substitution table passed to normalize_name

    Returns:
        Candidates in the same order as ``players``
    """
    return [
        Candidate(
            player=player,
            display=normalize_name(player.display_name, substitutions),
            first=normalize_name(player.first_name, substitutions),
            last=normalize_name(player.last_name, substitutions),
            full=normalize_name(f"{player.first_name} {player.last_name}", substitutions),
        )
        for player in players
    ]


def _first(
    roster: Sequence[Candidate],
    team_id: int,
    predicate: Callable[[Candidate], bool],
) -> Optional[CanonicalPlayer]:
    for candidate in roster:
        if candidate.team_id == team_id and predicate(candidate):
            return candidate.player
    return None


# =============================================================================
# Strategies
#
# Every strategy takes (normalized raw name, team id, prepared roster) and
# returns the first matching player of that team, or None.
# =============================================================================


def match_exact_display_name(name: str, team_id: int, roster: Sequence[Candidate]) -> Optional[CanonicalPlayer]:
    return _first(roster, team_id, lambda c: bool(c.display) and c.display == name)


def match_display_name_suffix(name: str, team_id: int, roster: Sequence[Candidate]) -> Optional[CanonicalPlayer]:
    return _first(roster, team_id, lambda c: bool(c.display) and name.endswith(c.display))


def match_display_name_contained(name: str, team_id: int, roster: Sequence[Candidate]) -> Optional[CanonicalPlayer]:
    return _first(roster, team_id, lambda c: len(c.display) >= 4 and c.display in name)


def match_short_display_name_contained(name: str, team_id: int, roster: Sequence[Candidate]) -> Optional[CanonicalPlayer]:
    return _first(roster, team_id, lambda c: len(c.display) >= 3 and c.display in name)


def match_last_token(name: str, team_id: int, roster: Sequence[Candidate]) -> Optional[CanonicalPlayer]:
    last = last_token(name)
    if not last:
        return None
    return _first(
        roster, team_id,
        lambda c: bool(c.display) and (c.display == last or c.display.endswith(last)),
    )


def match_hyphenated_display_name(name: str, team_id: int, roster: Sequence[Candidate]) -> Optional[CanonicalPlayer]:
    return _first(roster, team_id, lambda c: "-" in c.display and c.display in name)


def match_full_name(name: str, team_id: int, roster: Sequence[Candidate]) -> Optional[CanonicalPlayer]:
    return _first(roster, team_id, lambda c: bool(c.full) and c.full == name)


def match_last_name(name: str, team_id: int, roster: Sequence[Candidate]) -> Optional[CanonicalPlayer]:
    last = last_token(name)
    return _first(roster, team_id, lambda c: len(c.last) >= 4 and c.last == last)


def match_first_name(name: str, team_id: int, roster: Sequence[Candidate]) -> Optional[CanonicalPlayer]:
    first = first_token(name)
    return _first(roster, team_id, lambda c: bool(c.first) and (c.first == name or c.first == first))


def match_display_name_token(name: str, team_id: int, roster: Sequence[Candidate]) -> Optional[CanonicalPlayer]:
    tokens = [token for token in split_name_tokens(name) if len(token) >= 4]
    if not tokens:
        return None
    return _first(
        roster, team_id,
        lambda c: len(c.display) >= 4 and any(token in c.display for token in tokens),
    )


StrategyFunc = Callable[[str, int, Sequence[Candidate]], Optional[CanonicalPlayer]]


@dataclass(frozen=True)
class MatchStrategy:
    """A named step of the matching cascade."""
    name: str
    func: StrategyFunc


MATCH_STRATEGIES: tuple[MatchStrategy, ...] = (
    MatchStrategy("exact_display_name", match_exact_display_name),
    MatchStrategy("display_name_suffix", match_display_name_suffix),
    MatchStrategy("display_name_contained", match_display_name_contained),
    MatchStrategy("short_display_name_contained", match_short_display_name_contained),
    MatchStrategy("last_token", match_last_token),
    MatchStrategy("hyphenated_display_name", match_hyphenated_display_name),
    MatchStrategy("full_name", match_full_name),
    MatchStrategy("last_name", match_last_name),
    MatchStrategy("first_name", match_first_name),
    MatchStrategy("display_name_token", match_display_name_token),
)


@dataclass
class PlayerMatch:
    """
    Result of a successful matching attempt.

    Returned by PlayerMatcher.find_player() to record which strategy
    resolved the name.
    """
    player: CanonicalPlayer
    match_type: str  # name of the MatchStrategy that fired
    matched_value: str  # normalized raw name that was matched

    @property
    def player_id(self) -> int:
        return self.player.id

    def __repr__(self) -> str:
        return f"<PlayerMatch(id={self.player.id}, type='{self.match_type}')>"


class PlayerMatcher:
    """
    Resolve RotoWire names against one canonical roster.

    The roster is normalized once on construction, so build one matcher per
    lineup request and reuse it for every entry.

    Usage:
        matcher = PlayerMatcher(roster)
        player = matcher.match("Mohamed Salah", team_id=12)
        if player is None:
            # keep the entry with no canonical id
    """

    def __init__(
        self,
        roster: Iterable[CanonicalPlayer],
        strategies: Sequence[MatchStrategy] = MATCH_STRATEGIES,
        substitutions: Optional[Mapping[str, str]] = None,
    ):
        self.substitutions = substitutions
        self.strategies = tuple(strategies)
        self.candidates = prepare_roster(roster, substitutions)

    def find_player(self, raw_name: str, team_id: int) -> Optional[PlayerMatch]:
        """
        Run the cascade for one name.

        Args:
            raw_name: Name as printed by RotoWire
            team_id: Canonical team the entry was listed under

        Returns:
            PlayerMatch from the first strategy that found someone, or None
        """
        name = normalize_name(raw_name, self.substitutions)
        if not name:
            return None

        for strategy in self.strategies:
            player = strategy.func(name, team_id, self.candidates)
            if player is not None:
                return PlayerMatch(player=player, match_type=strategy.name, matched_value=name)

        logger.debug("No roster match for %r (team %s)", raw_name, team_id)
        return None

    def match(self, raw_name: str, team_id: int) -> Optional[CanonicalPlayer]:
        """Like find_player() but returns only the player."""
        found = self.find_player(raw_name, team_id)
        return found.player if found else None


def match_player(
    raw_name: str,
    team_id: int,
    roster: Iterable[CanonicalPlayer],
) -> Optional[CanonicalPlayer]:
    """
    Resolve a single name against a roster.

    Convenience wrapper for one-off lookups with the configured letter
    substitutions; the lineup pipeline keeps a PlayerMatcher so the roster is
    only normalized once.
    """
    matcher = PlayerMatcher(roster, substitutions=get_default_tables().letter_substitutions)
    return matcher.match(raw_name, team_id)
