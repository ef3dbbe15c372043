"""
Pytest configuration and fixtures.

This file is automatically loaded by pytest and provides
shared fixtures for all tests: a small synthetic FPL roster, synthetic
lookup tables and a builder for RotoWire-style lineup markup.
"""

import json

import pytest

from rotolink.config import settings
from rotolink.players.identity import CanonicalPlayer
from rotolink.tables import LookupTables, get_default_tables

ARSENAL = 1
CHELSEA = 7
LIVERPOOL = 12
TOTTENHAM = 18


@pytest.fixture
def tables():
    """Synthetic lookup tables, independent of the bundled JSON."""
    return LookupTables.model_validate({
        "team_aliases": {"ARS": ARSENAL, "CHE": CHELSEA, "LIV": LIVERPOOL, "TOT": TOTTENHAM, "SPU": TOTTENHAM},
        "positions": {
            "defensive_midfield": ["DM", "DMC", "DML", "DMR", "CDM"],
            "defender": ["CB", "LB", "RB", "LWB", "RWB"],
            "forward": ["ST", "CF", "F", "FC"],
            "midfielder": ["CM", "LM", "RM", "CAM"],
        },
        "letter_substitutions": {"ø": "o", "Ø": "o", "ß": "ss", "ı": "i", "ł": "l", "æ": "ae", "đ": "d"},
    })


@pytest.fixture
def configured_tables(tmp_path, monkeypatch):
    """
    Point settings.tables_path at a small replacement file.

    The replacement maps "SS" to the forward codes and "ø" to "oe", so code
    that still used the bundled tables would give different answers.
    """
    path = tmp_path / "tables.json"
    path.write_text(json.dumps({
        "team_aliases": {"ARS": ARSENAL},
        "positions": {"forward": ["SS"]},
        "letter_substitutions": {"ø": "oe"},
    }), encoding="utf-8")

    monkeypatch.setattr(settings, "tables_path", str(path))
    get_default_tables.cache_clear()
    yield get_default_tables()
    get_default_tables.cache_clear()


@pytest.fixture
def roster():
    """
    Canonical roster in FPL order.

    A hyphenated Tottenham player sits before Liverpool's so that any
    matcher ignoring the team would pick the wrong one.
    """
    return [
        CanonicalPlayer(99, "Alexander-Arnold", "Tom", "Alexander-Arnold", TOTTENHAM, "DEF"),
        CanonicalPlayer(1, "Salah", "Mohamed", "Salah", LIVERPOOL, "MID"),
        CanonicalPlayer(2, "Alexander-Arnold", "Trent", "Alexander-Arnold", LIVERPOOL, "DEF"),
        CanonicalPlayer(3, "Alisson", "Alisson", "Ramses Becker", LIVERPOOL, "GK"),
        CanonicalPlayer(10, "Saka", "Bukayo", "Saka", ARSENAL, "MID"),
        CanonicalPlayer(11, "Ødegaard", "Martin", "Ødegaard", ARSENAL, "MID", chance_of_playing=75),
        CanonicalPlayer(12, "Raya", "David", "Raya Martín", ARSENAL, "GK"),
        CanonicalPlayer(20, "Palmer", "Cole", "Palmer", CHELSEA, "MID"),
        CanonicalPlayer(21, "Caicedo", "Moisés", "Caicedo Corozo", CHELSEA, "MID", chance_of_playing=0),
    ]


def _player_item(name: str, position: str, tag: str = "", text: str = "") -> str:
    tag_html = f'<span class="lineup__inj">{tag}</span>' if tag else ""
    return (
        '<li class="lineup__player is-pct-play-100">'
        f'<div class="lineup__pos">{position}</div>'
        f'<a title="{name}" href="/soccer/player/x">{text or name}</a>'
        f"{tag_html}"
        "</li>"
    )


def _side_list(side_class: str, items: list, injuries: list) -> str:
    body = "".join(_player_item(*item) for item in items)
    if injuries:
        body += '<li class="lineup__title is-middle">Injuries</li>'
        body += "".join(_player_item(*item) for item in injuries)
    return f'<ul class="lineup__list {side_class}">{body}</ul>'


def build_block(
    home_abbr: str = "ARS",
    away_abbr: str = "CHE",
    home: list = (),
    away: list = (),
    home_injuries: list = (),
    away_injuries: list = (),
) -> str:
    abbrs = "".join(
        f'<div class="lineup__abbr">{abbr}</div>' for abbr in (home_abbr, away_abbr) if abbr
    )
    return (
        '<div class="lineup is-soccer">'
        f'<div class="lineup__top"><div class="lineup__teams">{abbrs}</div></div>'
        '<div class="lineup__main">'
        f"{_side_list('is-home', list(home), list(home_injuries))}"
        f"{_side_list('is-visit', list(away), list(away_injuries))}"
        "</div>"
        "</div>"
    )


def build_page(*blocks: str) -> str:
    return (
        "<html><head><title>Soccer Lineups</title></head><body>"
        '<div class="lineups">' + "".join(blocks) + "</div>"
        "</body></html>"
    )


@pytest.fixture
def lineup_block():
    """Builder for one match block. Items are (name, position[, tag[, text]]) tuples."""
    return build_block


@pytest.fixture
def lineup_page():
    """Builder wrapping match blocks into a full page."""
    return build_page


@pytest.fixture
def sample_page(lineup_block, lineup_page):
    """Two fixtures: ARS v CHE with an injury section, LIV v TOT without one."""
    return lineup_page(
        lineup_block(
            "ARS", "CHE",
            home=[("David Raya Martin", "GK", "", "D. Raya"), ("Bukayo Saka", "FWR", "QUES"), ("Martin Odegaard", "AMC")],
            away=[("Cole Palmer", "AMC"), ("Moises Caicedo", "DMC", "SUS"), ("Unknown Youngster", "DC")],
            home_injuries=[("Gabriel Jesus", "FW", "OUT"), ("Kai Havertz", "FW")],
            away_injuries=[("Reece James", "DR", "OUT")],
        ),
        lineup_block(
            "LIV", "TOT",
            home=[("Alisson", "GK"), ("Trent Alexander-Arnold", "DR"), ("Mohamed Salah", "FWR")],
            away=[],
        ),
    )
