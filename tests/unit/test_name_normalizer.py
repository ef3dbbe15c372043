"""
Unit tests for name normalization, position classification, team codes
and the lookup tables that drive them.
"""

import json

import pytest
from pydantic import ValidationError

from rotolink.players.aliases import (
    first_token,
    last_token,
    normalize_name,
    split_name_tokens,
)
from rotolink.players.identity import CanonicalPlayer, match_player
from rotolink.players.positions import (
    CANONICAL_POSITIONS,
    DEF,
    FWD,
    GK,
    MID,
    classify_position,
    position_from_element_type,
)
from rotolink.tables import LookupTables, get_default_tables, load_tables
from rotolink.teams import TeamCodeMapper


class TestNormalizeName:
    """Tests for normalize_name."""

    def test_lowercase(self):
        assert normalize_name("Mohamed SALAH") == "mohamed salah"

    def test_remove_accents(self):
        """Combining marks are dropped after decomposition."""
        assert normalize_name("Moisés Caicedo") == "moises caicedo"
        assert normalize_name("Bruno Guimarães") == "bruno guimaraes"
        assert normalize_name("Tomáš Souček") == "tomas soucek"

    def test_letters_without_decomposition(self):
        """Letters that do not decompose go through the substitution table."""
        assert normalize_name("Martin Ødegaard") == "martin odegaard"
        assert normalize_name("Ferdi Kadıoğlu") == "ferdi kadioglu"
        assert normalize_name("Łukasz Fabiański") == "lukasz fabianski"
        assert normalize_name("Weiß") == "weiss"
        assert normalize_name("Dorđe Petrović") == "dorde petrovic"

    def test_periods_removed(self):
        assert normalize_name("F.Kadıoğlu") == "fkadioglu"
        assert normalize_name("B.Fernandes") == "bfernandes"
        assert normalize_name("  Bruno G. ") == "bruno g"

    def test_empty_string(self):
        """Empty or blank input never raises."""
        assert normalize_name("") == ""
        assert normalize_name("   ") == ""
        assert normalize_name(" . ") == ""
        assert normalize_name(None) == ""

    @pytest.mark.parametrize("name", [
        "Martin Ødegaard",
        "ØDEGAARD",
        "ŁUKASZ",
        "Kadıoğlu",
        "STRAßE",
        "Trent Alexander-Arnold",
        "  J. Ward-Prowse ",
    ])
    def test_idempotent(self, name):
        once = normalize_name(name)
        assert normalize_name(once) == once

    def test_injected_table(self):
        """An injected table replaces the defaults entirely."""
        assert normalize_name("Ødegaard", {}) == "ødegaard"
        assert normalize_name("Ødegaard", {"ø": "oe"}) == "oedegaard"

    def test_upper_case_forms_follow_lower_case_entries(self):
        """A table entry for 'ł' also folds 'Ł'."""
        assert normalize_name("Łukasz", {"ł": "l"}) == "lukasz"


class TestNameTokens:
    """Tests for token helpers used by the matcher."""

    def test_split_on_space_and_hyphen(self):
        assert split_name_tokens("trent alexander-arnold") == ["trent", "alexander", "arnold"]

    def test_empty_parts_dropped(self):
        assert split_name_tokens(" a  - b ") == ["a", "b"]

    def test_first_and_last(self):
        assert first_token("idrissa gana gueye") == "idrissa"
        assert last_token("idrissa gana gueye") == "gueye"
        assert first_token("") == ""
        assert last_token("") == ""


class TestClassifyPosition:
    """Tests for the ordered position rules."""

    @pytest.mark.parametrize("raw, expected", [
        ("GK", GK),
        ("gk", GK),
        ("DMC", MID),
        ("DM", MID),
        ("CDM", MID),
        ("DL", DEF),
        ("DC", DEF),
        ("DR", DEF),
        ("CB", DEF),
        ("LWB", DEF),
        ("FW", FWD),
        ("FWL", FWD),
        ("FWR", FWD),
        ("ST", FWD),
        ("F", FWD),
        ("MC", MID),
        ("AMC", MID),
        ("AML", MID),
        ("CM", MID),
        ("CAM", MID),
        ("F/M", FWD),
        ("D/M", DEF),
        ("A/M", MID),
    ])
    def test_rules(self, raw, expected):
        assert classify_position(raw) == expected

    @pytest.mark.parametrize("raw", ["GK", "DMC", "DL", "FWR", "ST", "AMC", "CM", "F/M", "D/M", "A/M"])
    def test_known_codes_give_a_canonical_class(self, raw):
        assert classify_position(raw) in CANONICAL_POSITIONS

    def test_defensive_midfield_checked_before_defender_prefix(self):
        """DMC starts with D but is a midfielder."""
        assert classify_position("DMC") == MID

    def test_unknown_code_returned_cleaned(self):
        assert classify_position(" sub ") == "SUB"
        assert classify_position("") == ""
        assert classify_position(None) == ""

    def test_injected_codes(self, tables):
        assert classify_position("ST", tables.positions) == FWD

    def test_fpl_element_types(self):
        assert position_from_element_type(1) == GK
        assert position_from_element_type(2) == DEF
        assert position_from_element_type(3) == MID
        assert position_from_element_type(4) == FWD
        assert position_from_element_type(5) == ""
        assert position_from_element_type(None) == ""


class TestTeamCodeMapper:
    """Tests for abbreviation to team id resolution."""

    def test_resolve(self, tables):
        mapper = TeamCodeMapper.from_tables(tables)
        assert mapper.resolve("ARS") == 1
        assert mapper.resolve("ars") == 1
        assert mapper.resolve(" LIV ") == 12

    def test_aliases_share_an_id(self, tables):
        mapper = TeamCodeMapper.from_tables(tables)
        assert mapper.resolve("TOT") == mapper.resolve("SPU") == 18

    def test_unknown_is_none(self, tables):
        mapper = TeamCodeMapper.from_tables(tables)
        assert mapper.resolve("XYZ") is None
        assert mapper.resolve("") is None
        assert mapper.resolve(None) is None

    def test_contains_and_len(self, tables):
        mapper = TeamCodeMapper.from_tables(tables)
        assert "che" in mapper
        assert "XYZ" not in mapper
        assert "" not in mapper
        assert len(mapper) == 5


class TestLookupTables:
    """Tests for the bundled and injected lookup tables."""

    def test_bundled_tables(self):
        tables = load_tables()
        mapper = TeamCodeMapper.from_tables(tables)

        assert set(tables.team_aliases.values()) == set(range(1, 21))
        assert mapper.resolve("BHA") == mapper.resolve("BRI") == 6
        assert mapper.resolve("NFO") == mapper.resolve("NOT") == 16
        assert mapper.resolve("LEE") == mapper.resolve("LDS") == 11
        assert mapper.resolve("BUR") == mapper.resolve("BRN") == 3
        assert "DMC" in tables.positions.defensive_midfield
        assert tables.letter_substitutions["ß"] == "ss"

    def test_default_tables_loaded_once(self):
        assert get_default_tables() is get_default_tables()

    def test_load_from_path(self, tmp_path):
        path = tmp_path / "tables.json"
        path.write_text(json.dumps({
            "team_aliases": {"ars": 1},
            "positions": {"forward": ["st"]},
            "letter_substitutions": {"ø": "o"},
        }), encoding="utf-8")

        tables = load_tables(path)

        assert tables.team_aliases == {"ARS": 1}
        assert "ST" in tables.positions.forward
        assert tables.positions.defender == frozenset()

    def test_invalid_file_rejected(self, tmp_path):
        path = tmp_path / "tables.json"
        path.write_text(json.dumps({"team_aliases": {"ARS": "arsenal"}}), encoding="utf-8")

        with pytest.raises(ValidationError):
            load_tables(path)

    def test_tables_are_frozen(self, tables):
        with pytest.raises(ValidationError):
            tables.team_aliases = {}

    def test_empty_tables(self):
        tables = LookupTables()
        assert TeamCodeMapper.from_tables(tables).resolve("ARS") is None


class TestConfiguredTables:
    """Helpers called without a table use the tables selected by settings."""

    def test_normalize_name(self, configured_tables):
        assert normalize_name("Martin Ødegaard") == "martin oedegaard"

    def test_classify_position(self, configured_tables):
        assert classify_position("SS") == FWD
        assert classify_position("ST") == "ST"

    def test_match_player(self, configured_tables):
        odegaard = CanonicalPlayer(11, "Ødegaard", "Martin", "Ødegaard", 1, "MID")

        assert match_player("Martin Oedegaard", 1, [odegaard]) is odegaard

    def test_team_mapper(self, configured_tables):
        mapper = TeamCodeMapper.from_tables()
        assert mapper.resolve("ARS") == 1
        assert mapper.resolve("CHE") is None
