"""
Lookup tables shared by the normalizers.

RotoWire renames and re-abbreviates teams between seasons, and new letter
substitutions turn up whenever a player with an unusual surname joins the
league. Those tables are therefore data, not code: a bundled JSON file
(``rotolink/data/tables.json``) provides the defaults, and a replacement file
can be supplied through ``settings.tables_path``. Tests build ``LookupTables``
directly with synthetic contents.
"""

import json
import logging
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

BUNDLED_TABLES = "tables.json"


class PositionCodes(BaseModel):
    """Provider position codes grouped by the rule that consumes them."""

    model_config = ConfigDict(frozen=True)

    defensive_midfield: frozenset[str] = frozenset()
    defender: frozenset[str] = frozenset()
    forward: frozenset[str] = frozenset()
    midfielder: frozenset[str] = frozenset()

    @field_validator("*", mode="before")
    @classmethod
    def _upper_codes(cls, v):
        return frozenset(str(code).strip().upper() for code in v)


class LookupTables(BaseModel):
    """
    All injectable lookup data used by the pipeline.

    Attributes:
        team_aliases: Provider team abbreviation -> canonical team id. Every
            spelling a provider has used maps to the same id.
        positions: Position code sets for the classifier rules.
        letter_substitutions: Characters that do not decompose into an ASCII
            base plus combining mark, and their replacements.
    """

    model_config = ConfigDict(frozen=True)

    team_aliases: dict[str, int] = Field(default_factory=dict)
    positions: PositionCodes = Field(default_factory=PositionCodes)
    letter_substitutions: dict[str, str] = Field(default_factory=dict)

    @field_validator("team_aliases", mode="before")
    @classmethod
    def _upper_aliases(cls, v):
        return {str(abbr).strip().upper(): team_id for abbr, team_id in v.items()}


def load_tables(path: Optional[Union[str, Path]] = None) -> LookupTables:
    """
    Load lookup tables from a JSON file.

    Args:
        path: JSON file to read. When omitted the bundled defaults are used.

    Returns:
        Validated LookupTables

    Raises:
        OSError: If ``path`` cannot be read
        pydantic.ValidationError: If the file does not have the expected shape
    """
    if path is None:
        raw = resources.files("rotolink.data").joinpath(BUNDLED_TABLES).read_text(encoding="utf-8")
        source = f"bundled {BUNDLED_TABLES}"
    else:
        raw = Path(path).read_text(encoding="utf-8")
        source = str(path)

    tables = LookupTables.model_validate(json.loads(raw))
    logger.debug(
        "Loaded lookup tables from %s (%d team aliases, %d letter substitutions)",
        source, len(tables.team_aliases), len(tables.letter_substitutions),
    )
    return tables


@lru_cache
def get_default_tables() -> LookupTables:
    """Tables selected by settings, loaded once per process."""
    from rotolink.config import settings

    return load_tables(settings.tables_path)
