"""
Team abbreviation mapping.

RotoWire identifies teams by short abbreviations and has used more than one
spelling for several clubs (BUR/BRN, BRI/BHA, LEE/LDS, NFO/NOT). FPL uses
numeric team ids. TeamCodeMapper resolves the former to the latter.
"""

import logging
from typing import Mapping, Optional

from rotolink.tables import LookupTables, get_default_tables

logger = logging.getLogger(__name__)


class TeamCodeMapper:
    """
    Resolve provider team abbreviations to canonical team ids.

    Usage:
        mapper = TeamCodeMapper.from_tables(load_tables())
        mapper.resolve("BHA")  # 6
        mapper.resolve("XYZ")  # None - caller skips the match block
    """

    def __init__(self, aliases: Mapping[str, int]):
        self._aliases = {abbr.strip().upper(): team_id for abbr, team_id in aliases.items()}

    @classmethod
    def from_tables(cls, tables: Optional[LookupTables] = None) -> "TeamCodeMapper":
        tables = tables or get_default_tables()
        return cls(tables.team_aliases)

    def resolve(self, abbr: Optional[str]) -> Optional[int]:
        """
        Return the canonical team id for an abbreviation.

        Unknown or empty abbreviations return None. That is never an error;
        the orchestrator drops the block that carried it.
        """
        if not abbr:
            return None
        team_id = self._aliases.get(abbr.strip().upper())
        if team_id is None:
            logger.debug("No canonical team for abbreviation %r", abbr)
        return team_id

    def __contains__(self, abbr: str) -> bool:
        return bool(abbr) and abbr.strip().upper() in self._aliases

    def __len__(self) -> int:
        return len(self._aliases)
