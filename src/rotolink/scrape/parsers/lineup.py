"""
RotoWire soccer lineups page parser.

HTML structure (as of 2025):
    <div class="lineup is-soccer">                         one per fixture
      <div class="lineup__abbr">ARS</div>                   home abbreviation
      <div class="lineup__abbr">CHE</div>                   away abbreviation
      <ul class="lineup__list is-home">
        <li class="lineup__player">
          <div class="lineup__pos">GK</div>
          <a title="David Raya Martin" href="...">D. Raya</a>
          <span class="lineup__inj">QUES</span>             optional
        </li>
        ...
        <li class="lineup__title">Injuries</li>             optional header
        <li class="lineup__player">...</li>                 injury-list items
      </ul>
      <ul class="lineup__list is-visit"> ... </ul>
    </div>

The page has no stable schema, so every lookup is scoped by an explicit
boundary: an abbreviation belongs to the closest enclosing match block, a
list item to the closest enclosing side list, and a position/name/tag to the
closest enclosing list item. Markup that forgets to close an element
therefore cannot leak players or tags into a neighbouring fixture, side or
item.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from bs4 import BeautifulSoup, Tag

from rotolink.lineup_statuses import INJURY_LIST, PREDICTED_LINEUP

logger = logging.getLogger(__name__)

HOME = "home"
AWAY = "away"

# Named boundaries
BLOCK_CLASSES = ("lineup", "is-soccer")
ABBR_CLASS = "lineup__abbr"
SIDE_LIST_CLASS = "lineup__list"
SIDE_CLASSES = {HOME: "is-home", AWAY: "is-visit"}
SECTION_TITLE_CLASS = "lineup__title"
PLAYER_ITEM_CLASS = "lineup__player"
POSITION_CLASS = re.compile(r"^lineup__pos")
INJURY_TAG_CLASS = re.compile(r"^lineup__inj")

ABBR_PATTERN = re.compile(r"^([A-Z]{2,4})")
INJURIES_HEADER = re.compile(r"injuries", re.I)


class LineupParseError(Exception):
    """Raised when a match block cannot be turned into a MatchBlock."""
    pass


@dataclass
class RawPlayerEntry:
    """
    One player occurrence inside a match block, as printed by RotoWire.

    ``raw_name`` comes from the link's title attribute (the full name), not
    the link text, which RotoWire truncates to an initial and surname.
    """
    raw_name: str
    raw_position: str
    side: str  # HOME or AWAY
    section: str = PREDICTED_LINEUP  # or INJURY_LIST
    inline_tag: str = ""  # 'QUES', 'SUS', 'OUT' or ''

    def __repr__(self) -> str:
        return f"<RawPlayerEntry({self.side}: '{self.raw_name}', {self.raw_position}, {self.section})>"


@dataclass
class MatchBlock:
    """One fixture: two team abbreviations and the entries of each side."""
    home_abbr: str
    away_abbr: str
    home: list[RawPlayerEntry] = field(default_factory=list)
    away: list[RawPlayerEntry] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"<MatchBlock({self.home_abbr} vs {self.away_abbr}, {len(self.home)}+{len(self.away)} players)>"


def _classes(tag: Tag) -> list[str]:
    return tag.get("class") or []


def _has_classes(tag: Tag, *classes: str) -> bool:
    tag_classes = _classes(tag)
    return all(cls in tag_classes for cls in classes)


def _is_match_block(tag: Tag) -> bool:
    return _has_classes(tag, *BLOCK_CLASSES)


def _is_side_list(tag: Tag) -> bool:
    return _has_classes(tag, SIDE_LIST_CLASS)


def _is_item(tag: Tag) -> bool:
    return tag.name == "li"


def _owned_by(owner: Tag, elements: Iterable[Tag], boundary: Callable[[Tag], bool]) -> list[Tag]:
    """Keep only elements whose closest ``boundary`` ancestor is ``owner``."""
    return [el for el in elements if el.find_parent(boundary) is owner]


def _first_owned(owner: Tag, elements: Iterable[Tag], boundary: Callable[[Tag], bool]) -> Optional[Tag]:
    owned = _owned_by(owner, elements, boundary)
    return owned[0] if owned else None


def extract_team_abbreviations(block: Tag) -> list[str]:
    """All team abbreviations of a block, in document order."""
    abbrs = []
    for el in _owned_by(block, block.find_all(class_=ABBR_CLASS), _is_match_block):
        match = ABBR_PATTERN.match(el.get_text(strip=True))
        if match:
            abbrs.append(match.group(1))
    return abbrs


def _find_side_list(block: Tag, side: str) -> Optional[Tag]:
    side_class = SIDE_CLASSES[side]
    candidates = block.find_all(lambda tag: _has_classes(tag, SIDE_LIST_CLASS, side_class))
    return _first_owned(block, candidates, _is_match_block)


def _is_injuries_header(item: Tag) -> bool:
    if not (_has_classes(item, SECTION_TITLE_CLASS) or item.find(class_=SECTION_TITLE_CLASS)):
        return False
    return bool(INJURIES_HEADER.search(item.get_text(" ", strip=True)))


def parse_player_item(item: Tag, side: str, section: str) -> Optional[RawPlayerEntry]:
    """
    Extract one player from a list item.

    Position, name and tag are only taken from elements that belong to this
    item, never from a nested item.

    Returns:
        RawPlayerEntry, or None if the item has no name
    """
    link = _first_owned(item, item.find_all("a", title=True), _is_item)
    raw_name = link["title"].strip() if link is not None else ""
    if not raw_name:
        return None

    pos_el = _first_owned(item, item.find_all(class_=POSITION_CLASS), _is_item)
    raw_position = pos_el.get_text(strip=True) if pos_el is not None else ""

    tag_el = _first_owned(item, item.find_all(class_=INJURY_TAG_CLASS), _is_item)
    inline_tag = tag_el.get_text(strip=True).upper() if tag_el is not None else ""

    return RawPlayerEntry(
        raw_name=raw_name,
        raw_position=raw_position,
        side=side,
        section=section,
        inline_tag=inline_tag,
    )


def parse_side(side_list: Optional[Tag], side: str) -> list[RawPlayerEntry]:
    """
    Parse one side's list into ordered, de-duplicated entries.

    Items after an "Injuries" header are tagged INJURY_LIST. A name seen
    twice keeps its first occurrence.
    """
    if side_list is None:
        return []

    entries: list[RawPlayerEntry] = []
    seen: set[str] = set()
    section = PREDICTED_LINEUP

    for item in _owned_by(side_list, side_list.find_all("li"), _is_side_list):
        if _is_injuries_header(item):
            section = INJURY_LIST
            continue
        if not _has_classes(item, PLAYER_ITEM_CLASS):
            continue

        entry = parse_player_item(item, side, section)
        if entry is None or entry.raw_name in seen:
            continue
        seen.add(entry.raw_name)
        entries.append(entry)

    return entries


def parse_match_block(block: Tag) -> MatchBlock:
    """
    Parse a single ``div.lineup.is-soccer`` element.

    The first two abbreviations are home and away; any further ones are
    ignored.

    Raises:
        LineupParseError: If fewer than two team abbreviations are present
    """
    abbrs = extract_team_abbreviations(block)
    if len(abbrs) < 2:
        raise LineupParseError(f"expected 2 team abbreviations, found {len(abbrs)}")

    return MatchBlock(
        home_abbr=abbrs[0],
        away_abbr=abbrs[1],
        home=parse_side(_find_side_list(block, HOME), HOME),
        away=parse_side(_find_side_list(block, AWAY), AWAY),
    )


def parse_lineup_document(html: str) -> list[MatchBlock]:
    """
    Parse the whole lineups page into match blocks, in document order.

    Blocks that fail to parse are logged and skipped; they never abort the
    rest of the page.

    Args:
        html: Raw page HTML

    Returns:
        List of MatchBlock
    """
    soup = BeautifulSoup(html or "", "lxml")
    blocks: list[MatchBlock] = []

    for index, element in enumerate(soup.find_all(_is_match_block)):
        try:
            blocks.append(parse_match_block(element))
        except LineupParseError as exc:
            logger.warning("Skipping lineup block %d: %s", index, exc)

    logger.debug("Parsed %d lineup blocks", len(blocks))
    return blocks
