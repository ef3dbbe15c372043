"""
Player name normalization utilities.

The same player is printed very differently by the two providers:
- FPL: "Salah", "Ødegaard", "Bruno G.", "Kadıoğlu"
- RotoWire: "Mohamed Salah", "Martin Odegaard", "Bruno Guimaraes", "F.Kadioglu"

This module reduces any display name to a plain lower-case ASCII-ish string
so the identity matcher can compare the two with simple string operations.
"""

import re
import unicodedata
from typing import Mapping, Optional

from rotolink.tables import get_default_tables

_TOKEN_SPLIT = re.compile(r"[\s-]+")


def normalize_name(
    name: str,
    substitutions: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Normalize a display name for comparison.

    Normalization steps, in order:
    1. Unicode NFD decomposition, then drop combining marks (é → e)
    2. Replace letters that do not decompose (ß → ss, ø → o, ł → l, ...)
    3. Remove periods ("F.Kadioglu" → "FKadioglu")
    4. Convert to lowercase
    5. Trim leading/trailing whitespace

    For a given table, ``normalize_name(normalize_name(x)) == normalize_name(x)``.

    Args:
        name: Raw name from either provider
        substitutions: Letter substitution table. Defaults to the configured
            lookup tables (``get_default_tables()``).

    Returns:
        Normalized name

    Examples:
        >>> normalize_name("Martin Ødegaard")
        'martin odegaard'
        >>> normalize_name("F.Kadıoğlu")
        'fkadioglu'
        >>> normalize_name("  Bruno G. ")
        'bruno g'
    """
    if not name:
        return ""

    table = get_default_tables().letter_substitutions if substitutions is None else substitutions

    # Step 1: strip accents
    # Mn = Mark, Nonspacing
    normalized = unicodedata.normalize("NFD", name)
    normalized = "".join(
        char for char in normalized
        if unicodedata.category(char) != "Mn"
    )

    # Step 2: letters without a decomposition
    # Upper-case forms are folded too, otherwise lowercasing in step 4 could
    # reintroduce a letter the table maps (Ł → ł).
    for letter, replacement in table.items():
        normalized = normalized.replace(letter, replacement)
        if len(letter) == 1 and letter.upper() != letter and len(letter.upper()) == 1:
            normalized = normalized.replace(letter.upper(), replacement)

    # Step 3: initials and abbreviations
    normalized = normalized.replace(".", "")

    # Steps 4 and 5
    return normalized.lower().strip()


def split_name_tokens(normalized_name: str) -> list[str]:
    """
    Split a normalized name on whitespace and hyphens.

    "trent alexander-arnold" → ["trent", "alexander", "arnold"]
    """
    return [part for part in _TOKEN_SPLIT.split(normalized_name) if part]


def first_token(normalized_name: str) -> str:
    """First whitespace/hyphen delimited token, or "" for an empty name."""
    tokens = split_name_tokens(normalized_name)
    return tokens[0] if tokens else ""


def last_token(normalized_name: str) -> str:
    """Last whitespace/hyphen delimited token, or "" for an empty name."""
    tokens = split_name_tokens(normalized_name)
    return tokens[-1] if tokens else ""
