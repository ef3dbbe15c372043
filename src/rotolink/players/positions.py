"""
Position classification.

RotoWire prints formation slots (DL, DC, DR, DMC, AML, AMC, AMR, FW, FWL,
FWR, ...) while FPL only knows four classes. The rules below are ordered and
the first match wins.
"""

from typing import Optional

from rotolink.tables import PositionCodes, get_default_tables

GK = "GK"
DEF = "DEF"
MID = "MID"
FWD = "FWD"

CANONICAL_POSITIONS: tuple[str, ...] = (GK, DEF, MID, FWD)

# FPL element_type -> canonical class
FPL_ELEMENT_TYPES: dict[int, str] = {1: GK, 2: DEF, 3: MID, 4: FWD}


def classify_position(raw_code: str, codes: Optional[PositionCodes] = None) -> str:
    """
    Map a provider position code to GK, DEF, MID or FWD.

    Rules, first match wins:
    1. "GK" → GK
    2. Defensive midfield codes → MID (checked before the "D" prefix rule)
    3. Codes starting with "D", or pure defender codes → DEF
    4. Codes starting with "FW", or forward codes → FWD
    5. Codes starting with "M" or "AM", or midfielder codes → MID
    6. Hybrids such as "F/M": first token F → FWD, D → DEF, else MID
    7. Anything else is returned unchanged (upper-cased and trimmed)

    Args:
        raw_code: Position label as printed by the provider
        codes: Code sets for rules 2-5. Defaults to the configured lookup
            tables (``get_default_tables().positions``).

    Returns:
        Canonical position, or the cleaned input if no rule applies

    Examples:
        >>> classify_position("DMC")
        'MID'
        >>> classify_position("dl")
        'DEF'
        >>> classify_position("F/M")
        'FWD'
    """
    codes = get_default_tables().positions if codes is None else codes
    code = (raw_code or "").strip().upper()

    if code == GK:
        return GK
    if code in codes.defensive_midfield:
        return MID
    if code.startswith("D") or code in codes.defender:
        return DEF
    if code.startswith("FW") or code in codes.forward:
        return FWD
    if code.startswith("M") or code.startswith("AM") or code in codes.midfielder:
        return MID

    if "/" in code:
        first = code.split("/", 1)[0].strip()
        if first == "F":
            return FWD
        if first == "D":
            return DEF
        return MID

    return code


def position_from_element_type(element_type: Optional[int]) -> str:
    """FPL element_type (1-4) to canonical position; "" when unknown."""
    if element_type is None:
        return ""
    return FPL_ELEMENT_TYPES.get(element_type, "")
