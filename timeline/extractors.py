"""Field extraction utilities for parsing action text.

Small helpers shared by the rule handlers in `timeline.nodes`. Each one
pulls a single piece of vote or procedural metadata out of a regex match
or a captured group.
"""

import re
from typing import Optional

from timeline.models import LawCitation

_HOUSE_ROLL = re.compile(r"\((Roll no\.|Record Vote No:) (\d+)\)", re.I)
_SENATE_ROLL = re.compile(r"Record Vote (No|Number): (\d+)", re.I)


def extract_house_roll(how: str) -> tuple[str, Optional[int]]:
    """Normalize a House vote method and pull out its roll call number.

    Args:
        how: Captured vote method, e.g. "by recorded vote: 250 - 170 (Roll no. 93)"

    Returns:
        ("roll", 93) for recorded votes, otherwise (how, None)
    """
    m = _HOUSE_ROLL.search(how or "")
    if m:
        return "roll", int(m.group(2))
    return how, None


def extract_senate_roll(how: str) -> tuple[str, Optional[int]]:
    """Normalize a Senate vote method and pull out its record vote number.

    Args:
        how: Captured vote method, e.g. "Yea-Nay Vote. 60 - 40. Record Vote Number: 12"

    Returns:
        ("roll", 12) for recorded votes, otherwise (how, None)
    """
    m = _SENATE_ROLL.search(how or "")
    if m:
        return "roll", int(m.group(2))
    return how, None


def house_result(motion: str, outcome: Optional[str], text: str) -> str:
    """Decide whether a House vote carried."""
    if re.search(r"Passed House|House Agreed to", motion, re.I):
        return "pass"
    if re.search(r"(ayes|yeas) had prevailed", text, re.I):
        return "pass"
    if outcome and re.search(r"Pass|Agreed", outcome, re.I):
        return "pass"
    return "fail"


def senate_result(motion: str) -> str:
    """Decide whether a Senate vote carried."""
    # "agreed" is contained in "disagreed"
    if re.search(r"disagreed|not invoked", motion, re.I):
        return "fail"
    if re.search(r"passed|agreed|concurred|invoked", motion, re.I):
        return "pass"
    return "fail"


def extract_committee(match: re.Match) -> Optional[str]:
    """Committee name captured by the first group, stripped."""
    committee = match.group(1)
    if committee:
        return committee.strip()
    return None


def extract_law(match: re.Match) -> Optional[LawCitation]:
    """Build a law citation from a "Became Public Law No: 116-123." match.

    Args:
        match: Match with the law kind in group 1 and "congress-number" in group 2

    Returns:
        LawCitation, or None if the number is not a congress-number pair
    """
    pieces = match.group(2).split("-")
    if len(pieces) < 2 or not pieces[0].isdigit() or not pieces[1].isdigit():
        return None
    return LawCitation(
        kind=match.group(1).lower(),
        congress=int(pieces[0]),
        number=int(pieces[1]),
    )
