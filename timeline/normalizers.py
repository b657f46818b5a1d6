"""Normalization steps applied to raw actions before classification."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Iterable, Optional

from timeline.models import RawAction

logger = logging.getLogger(__name__)

LIBRARY_OF_CONGRESS = "9"

_LINK_TAG = re.compile(r"</?[Aa]( \S.*?)?>")
_TRAILING_REFERENCES = re.compile(r"\s*\(([^)]+)\)\s*$")
_WHITESPACE = re.compile(r"\s+")


def strip_links(text: str) -> str:
    """Remove <a> tags, keeping their inner text."""
    return _LINK_TAG.sub("", text or "")


def strip_references(text: str) -> str:
    """Drop a trailing "(consideration: CR H1234)" style reference list."""
    match = _TRAILING_REFERENCES.search(text)
    if match:
        return text[:match.start()] + text[match.end():]
    return text


def comparable_text(text: str) -> str:
    """Text reduced for duplicate detection: no links, references, or whitespace."""
    return _WHITESPACE.sub("", strip_references(strip_links(text)))


def format_acted_at(acted_at_date: Optional[str], acted_at_time: Optional[str]) -> str:
    """Render an action's date and optional time as an ISO-8601 UTC timestamp.

    Source dates are not validated: a value that does not parse is passed
    through as-is so the bad input stays visible downstream.

    Args:
        acted_at_date: "YYYY-MM-DD"
        acted_at_time: "HH:MM:SS", or None for date-only actions

    Returns:
        Timestamp like "2019-03-08T14:31:00.000Z", or the raw input if unparseable
    """
    raw = f"{acted_at_date or ''}{'T' + acted_at_time if acted_at_time else ''}"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        logger.warning("Passing through unparseable action timestamp %r", raw)
        return raw
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.strftime("%Y-%m-%dT%H:%M:%S.000Z")


def is_duplicate(item: RawAction, prev: Optional[RawAction]) -> bool:
    """Whether a Library of Congress action repeats the action before it.

    The bulk data often carries a House/Senate action and an LOC copy of
    the same event. The copy has the same date, a compatible time, and
    text that ends with the other entry's text (sometimes with a prefix,
    different whitespace, or dropped references).

    Args:
        item: The action under consideration
        prev: The action immediately before it in source order

    Returns:
        True if `item` should be dropped
    """
    if prev is None or item.source_system_code != LIBRARY_OF_CONGRESS:
        return False
    if item.acted_at_date != prev.acted_at_date:
        return False
    if item.acted_at_time and prev.acted_at_time and item.acted_at_time != prev.acted_at_time:
        return False
    return comparable_text(item.text).endswith(comparable_text(prev.text))


def deduplicate_actions(actions: Iterable[RawAction]) -> list[RawAction]:
    """Remove empty and duplicated actions, keeping source (newest-first) order.

    Each action is compared with the action immediately before it in the
    source list, whether or not that one was kept. Actions with empty
    text are dropped outright and never serve as the comparison point.

    Args:
        actions: Raw actions in source order

    Returns:
        The surviving actions, still in source order
    """
    kept: list[RawAction] = []
    prev: Optional[RawAction] = None
    for item in actions:
        if not item.text:
            continue
        if is_duplicate(item, prev):
            logger.debug("Dropping duplicate LOC action on %s: %s", item.acted_at_date, item.text)
        else:
            kept.append(item)
        prev = item
    return kept


def chronological(actions: Iterable[RawAction]) -> list[RawAction]:
    """Reorder newest-first source actions to oldest-first."""
    return list(reversed(list(actions)))
