"""Classification of a bill's titles by kind and legislative stage."""

from __future__ import annotations

from typing import Any, Optional

from components.entities import items_of, text_of
from components.models import Title, UnknownTitleType

PORTION_SUFFIX = " for portions of this bill"

# Checked in order; the first matching substring wins.
_KIND_MARKERS = (
    ("Popular Title", "popular"),
    ("Short Title", "short"),
    ("Official Title", "official"),
    ("Display Title", "display"),
)


def title_kind(label: str) -> str:
    """Map the kind half of a title-type label to a title type.

    Raises:
        UnknownTitleType: if the label matches no known kind
    """
    for marker, kind in _KIND_MARKERS:
        if marker in label:
            return kind
    if label == "Non-bill-report":
        return "nonbillreport"
    raise UnknownTitleType(label)


def parse_title_type(label: str) -> tuple[str, str, bool]:
    """Split a label like "Official Titles as Introduced" into its parts.

    Args:
        label: The raw titleType value

    Returns:
        (type, as, is_for_portion), e.g. ("official", "introduced", False)
    """
    splits = label.split(" as ") if " as " in label else label.split(" on ")
    if len(splits) != 2:
        return title_kind(label), "", False

    kind, stage = splits
    is_for_portion = stage.endswith(PORTION_SUFFIX)
    if is_for_portion:
        stage = stage[: -len(PORTION_SUFFIX)]
    stage = stage.removesuffix(":").lower()
    return title_kind(kind), stage, is_for_portion


def titles_for(tree: dict[str, Any]) -> list[Title]:
    """All titles of a bill, in document order."""
    titles = []
    for item in items_of(tree.get("titles")):
        kind, stage, is_for_portion = parse_title_type(text_of(item.get("titleType")) or "")
        titles.append(
            Title(
                text=text_of(item.get("title")) or "",
                type=kind,
                as_=stage,
                is_for_portion=is_for_portion,
            )
        )
    return titles


def current_title_for(titles: list[Title], title_type: str) -> Optional[str]:
    """The last title of the given type, or None."""
    current = None
    for title in titles:
        if title.type == title_type:
            current = title.text
    return current
