"""Turns BILLSTATUS documents into bill records and runs batches of them."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

import requests

from collectors.bill_status import update_bill
from collectors.sitemaps import SitemapDiff, batched_updates
from components.entities import (
    GOVINFO_BASE_URL,
    billstatus_url_for,
    cosponsors_for,
    identity_from,
    raw_actions_for,
    related_bills_for,
    sponsor_for,
    subjects_top_term_for,
    summary_for,
    text_of,
)
from components.interfaces import ObjectStore, record_key
from components.markup import bill_tree_from
from components.models import BillStatusError
from components.titles import current_title_for, titles_for
from timeline.history import history_from_actions, slip_law_from
from timeline.parser import classify_actions, latest_status

logger = logging.getLogger(__name__)

# Dropped from the record when absent.
_OPTIONAL_FIELDS = (
    "sponsor",
    "short_title",
    "popular_title",
    "summary",
    "subjects_top_term",
    "enacted_as",
)


def transform_bill(tree: dict[str, Any], base_url: str = GOVINFO_BASE_URL) -> dict[str, Any]:
    """Build the bill record for one parsed <bill> tree.

    The result depends only on the tree: the same input always gives
    the same record.

    Args:
        tree: The <bill> element of a BILLSTATUS document
        base_url: govinfo base URL used for the record's url

    Returns:
        The bill record as a JSON-ready dict

    Raises:
        MissingRequiredField: if the bill type, number or congress is missing
        InvalidBillId: if those do not form a valid bill id
        UnknownTitleType: if a title carries an unrecognized type label
    """
    identity = identity_from(tree)
    titles = titles_for(tree)
    actions = classify_actions(
        raw_actions_for(tree),
        identity.bill_id,
        identity.bill_type,
        current_title_for(titles, "official"),
    )
    introduced_at = text_of(tree.get("introducedDate"))
    status, status_at = latest_status(actions, introduced_at)
    sponsor = sponsor_for(tree)
    summary = summary_for(tree)

    record = {
        "bill_id": identity.bill_id,
        "bill_type": identity.bill_type,
        "number": identity.number,
        "congress": identity.congress,
        "url": billstatus_url_for(identity.bill_id, base_url),
        "introduced_at": introduced_at,
        "sponsor": sponsor.to_dict() if sponsor else None,
        "cosponsors": [c.to_dict() for c in cosponsors_for(tree)],
        "actions": [a.to_dict() for a in actions],
        "history": history_from_actions(actions).to_dict(),
        "status": status.value,
        "status_at": status_at,
        "titles": [t.to_dict() for t in titles],
        "official_title": text_of(tree.get("title")),
        "short_title": current_title_for(titles, "short"),
        "popular_title": current_title_for(titles, "popular"),
        "summary": summary.to_dict() if summary else None,
        "subjects_top_term": subjects_top_term_for(tree),
        "related_bills": [r.to_dict() for r in related_bills_for(tree)],
        "enacted_as": slip_law_from(actions),
        "updated_at": text_of(tree.get("updateDate")),
    }
    return {k: v for k, v in record.items() if v is not None or k not in _OPTIONAL_FIELDS}


def transform_document(body: bytes | str, base_url: str = GOVINFO_BASE_URL) -> dict[str, Any]:
    """Parse a BILLSTATUS XML document and transform it."""
    return transform_bill(bill_tree_from(body), base_url)


def to_json(record: dict[str, Any]) -> bytes:
    """Serialize a bill record."""
    return json.dumps(record, indent=2, ensure_ascii=False).encode("utf-8")


def is_valid_key(key: Optional[str]) -> bool:
    """Whether a stored object is a bill document worth transforming."""
    return bool(key) and not key.endswith("sitemap.xml") and key.endswith(".xml")


@dataclass
class BatchResult:
    """Outcome of processing a batch of bills."""

    processed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether every bill in the batch went through."""
        return not self.failures

    def merge(self, other: BatchResult) -> None:
        """Fold another batch's outcome into this one."""
        self.processed.extend(other.processed)
        self.skipped.extend(other.skipped)
        self.failures.update(other.failures)


def transform_key(store: ObjectStore, key: str, base_url: str = GOVINFO_BASE_URL) -> str:
    """Transform one stored document and store its record.

    Returns:
        The key the record was stored under
    """
    body = store.get(key)
    if body is None:
        raise FileNotFoundError(key)
    record = transform_document(body, base_url)
    prefix = key.split("/", 1)[0]
    out_key = record_key(record["congress"], record["bill_type"], record["number"], prefix)
    store.put(out_key, to_json(record), "application/json")
    return out_key


def process_batch(
    store: ObjectStore, keys: Iterable[str], base_url: str = GOVINFO_BASE_URL
) -> BatchResult:
    """Transform every stored document in keys.

    A bill that cannot be transformed is logged and recorded in the
    result; the rest of the batch still runs.
    """
    result = BatchResult()
    for key in keys:
        if not is_valid_key(key):
            result.skipped.append(key)
            continue
        try:
            out_key = transform_key(store, key, base_url)
        except (BillStatusError, FileNotFoundError) as e:
            logger.error("Failed to transform %s: %s", key, e, exc_info=True)
            result.failures[key] = str(e)
            continue
        logger.info("Transformed %s -> %s", key, out_key)
        result.processed.append(out_key)
    return result


def sync_bill_type(
    session: requests.Session,
    store: ObjectStore,
    congress: int,
    bill_type: str,
    base_url: str = GOVINFO_BASE_URL,
    prefix: str = "congress",
    timeout: int = 30,
) -> BatchResult:
    """Fetch and transform every document changed since the last sync.

    The server sitemap replaces the stored one only after all changed
    documents were processed.
    """
    diff = SitemapDiff(session, store, congress, bill_type, base_url, prefix, timeout)
    result = BatchResult()
    for batch in batched_updates(diff.updates()):
        keys = []
        for entry in batch:
            try:
                keys.append(update_bill(session, store, entry.loc, prefix, timeout))
            except (requests.HTTPError, BillStatusError) as e:
                logger.error("Failed to fetch %s: %s", entry.loc, e)
                result.failures[entry.loc] = str(e)
        result.merge(process_batch(store, keys, base_url))
    diff.commit()
    return result
