"""Downloads BILLSTATUS documents and stores them as raw XML."""

from __future__ import annotations

import logging

import requests

from components.entities import identity_from
from components.interfaces import ObjectStore, raw_key
from components.markup import bill_tree_from

logger = logging.getLogger(__name__)


def fetch_bill_status(session: requests.Session, loc: str, timeout: int = 30) -> bytes:
    """Download one BILLSTATUS document.

    Raises:
        ValueError: if loc is empty
        requests.HTTPError: if the server answers with an error status
    """
    if not loc:
        raise ValueError("Invalid record: no loc")
    logger.debug("Fetching %s", loc)
    response = session.get(loc, timeout=timeout)
    response.raise_for_status()
    return response.content


def store_bill_status(store: ObjectStore, body: bytes, prefix: str = "congress") -> str:
    """Store a raw document under the key named by its own identity.

    Returns:
        The storage key written
    """
    identity = identity_from(bill_tree_from(body))
    key = raw_key(identity.congress, identity.bill_type, identity.number, prefix)
    store.put(key, body, "application/xml")
    return key


def update_bill(
    session: requests.Session,
    store: ObjectStore,
    loc: str,
    prefix: str = "congress",
    timeout: int = 30,
) -> str:
    """Fetch the document at loc and store it; returns its storage key."""
    key = store_bill_status(store, fetch_bill_status(session, loc, timeout), prefix)
    logger.info("Updated %s", key)
    return key
