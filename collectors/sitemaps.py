"""Finds new and changed BILLSTATUS documents by diffing govinfo sitemaps."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Iterator, Optional

import requests

from components.entities import as_list, collapse, text_of
from components.interfaces import ObjectStore, sitemap_key
from components.markup import parse_xml
from components.models import BILL_TYPES

logger = logging.getLogger(__name__)

BATCH_SIZE = 10


@dataclass(frozen=True)
class SitemapEntry:
    """One <url> of a bill-type sitemap."""

    loc: str
    lastmod: Optional[str]
    congress: int
    bill_type: str
    number: int


def validate_record(congress: Any, bill_type: Any) -> None:
    """Reject a (congress, bill type) pair that cannot name a sitemap.

    Raises:
        ValueError: if congress is empty or the bill type is unknown
    """
    if not congress or not bill_type or bill_type not in BILL_TYPES:
        raise ValueError(f"Invalid record: {congress} {bill_type}")


def sitemap_url_for(congress: int, bill_type: str, base_url: str = "https://www.govinfo.gov/") -> str:
    """govinfo sitemap listing every BILLSTATUS document of one bill type."""
    return f"{base_url}sitemap/bulkdata/BILLSTATUS/{congress}{bill_type}/sitemap.xml"


def document_pattern(congress: int, bill_type: str, base_url: str = "https://www.govinfo.gov/") -> re.Pattern:
    """Pattern matching this bill type's document URLs; group 1 is the number."""
    return re.compile(
        re.escape(f"{base_url}bulkdata/BILLSTATUS/{congress}/{bill_type}/BILLSTATUS-{congress}{bill_type}")
        + r"(\d+)\.xml"
    )


def entries_from(
    sitemap: Optional[dict[str, Any]],
    congress: int,
    bill_type: str,
    base_url: str = "https://www.govinfo.gov/",
) -> list[SitemapEntry]:
    """Sitemap entries that point at this bill type's documents."""
    if not sitemap:
        return []
    pattern = document_pattern(congress, bill_type, base_url)
    entries = []
    for url in as_list(collapse(sitemap.get("urlset")).get("url")):
        url = collapse(url)
        loc = text_of(url.get("loc"))
        if not loc:
            continue
        m = pattern.search(loc)
        if not m:
            continue
        entries.append(
            SitemapEntry(
                loc=loc,
                lastmod=text_of(url.get("lastmod")),
                congress=congress,
                bill_type=bill_type,
                number=int(m.group(1)),
            )
        )
    return entries


def find_updates(server: list[SitemapEntry], local: list[SitemapEntry]) -> list[SitemapEntry]:
    """Server entries that are missing locally or have a different lastmod."""
    local_lastmod = {entry.loc: entry.lastmod for entry in local}
    return [
        entry
        for entry in server
        if entry.loc not in local_lastmod or local_lastmod[entry.loc] != entry.lastmod
    ]


def batched_updates(updates: list[SitemapEntry], size: int = BATCH_SIZE) -> Iterator[list[SitemapEntry]]:
    """Split updates into consecutive batches of at most `size`."""
    for start in range(0, len(updates), size):
        yield updates[start:start + size]


def fetch_sitemap(session: requests.Session, url: str, timeout: int = 30) -> bytes:
    """Download a sitemap.

    Raises:
        requests.HTTPError: if the server answers with an error status
    """
    logger.debug("Fetching sitemap %s", url)
    response = session.get(url, timeout=timeout)
    response.raise_for_status()
    return response.content


class SitemapDiff:
    """Compares govinfo's sitemap for one bill type with the stored copy."""

    def __init__(
        self,
        session: requests.Session,
        store: ObjectStore,
        congress: int,
        bill_type: str,
        base_url: str = "https://www.govinfo.gov/",
        prefix: str = "congress",
        timeout: int = 30,
    ) -> None:
        validate_record(congress, bill_type)
        self.session = session
        self.store = store
        self.congress = congress
        self.bill_type = bill_type
        self.base_url = base_url
        self.prefix = prefix
        self.timeout = timeout
        self._server_sitemap: Optional[bytes] = None

    @property
    def key(self) -> str:
        """Storage key of the local sitemap copy."""
        return sitemap_key(self.congress, self.bill_type, self.prefix)

    def updates(self) -> list[SitemapEntry]:
        """Entries changed on the server since the stored sitemap."""
        self._server_sitemap = fetch_sitemap(
            self.session, sitemap_url_for(self.congress, self.bill_type, self.base_url), self.timeout
        )
        server = entries_from(
            parse_xml(self._server_sitemap), self.congress, self.bill_type, self.base_url
        )
        local_body = self.store.get(self.key)
        local = (
            entries_from(parse_xml(local_body), self.congress, self.bill_type, self.base_url)
            if local_body
            else []
        )
        updates = find_updates(server, local)
        logger.info(
            "%s-%s: %d documents listed, %d new or changed",
            self.bill_type, self.congress, len(server), len(updates)
        )
        return updates

    def commit(self) -> None:
        """Store the fetched server sitemap as the new local copy."""
        if self._server_sitemap is None:
            raise RuntimeError("commit() called before updates()")
        self.store.put(self.key, self._server_sitemap)
