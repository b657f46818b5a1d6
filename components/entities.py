"""Flattens a parsed BILLSTATUS <bill> tree into typed entities.

Trees may come from an XML parser that keeps single elements as
scalars (xmltodict) or one that wraps every element in a list. Each
field access unwraps single-element lists one level deep with
`collapse`, so both shapes normalize to the same entities. Nothing
below the accessed level is touched.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from components.markup import html_to_text
from components.models import (
    BillIdentity,
    Cosponsor,
    InvalidBillId,
    MissingRequiredField,
    RelatedBill,
    Sponsor,
    Summary,
)
from timeline.models import RawAction

logger = logging.getLogger(__name__)

GOVINFO_BASE_URL = "https://www.govinfo.gov/"


def collapse(node: Any) -> dict[str, Any]:
    """Shallow copy of a record with single-element list values unwrapped."""
    if isinstance(node, list) and len(node) == 1:
        node = node[0]
    if not isinstance(node, dict):
        return {}
    return {
        key: value[0] if isinstance(value, list) and len(value) == 1 else value
        for key, value in node.items()
    }


def as_list(value: Any) -> list:
    """A repeated element as a list, whether the parser gave one or not."""
    if value is None or value == "":
        return []
    if isinstance(value, list):
        return value
    return [value]


def items_of(node: Any) -> list[dict[str, Any]]:
    """The collapsed <item> records of a container like <actions>."""
    return [collapse(item) for item in as_list(collapse(node).get("item"))]


def text_of(value: Any) -> Optional[str]:
    """A leaf value as a string, or None when absent."""
    if isinstance(value, list):
        value = value[-1] if value else None
    if value is None:
        return None
    return str(value)


def identity_from(tree: dict[str, Any]) -> BillIdentity:
    """Read the bill's type, number and congress.

    Raises:
        MissingRequiredField: if one of the three is absent or empty
        InvalidBillId: if the resulting bill id does not round-trip
    """
    fields = {}
    for name, fallback in (("billType", "type"), ("billNumber", "number"), ("congress", None)):
        value = text_of(tree.get(name))
        if not value and fallback:
            value = text_of(tree.get(fallback))
        if not value:
            raise MissingRequiredField(name)
        fields[name] = value.strip()

    bill_id = f"{fields['billType'].lower()}{fields['billNumber']}-{fields['congress']}"
    try:
        identity = BillIdentity(
            bill_type=fields["billType"].lower(),
            number=int(fields["billNumber"]),
            congress=int(fields["congress"]),
        )
    except ValueError as e:
        raise InvalidBillId(bill_id) from e
    if BillIdentity.from_bill_id(identity.bill_id) != identity:
        raise InvalidBillId(bill_id)
    return identity


def billstatus_url_for(bill_id: str, base_url: str = GOVINFO_BASE_URL) -> str:
    """Canonical govinfo location of a bill's status document."""
    identity = BillIdentity.from_bill_id(bill_id)
    congress, bill_type, number = identity.congress, identity.bill_type, identity.number
    return (
        f"{base_url}bulkdata/BILLSTATUS/{congress}/{bill_type}/"
        f"BILLSTATUS-{congress}{bill_type}{number}.xml"
    )


def raw_actions_for(tree: dict[str, Any]) -> list[RawAction]:
    """Raw actions in document (newest-first) order."""
    actions = []
    for item in items_of(tree.get("actions")):
        source_system = collapse(item.get("sourceSystem"))
        actions.append(
            RawAction(
                acted_at_date=text_of(item.get("actionDate")) or "",
                acted_at_time=text_of(item.get("actionTime")),
                action_code=text_of(item.get("actionCode")),
                source_system_code=text_of(source_system.get("code")),
                text=text_of(item.get("text")) or "",
            )
        )
    return actions


def _sponsor_from(item: dict[str, Any]) -> Sponsor:
    return Sponsor(
        name=f"{text_of(item.get('firstName')) or ''} {text_of(item.get('lastName')) or ''}",
        state=text_of(item.get("state")),
        district=text_of(item.get("district")),
        party=text_of(item.get("party")),
        bioguide_id=text_of(item.get("bioguideId")),
    )


def sponsor_for(tree: dict[str, Any]) -> Optional[Sponsor]:
    """The bill's sponsor (the last listed), or None for committee bills."""
    sponsors = items_of(tree.get("sponsors"))
    if not sponsors:
        return None
    return _sponsor_from(sponsors[-1])


def cosponsors_for(tree: dict[str, Any]) -> list[Cosponsor]:
    """Cosponsors, sorted by name."""
    cosponsors = [
        Cosponsor(
            sponsor=_sponsor_from(item),
            sponsored_at=text_of(item.get("sponsorshipDate")),
            withdrawn_at=text_of(item.get("sponsorshipWithdrawnDate")),
            original_cosponsor=text_of(item.get("isOriginalCosponsor")) == "True",
        )
        for item in items_of(tree.get("cosponsors"))
    ]
    return sorted(cosponsors, key=lambda c: c.sponsor.name.lower())


def summary_for(tree: dict[str, Any]) -> Optional[Summary]:
    """The most recently updated summary of the last summary group."""
    groups = as_list(collapse(tree.get("summaries")).get("billSummaries"))
    if not groups:
        return None
    summaries = items_of(groups[-1])
    if not summaries:
        return None

    latest = sorted(summaries, key=lambda s: text_of(s.get("updateDate")) or "")[-1]
    return Summary(
        date=text_of(latest.get("updateDate")),
        as_=text_of(latest.get("name")) or text_of(latest.get("actionDesc")),
        text=html_to_text(text_of(latest.get("text"))),
    )


def related_bills_for(tree: dict[str, Any]) -> list[RelatedBill]:
    """Bills related to this one, with the reason when one is given."""
    related = []
    for item in items_of(tree.get("relatedBills")):
        bill_type = (text_of(item.get("type")) or "").replace(".", "").lower()
        bill_id = f"{bill_type}{text_of(item.get('number'))}-{text_of(item.get('congress'))}"
        details = items_of(item.get("relationshipDetails"))
        if not details:
            related.append(RelatedBill(bill_id=bill_id))
            continue
        detail = details[-1]
        related.append(
            RelatedBill(
                bill_id=bill_id,
                reason=(text_of(detail.get("type")) or "").replace("bill", "").strip().lower(),
                identified_by=text_of(detail.get("identifiedBy")),
            )
        )
    return related


def subjects_top_term_for(tree: dict[str, Any]) -> Optional[str]:
    """The bill's policy area, lower-cased."""
    names = as_list(collapse(tree.get("policyArea")).get("name"))
    if not names:
        return None
    name = text_of(names[-1])
    return name.lower() if name else None
