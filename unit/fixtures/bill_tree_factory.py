"""Factory for creating parsed BILLSTATUS <bill> trees and documents."""

from typing import Any, Optional

import xmltodict

from timeline.models import RawAction


class BillTreeFactory:
    """Builds trees in the shape xmltodict gives for BILLSTATUS documents."""

    @staticmethod
    def action_item(action: RawAction) -> dict[str, Any]:
        """Convert a RawAction back into an <actions><item> record."""
        item: dict[str, Any] = {"actionDate": action.acted_at_date, "text": action.text}
        if action.acted_at_time:
            item["actionTime"] = action.acted_at_time
        if action.action_code:
            item["actionCode"] = action.action_code
        if action.source_system_code:
            item["sourceSystem"] = {"code": action.source_system_code, "name": "House floor actions"}
        return item

    @staticmethod
    def member(
        first: str = "Jerrold",
        last: str = "Nadler",
        state: str = "NY",
        district: Optional[str] = "10",
        party: str = "D",
        bioguide_id: str = "N000002",
        **extra: str,
    ) -> dict[str, Any]:
        """A sponsor or cosponsor <item>."""
        item = {
            "bioguideId": bioguide_id,
            "firstName": first,
            "lastName": last,
            "party": party,
            "state": state,
        }
        if district is not None:
            item["district"] = district
        item.update(extra)
        return item

    @staticmethod
    def create_bill(
        bill_type: str = "HR",
        number: str = "1234",
        congress: str = "116",
        actions: Optional[list[RawAction]] = None,
        titles: Optional[list[tuple[str, str]]] = None,
        sponsors: Optional[list[dict[str, Any]]] = None,
        cosponsors: Optional[list[dict[str, Any]]] = None,
        summaries: Optional[list[dict[str, Any]]] = None,
        related_bills: Optional[list[dict[str, Any]]] = None,
        policy_area: Optional[str] = "Crime and Law Enforcement",
        title: str = "To amend title 18, United States Code, and for other purposes.",
    ) -> dict[str, Any]:
        """Create a <bill> tree.

        Args:
            actions: Raw actions in document (newest-first) order
            titles: (titleType, title) pairs
        """
        if titles is None:
            titles = [("Official Title as Introduced", title)]
        tree: dict[str, Any] = {
            "billNumber": number,
            "updateDate": "2019-12-05T09:41:22Z",
            "billType": bill_type,
            "introducedDate": "2019-01-03",
            "congress": congress,
            "title": title,
            "titles": {
                "item": [{"titleType": t, "title": text} for t, text in titles]
            },
            "actions": {
                "item": [BillTreeFactory.action_item(a) for a in (actions or [])]
            },
        }
        if sponsors is not None:
            tree["sponsors"] = {"item": sponsors}
        if cosponsors is not None:
            tree["cosponsors"] = {"item": cosponsors}
        if summaries is not None:
            tree["summaries"] = {"billSummaries": {"item": summaries}}
        if related_bills is not None:
            tree["relatedBills"] = {"item": related_bills}
        if policy_area is not None:
            tree["policyArea"] = {"name": policy_area}
        return tree

    @staticmethod
    def to_xml(tree: dict[str, Any]) -> bytes:
        """Render a <bill> tree as a BILLSTATUS document."""
        return xmltodict.unparse({"billStatus": {"bill": tree}}).encode("utf-8")
