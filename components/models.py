"""Data models for congressional bill status records."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Optional

BILL_TYPES = (
    "hres",
    "hconres",
    "hr",
    "hjres",
    "sres",
    "sjres",
    "s",
    "sconres",
)

BILL_ID_PATTERN = re.compile(r"^([a-z]+)(\d+)-(\d+)$")


class BillStatusError(ValueError):
    """A bill document could not be turned into a bill record."""


class InvalidBillId(BillStatusError):
    """A bill id does not match "{type}{number}-{congress}"."""

    def __init__(self, bill_id: str) -> None:
        super().__init__(f"Invalid bill id: {bill_id}")
        self.bill_id = bill_id


class UnknownTitleType(BillStatusError):
    """A title-type label is not one of the known kinds."""

    def __init__(self, label: str) -> None:
        super().__init__(f"Unknown title type: {label}")
        self.label = label


class MissingRequiredField(BillStatusError):
    """The document lacks a field every bill must have."""

    def __init__(self, field_name: str) -> None:
        super().__init__(f"Missing required field: {field_name}")
        self.field_name = field_name


class MalformedDocument(BillStatusError):
    """A document is not well-formed XML."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Malformed document: {reason}")
        self.reason = reason


@dataclass(frozen=True)
class BillIdentity:
    """Identity of a bill, e.g. H.R. 1234 of the 116th Congress."""

    bill_type: str
    number: int
    congress: int
    bill_id: str = field(init=False)

    def __post_init__(self) -> None:
        # Derived once; the dataclass is frozen so it cannot drift.
        object.__setattr__(
            self, "bill_id", f"{self.bill_type}{self.number}-{self.congress}"
        )

    @staticmethod
    def from_bill_id(bill_id: str) -> BillIdentity:
        """Parse "hr1234-116" back into its parts.

        Raises:
            InvalidBillId: if the id does not match the canonical pattern
        """
        m = BILL_ID_PATTERN.match(bill_id or "")
        if not m:
            raise InvalidBillId(bill_id)
        return BillIdentity(
            bill_type=m.group(1), number=int(m.group(2)), congress=int(m.group(3))
        )


@dataclass(frozen=True)
class Title:
    """One of a bill's titles."""

    text: str
    type: str  # official, short, popular, display, nonbillreport
    as_: str  # stage the title was given at, e.g. "introduced"
    is_for_portion: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to the published dictionary form."""
        return {
            "title": self.text,
            "type": self.type,
            "as": self.as_,
            "is_for_portion": self.is_for_portion,
        }


@dataclass(frozen=True)
class Sponsor:
    """A member of Congress sponsoring a bill."""

    name: str
    state: Optional[str]
    party: Optional[str]
    bioguide_id: Optional[str]
    district: Optional[str] = None  # missing for senators

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, omitting None values."""
        result = {
            "name": self.name,
            "state": self.state,
            "district": self.district,
            "party": self.party,
            "id": self.bioguide_id,
        }
        return {k: v for k, v in result.items() if v is not None}


@dataclass(frozen=True)
class Cosponsor:
    """A cosponsor and when they joined (or left) the bill."""

    sponsor: Sponsor
    sponsored_at: Optional[str] = None
    withdrawn_at: Optional[str] = None
    original_cosponsor: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, omitting None values."""
        result = self.sponsor.to_dict()
        result["original_cosponsor"] = self.original_cosponsor
        if self.sponsored_at is not None:
            result["sponsored_at"] = self.sponsored_at
        if self.withdrawn_at is not None:
            result["withdrawn_at"] = self.withdrawn_at
        return result


@dataclass(frozen=True)
class Summary:
    """The most recent CRS summary of a bill."""

    date: Optional[str]
    as_: Optional[str]
    text: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to the published dictionary form."""
        return {"date": self.date, "as": self.as_, "text": self.text}


@dataclass(frozen=True)
class RelatedBill:
    """Another bill this one is related to."""

    bill_id: str
    reason: Optional[str] = None
    identified_by: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, omitting None values."""
        result = {
            "reason": self.reason,
            "bill_id": self.bill_id,
            "type": "bill",
            "identified_by": self.identified_by,
        }
        return {k: v for k, v in result.items() if v is not None}
