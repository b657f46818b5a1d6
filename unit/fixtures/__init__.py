"""Test fixtures and enums for unit testing."""

from enum import Enum


class SourceSystem(str, Enum):
    """sourceSystem codes seen in BILLSTATUS actions."""

    HOUSE_FLOOR = "2"
    SENATE = "0"
    LIBRARY_OF_CONGRESS = "9"


class ActionText(str, Enum):
    """Action texts that drive common status transitions."""

    INTRODUCED = "Introduced in House"
    REFERRAL = "Referred to the House Committee on the Judiciary."
    REPORTED = "Committee on the Judiciary. Reported by Voice Vote."
    HOUSE_PASSED = "On passage Passed by voice vote."
    SENATE_PASSED = "Passed Senate without amendment by Unanimous Consent."
    PRESENTED = "Presented to President."
    SIGNED = "Signed by President."
    VETOED = "Vetoed by President."
    PUBLIC_LAW = "Became Public Law No: 116-123."
