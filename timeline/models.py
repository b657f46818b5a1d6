"""Core data models for the action timeline engine."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Callable, Optional


class ActionType(str, Enum):
    """Enumeration of all classified action types."""

    ACTION = "action"
    VOTE = "vote"
    VOTE_AUX = "vote-aux"
    CALENDAR = "calendar"
    REPORTED = "reported"
    HEARINGS = "hearings"
    DISCHARGED = "discharged"
    REFERRAL = "referral"
    TOPRESIDENT = "topresident"
    SIGNED = "signed"
    VETOED = "vetoed"
    ENACTED = "enacted"


class VoteType(str, Enum):
    """Which kind of vote an action records."""

    VOTE = "vote"  # originating chamber
    VOTE2 = "vote2"  # second chamber
    PINGPONG = "pingpong"
    CONFERENCE = "conference"
    CLOTURE = "cloture"
    OVERRIDE = "override"


class Chamber(str, Enum):
    """Chamber of Congress where an action happened."""

    HOUSE = "h"
    SENATE = "s"

    @property
    def label(self) -> str:
        """Status suffix used for this chamber."""
        return "HOUSE" if self is Chamber.HOUSE else "SENATE"


class BillStatus(str, Enum):
    """Closed set of legislative statuses.

    Members are grouped by lifecycle family; the value is the exact spelling
    published in bill records.
    """

    INTRODUCED = "INTRODUCED"
    REFERRED = "REFERRED"
    REPORTED = "REPORTED"

    PASS_OVER_HOUSE = "PASS_OVER:HOUSE"
    PASS_OVER_SENATE = "PASS_OVER:SENATE"
    PASS_BACK_HOUSE = "PASS_BACK:HOUSE"
    PASS_BACK_SENATE = "PASS_BACK:SENATE"

    PASSED_SIMPLERES = "PASSED:SIMPLERES"
    PASSED_CONSTAMEND = "PASSED:CONSTAMEND"
    PASSED_CONCURRENTRES = "PASSED:CONCURRENTRES"
    PASSED_BILL = "PASSED:BILL"

    FAIL_ORIGINATING_HOUSE = "FAIL:ORIGINATING:HOUSE"
    FAIL_ORIGINATING_SENATE = "FAIL:ORIGINATING:SENATE"
    FAIL_SECOND_HOUSE = "FAIL:SECOND:HOUSE"
    FAIL_SECOND_SENATE = "FAIL:SECOND:SENATE"

    PROV_KILL_SUSPENSIONFAILED = "PROV_KILL:SUSPENSIONFAILED"
    PROV_KILL_PINGPONGFAIL = "PROV_KILL:PINGPONGFAIL"
    PROV_KILL_CLOTUREFAILED = "PROV_KILL:CLOTUREFAILED"
    PROV_KILL_VETO = "PROV_KILL:VETO"

    CONFERENCE_PASSED_HOUSE = "CONFERENCE:PASSED:HOUSE"
    CONFERENCE_PASSED_SENATE = "CONFERENCE:PASSED:SENATE"

    VETOED_POCKET = "VETOED:POCKET"
    VETOED_OVERRIDE_FAIL_ORIGINATING_HOUSE = "VETOED:OVERRIDE_FAIL_ORIGINATING:HOUSE"
    VETOED_OVERRIDE_FAIL_ORIGINATING_SENATE = "VETOED:OVERRIDE_FAIL_ORIGINATING:SENATE"
    VETOED_OVERRIDE_FAIL_SECOND_HOUSE = "VETOED:OVERRIDE_FAIL_SECOND:HOUSE"
    VETOED_OVERRIDE_FAIL_SECOND_SENATE = "VETOED:OVERRIDE_FAIL_SECOND:SENATE"
    VETOED_OVERRIDE_PASS_OVER_HOUSE = "VETOED:OVERRIDE_PASS_OVER:HOUSE"
    VETOED_OVERRIDE_PASS_OVER_SENATE = "VETOED:OVERRIDE_PASS_OVER:SENATE"

    ENACTED_SIGNED = "ENACTED:SIGNED"
    ENACTED_VETO_OVERRIDE = "ENACTED:VETO_OVERRIDE"
    ENACTED_TENDAYRULE = "ENACTED:TENDAYRULE"

    @property
    def family(self) -> str:
        """Lifecycle family, e.g. "VETOED" for "VETOED:POCKET"."""
        return self.value.split(":", 1)[0]

    @property
    def is_enacted(self) -> bool:
        """True for the terminal ENACTED:* statuses."""
        return self.family == "ENACTED"

    @staticmethod
    def for_chamber(prefix: str, chamber: Chamber) -> BillStatus:
        """Look up a chamber-suffixed status.

        Args:
            prefix: Status spelling without the chamber, e.g. "PASS_OVER"
            chamber: Chamber whose suffix to append

        Returns:
            The matching status member
        """
        return BillStatus(f"{prefix}:{chamber.label}")


TERMINAL_ENACTED_STATUSES = {
    BillStatus.ENACTED_SIGNED,
    BillStatus.ENACTED_VETO_OVERRIDE,
    BillStatus.ENACTED_TENDAYRULE,
}


@dataclass(frozen=True)
class RawAction:
    """One <item> from a bill's <actions> list, before classification."""

    acted_at_date: Optional[str]
    text: str
    acted_at_time: Optional[str] = None
    action_code: Optional[str] = None
    source_system_code: Optional[str] = None


@dataclass(frozen=True)
class LawCitation:
    """Public or private law an enacted bill became."""

    kind: str  # "public" or "private"
    congress: int
    number: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to the published dictionary form."""
        return {"kind": self.kind, "congress": self.congress, "number": self.number}


@dataclass(frozen=True)
class ClassifiedAction:
    """A single action taken on a bill, typed and annotated.

    Represents one deduplicated row of the bill's action history, with
    whatever procedural or vote metadata the rule cascade extracted.
    """

    acted_at: str
    text: str
    type: ActionType = ActionType.ACTION
    action_code: Optional[str] = None
    status: Optional[BillStatus] = None
    vote_type: Optional[VoteType] = None
    chamber: Optional[Chamber] = None
    how: Optional[str] = None
    result: Optional[str] = None  # "pass" or "fail"
    roll: Optional[int] = None
    suspension: Optional[bool] = None
    as_amended: Optional[bool] = None
    committee: Optional[str] = None
    pocket: Optional[bool] = None
    law: Optional[LawCitation] = None

    def __str__(self) -> str:
        """Human-readable representation."""
        return f"{self.acted_at} [{self.type.value}] {self.text[:60]}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, omitting None values."""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, LawCitation):
                value = value.to_dict()
            result[f.name] = value
        return result


@dataclass(frozen=True)
class RuleContext:
    """Bill-level facts every rule may consult.

    `prev_status` is the status in force before the action being
    classified; rules never see status changes made by other rules on
    the same action.
    """

    bill_id: str
    bill_type: str
    prev_status: BillStatus = BillStatus.INTRODUCED
    official_title: str = ""


@dataclass
class ActionNode:
    """One rule in the classification cascade.

    Each node matches action text against its patterns (first pattern
    that hits wins) and turns the match into a partial update of the
    action's fields. Nodes never mutate the action themselves; the
    classifier folds their updates in order.
    """

    name: str
    patterns: list[re.Pattern]
    handler: Callable[[re.Match, str, RuleContext], dict[str, Any]]
    preprocess: Optional[Callable[[str], str]] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def match(self, action_text: str) -> Optional[re.Match]:
        """Try to match action text against this node's patterns.

        Args:
            action_text: Action text, already passed through `preprocess`

        Returns:
            Match object if successful, None otherwise
        """
        for pattern in self.patterns:
            match = pattern.search(action_text)
            if match:
                return match
        return None

    def apply(self, action_text: str, context: RuleContext) -> Optional[dict[str, Any]]:
        """Evaluate this rule against one action.

        Args:
            action_text: Raw action text
            context: Bill-level facts and the prior status

        Returns:
            Partial field update, or None if the rule does not match
        """
        text = self.preprocess(action_text) if self.preprocess else action_text
        match = self.match(text)
        if match is None:
            return None
        return self.handler(match, text, context)


@dataclass(frozen=True)
class History:
    """Milestones derived from a bill's classified actions."""

    active: bool = False
    active_at: Optional[str] = None
    house_passage_result: Optional[str] = None
    house_passage_result_at: Optional[str] = None
    senate_passage_result: Optional[str] = None
    senate_passage_result_at: Optional[str] = None
    senate_cloture_result: Optional[str] = None
    senate_cloture_result_at: Optional[str] = None
    vetoed: bool = False
    vetoed_at: Optional[str] = None
    house_override_result: Optional[str] = None
    house_override_result_at: Optional[str] = None
    senate_override_result: Optional[str] = None
    senate_override_result_at: Optional[str] = None
    enacted: bool = False
    enacted_at: Optional[str] = None
    awaiting_signature: bool = False
    awaiting_signature_since: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, omitting unset timestamps and results."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }
