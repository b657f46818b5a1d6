"""Legislative status state machine.

Pure functions mapping a vote (or an enactment citation) plus the bill's
prior status to the next status. The classifier replays these action by
action to stamp each action and derive the bill's final status.
"""

from __future__ import annotations

from typing import Optional

from timeline.models import (
    BillStatus,
    Chamber,
    TERMINAL_ENACTED_STATUSES,
    VoteType,
)

CONSTITUTIONAL_AMENDMENT_PREFIX = (
    "Proposing an amendment to the Constitution of the United States"
)

REPORTABLE_STATUSES = {BillStatus.INTRODUCED, BillStatus.REFERRED}


def originating_chamber(bill_type: str) -> Chamber:
    """Chamber a bill type is introduced in ("hjres" -> House)."""
    return Chamber.HOUSE if bill_type.startswith("h") else Chamber.SENATE


def _passed_both_chambers(bill_type: str, title: str) -> BillStatus:
    """Final status for a measure that cleared both chambers unamended."""
    if bill_type in ("hjres", "sjres") and (title or "").startswith(
        CONSTITUTIONAL_AMENDMENT_PREFIX
    ):
        return BillStatus.PASSED_CONSTAMEND
    if bill_type in ("hconres", "sconres"):
        return BillStatus.PASSED_CONCURRENTRES
    return BillStatus.PASSED_BILL


def new_status_after_vote(
    vote_type: VoteType,
    passed: bool,
    chamber: Chamber,
    bill_type: str,
    suspension: bool,
    amended: bool,
    title: str,
    prev_status: BillStatus,
) -> Optional[BillStatus]:
    """Compute the status that follows a vote.

    Args:
        vote_type: Kind of vote (originating, second chamber, override...)
        passed: Whether the motion carried
        chamber: Chamber that voted
        bill_type: Bill type code, e.g. "hr", "sjres"
        suspension: Whether the vote was under suspension of the rules
        amended: Whether the measure passed in amended form
        title: Official title, used to spot constitutional amendments
        prev_status: Status before this vote

    Returns:
        The next status, or None when the vote does not change status
    """
    if vote_type == VoteType.VOTE:
        if passed:
            if bill_type in ("hres", "sres"):
                return BillStatus.PASSED_SIMPLERES
            return BillStatus.for_chamber("PASS_OVER", chamber)
        if suspension:
            return BillStatus.PROV_KILL_SUSPENSIONFAILED
        return BillStatus.for_chamber("FAIL:ORIGINATING", chamber)

    if vote_type in (VoteType.VOTE2, VoteType.PINGPONG):
        if passed:
            if amended:
                return BillStatus.for_chamber("PASS_BACK", chamber)
            return _passed_both_chambers(bill_type, title)
        if vote_type == VoteType.PINGPONG:
            # the chamber can vote on the other chamber's changes again
            return BillStatus.PROV_KILL_PINGPONGFAIL
        if suspension:
            return BillStatus.PROV_KILL_SUSPENSIONFAILED
        return BillStatus.for_chamber("FAIL:SECOND", chamber)

    if vote_type == VoteType.CLOTURE:
        if not passed:
            return BillStatus.PROV_KILL_CLOTUREFAILED
        return None

    if vote_type == VoteType.OVERRIDE:
        in_originating = originating_chamber(bill_type) == chamber
        if not passed:
            if in_originating:
                return BillStatus.for_chamber("VETOED:OVERRIDE_FAIL_ORIGINATING", chamber)
            return BillStatus.for_chamber("VETOED:OVERRIDE_FAIL_SECOND", chamber)
        if in_originating:
            return BillStatus.for_chamber("VETOED:OVERRIDE_PASS_OVER", chamber)
        return BillStatus.ENACTED_VETO_OVERRIDE

    if vote_type == VoteType.CONFERENCE:
        # both chambers must agree to the conference report
        if not passed:
            return None
        if prev_status.value.startswith("CONFERENCE:PASSED:"):
            return _passed_both_chambers(bill_type, title)
        return BillStatus.for_chamber("CONFERENCE:PASSED", chamber)

    return None


def status_after_reporting(prev_status: BillStatus) -> Optional[BillStatus]:
    """Status after a calendar placement, report, or discharge."""
    if prev_status in REPORTABLE_STATUSES:
        return BillStatus.REPORTED
    return None


def status_after_referral(prev_status: BillStatus) -> Optional[BillStatus]:
    """Status after a committee referral."""
    if prev_status == BillStatus.INTRODUCED:
        return BillStatus.REFERRED
    return None


def status_after_enactment(prev_status: BillStatus) -> Optional[BillStatus]:
    """Status after a public/private law citation.

    A citation following a signature, override, or ten-day rule is an
    administrative step. After a veto it means the veto was overridden.
    Anything else leaves the status as the other rules computed it.
    """
    if prev_status in TERMINAL_ENACTED_STATUSES:
        return None
    if prev_status == BillStatus.PROV_KILL_VETO or prev_status.family == "VETOED":
        return BillStatus.ENACTED_VETO_OVERRIDE
    return None
