"""Action node definitions with pattern matching rules.

This module defines the ordered rule cascade that classifies one bill
action. Every rule is evaluated against every action (no short-circuit)
and the classifier folds their partial updates in list order, so when two
rules set the same field the later rule wins.
"""

import re
from typing import Any, List, Optional

from timeline.models import (
    ActionNode,
    ActionType,
    BillStatus,
    Chamber,
    RuleContext,
    VoteType,
)
from timeline.extractors import (
    extract_committee,
    extract_house_roll,
    extract_law,
    extract_senate_roll,
    house_result,
    senate_result,
)
from timeline.status import (
    new_status_after_vote,
    status_after_enactment,
    status_after_referral,
    status_after_reporting,
)

# Actions on amendments start with the amendment number and are not
# classified.
AMENDMENT_ACTION = re.compile(r"^(H|S)\.Amdt\.(\d+)", re.I)

_HOUSE_MOTIONS = [
    r"On passage",
    r"Passed House",
    r"Two-thirds of the Members present having voted in the affirmative the bill is passed,?",
    r"On motion to suspend the rules and pass the (?:bill|resolution)",
    r"On agreeing to the (?:resolution|conference report)",
    r"On motion to suspend the rules and agree to the (?:resolution|conference report)",
    r"House Agreed to Senate Amendments.*?",
    r"On motion (?:that )?the House (?:suspend the rules and )?"
    r"(?:agree(?: with an amendment)? to|concur in) the Senate amendments?"
    r"(?: to the House amendments?| to the Senate amendments?)*",
]

_HOUSE_HOW = (
    r"(by voice vote|without objection|by (the Yeas and Nays?|Yea-Nay Vote|recorded vote)"
    r"(:? \(2/3 required\))?: (\d+ ?- ?\d+(, \d+ Present)? [ \)]*)?"
    r"\((Roll no\.|Record Vote No:) \d+\))"
)

HOUSE_VOTE = re.compile(
    "(" + "|".join(_HOUSE_MOTIONS) + ")"
    r"(, the objections of the President to the contrary notwithstanding.?)?"
    r"(, as amended| \(Amended\))?"
    r"\.? (Passed|Failed|Agreed to|Rejected)?"  # hr1625-115 has a stray period
    r" ?" + _HOUSE_HOW,
    re.I,
)

HOUSE_DEEMED_PASSAGE = re.compile(
    r"Passed House pursuant to"
    r"|House agreed to Senate amendment (with amendment )?pursuant to"
    r"|Pursuant to the provisions of [HSCONJRES\. ]+ \d+, [HSCONJRES\. ]+ \d+ is considered passed House",
    re.I,
)

HOUSE_TABLED = re.compile(
    r"On motion to table the measure Agreed to"
    r" ?(by voice vote|without objection|by (the Yeas and Nays|Yea-Nay Vote|recorded vote)"
    r": (\d+ - \d+(, \d+ Present)? [ \)]*)?\((Roll no\.|Record Vote No:) \d+\))",
    re.I,
)

_SENATE_MOTIONS = [
    r"Passed Senate",
    r"Failed of passage in Senate",
    r"Disagreed to in Senate",
    r"Resolution agreed to in Senate",
    r"Senate (?:agreed to|concurred in) (?:the )?(?:conference report|House amendment"
    r"(?: to the Senate amendments?| to the House amendments?)*)",
    r"Senate receded from its amendment and concurred",  # hr1-115
    r"Cloture \S*\s?on the motion to proceed .*?not invoked in Senate",
    r"Cloture(?: motion)? on the motion to proceed to the (?:bill|measure) invoked in Senate",
    r"Cloture invoked in Senate",
    r"Cloture on (?:the motion to (?:proceed to |concur in )"
    r"(?:the House amendment (?:to the Senate amendment )?to )?)?"
    r"(?:the bill|H\.R\. .*) (?:not )?invoked in Senate",
    r"(?:Introduced|Received|Submitted) in the Senate, "
    r"(?:read twice, |considered, |read the third time, )+and (?:passed|agreed to)",
]

# Matched case-sensitively, unlike the other rules.
SENATE_VOTE = re.compile(
    "(" + "|".join(_SENATE_MOTIONS) + ")"
    r"(,?.*,?) "
    r"(without objection|by Unanimous Consent|by Voice Vote"
    r"|(?:by )?Yea-Nay( Vote)?\. \d+\s*-\s*\d+\. Record Vote (No|Number): \d+)",
)

CALENDAR = re.compile(
    r"Placed on (the )?([\w ]+) Calendar( under ([\w ]+))?[,\.] Calendar No\. (\d+)\."
    r"|Committee Agreed to Seek Consideration Under Suspension of the Rules"
    r"|Ordered to be Reported",
    re.I,
)


def _vote_update(
    action_type: ActionType,
    vote_type: VoteType,
    chamber: Chamber,
    how: Optional[str],
    result: str,
    roll: Optional[int] = None,
    suspension: Optional[bool] = None,
    as_amended: bool = False,
) -> dict[str, Any]:
    update: dict[str, Any] = {
        "type": action_type,
        "vote_type": vote_type,
        "chamber": chamber,
        "how": how,
        "result": result,
        "suspension": suspension,
        "as_amended": as_amended,
    }
    if roll is not None:
        update["roll"] = roll
    return update


def _with_status(
    update: dict[str, Any], status: Optional[BillStatus]
) -> dict[str, Any]:
    """Attach a status to an update only when the rule produced one."""
    if status is not None:
        update["status"] = status
    return update


def _house_vote(match: re.Match, text: str, ctx: RuleContext) -> dict[str, Any]:
    motion, is_override, as_amended, outcome, how = match.group(1, 2, 3, 4, 5)
    result = house_result(motion, outcome, text)

    if "Two-thirds of the Members present" in motion:
        is_override = True

    if is_override:
        vote_type = VoteType.OVERRIDE
    elif re.search(r"(agree (with an amendment )?to|concur in) the Senate amendment", text, re.I):
        vote_type = VoteType.PINGPONG
    elif re.search(r"conference report", text, re.I):
        vote_type = VoteType.CONFERENCE
    elif ctx.bill_type == "hr":
        vote_type = VoteType.VOTE
    else:
        vote_type = VoteType.VOTE2

    how, roll = extract_house_roll(how)
    suspension = True if roll and "On motion to suspend the rules" in motion else None
    # alternate form of as amended, e.g. hr3979-113
    amended = bool(as_amended) or bool(
        re.search(r"the House agree with an amendment", motion, re.I)
    )

    update = _vote_update(
        ActionType.VOTE, vote_type, Chamber.HOUSE, how, result,
        roll=roll, suspension=suspension, as_amended=amended,
    )
    return _with_status(update, new_status_after_vote(
        vote_type, result == "pass", Chamber.HOUSE, ctx.bill_type,
        bool(suspension), amended, ctx.official_title, ctx.prev_status,
    ))


def _house_deemed(match: re.Match, text: str, ctx: RuleContext) -> dict[str, Any]:
    if re.search(r"agreed to Senate amendment", text, re.I):
        vote_type = VoteType.PINGPONG
    elif ctx.bill_type == "hr":
        vote_type = VoteType.VOTE
    else:
        vote_type = VoteType.VOTE2
    amended = bool(
        re.search(r"with amendment", text, re.I) or re.search(r"as amended", text)
    )
    update = _vote_update(
        ActionType.VOTE, vote_type, Chamber.HOUSE, "by special rule", "pass",
        as_amended=amended,
    )
    return _with_status(update, new_status_after_vote(
        vote_type, True, Chamber.HOUSE, ctx.bill_type,
        False, amended, ctx.official_title, ctx.prev_status,
    ))


def _house_tabled(match: re.Match, text: str, ctx: RuleContext) -> dict[str, Any]:
    # Agreeing to table the measure kills it, so it counts as a failed
    # vote in whichever chamber-round the bill is in.
    if ctx.prev_status == BillStatus.INTRODUCED or ctx.bill_type == "hres":
        vote_type = VoteType.VOTE
    else:
        vote_type = VoteType.VOTE2
    how, roll = extract_house_roll(match.group(1))
    update = _vote_update(
        ActionType.VOTE, vote_type, Chamber.HOUSE, how, "fail", roll=roll,
    )
    return _with_status(update, new_status_after_vote(
        vote_type, False, Chamber.HOUSE, ctx.bill_type,
        False, False, ctx.official_title, ctx.prev_status,
    ))


def _senate_vote(match: re.Match, text: str, ctx: RuleContext) -> dict[str, Any]:
    motion, extra, how = match.group(1, 2, 3)
    result = senate_result(motion)

    action_type = ActionType.VOTE
    if re.search(r"over veto", extra, re.I):
        vote_type = VoteType.OVERRIDE
    elif re.search(r"conference report", motion, re.I):
        vote_type = VoteType.CONFERENCE
    elif re.search(r"cloture", motion, re.I):
        vote_type = VoteType.CLOTURE
        action_type = ActionType.VOTE_AUX  # not a vote on passage
    elif re.search(
        r"Senate agreed to (the )?House amendment|Senate concurred in (the )?House amendment",
        motion, re.I,
    ):
        vote_type = VoteType.PINGPONG
    elif ctx.bill_type == "s":
        vote_type = VoteType.VOTE
    else:
        vote_type = VoteType.VOTE2

    how, roll = extract_senate_roll(how)
    amended = bool(re.search(r"with amendments|with an amendment", extra, re.I))

    update = _vote_update(
        action_type, vote_type, Chamber.SENATE, how, result,
        roll=roll, as_amended=amended,
    )
    return _with_status(update, new_status_after_vote(
        vote_type, result == "pass", Chamber.SENATE, ctx.bill_type,
        False, amended, ctx.official_title, ctx.prev_status,
    ))


def _calendar(match: re.Match, text: str, ctx: RuleContext) -> dict[str, Any]:
    return _with_status(
        {"type": ActionType.CALENDAR}, status_after_reporting(ctx.prev_status)
    )


def _reported(match: re.Match, text: str, ctx: RuleContext) -> dict[str, Any]:
    update = {"type": ActionType.REPORTED, "committee": extract_committee(match)}
    return _with_status(update, status_after_reporting(ctx.prev_status))


def _hearings(match: re.Match, text: str, ctx: RuleContext) -> dict[str, Any]:
    return {"type": ActionType.HEARINGS, "committee": extract_committee(match)}


def _discharged(match: re.Match, text: str, ctx: RuleContext) -> dict[str, Any]:
    update = {"type": ActionType.DISCHARGED, "committee": extract_committee(match)}
    return _with_status(update, status_after_reporting(ctx.prev_status))


def _to_president(match: re.Match, text: str, ctx: RuleContext) -> dict[str, Any]:
    return {"type": ActionType.TOPRESIDENT}


def _signed(match: re.Match, text: str, ctx: RuleContext) -> dict[str, Any]:
    return {"type": ActionType.SIGNED, "status": BillStatus.ENACTED_SIGNED}


def _vetoed(match: re.Match, text: str, ctx: RuleContext) -> dict[str, Any]:
    if re.search(r"Pocket Vetoed by President", text, re.I):
        return {
            "type": ActionType.VETOED,
            "pocket": True,
            "status": BillStatus.VETOED_POCKET,
        }
    return {"type": ActionType.VETOED, "status": BillStatus.PROV_KILL_VETO}


def _ten_day_rule(match: re.Match, text: str, ctx: RuleContext) -> dict[str, Any]:
    return {"status": BillStatus.ENACTED_TENDAYRULE}


def _enacted(match: re.Match, text: str, ctx: RuleContext) -> dict[str, Any]:
    update: dict[str, Any] = {"type": ActionType.ENACTED}
    law = extract_law(match)
    if law is not None:
        update["law"] = law
    return _with_status(update, status_after_enactment(ctx.prev_status))


def _referral(match: re.Match, text: str, ctx: RuleContext) -> dict[str, Any]:
    return _with_status(
        {"type": ActionType.REFERRAL}, status_after_referral(ctx.prev_status)
    )


def create_action_nodes() -> List[ActionNode]:
    """Create the ordered rule cascade.

    Returns:
        List of ActionNode objects in evaluation order
    """
    nodes = []

    # =========================================================================
    # VOTES
    # =========================================================================

    nodes.append(ActionNode(
        name="house-vote",
        patterns=[HOUSE_VOTE],
        handler=_house_vote,
        preprocess=lambda text: text.replace(", the Passed", ", Passed"),
    ))
    # Passed House, not necessarily by an actual vote (think "deem")
    nodes.append(ActionNode(
        name="house-deemed-passage",
        patterns=[HOUSE_DEEMED_PASSAGE],
        handler=_house_deemed,
    ))
    nodes.append(ActionNode(
        name="house-tabled",
        patterns=[HOUSE_TABLED],
        handler=_house_tabled,
    ))
    nodes.append(ActionNode(
        name="senate-vote",
        patterns=[SENATE_VOTE],
        handler=_senate_vote,
        preprocess=lambda text: text.replace("  ", " "),
    ))

    # =========================================================================
    # CALENDAR AND COMMITTEE ACTIONS
    # =========================================================================

    nodes.append(ActionNode(
        name="calendar",
        patterns=[CALENDAR],
        handler=_calendar,
    ))
    nodes.append(ActionNode(
        name="reported",
        patterns=[
            re.compile(r"Committee on (.*)\. Reported by", re.I),
            # 93rd Congress
            re.compile(r"Reported to Senate from the (.*?)( \(without written report\))?\.", re.I),
        ],
        handler=_reported,
    ))
    nodes.append(ActionNode(
        name="hearings",
        patterns=[re.compile(r"(Committee on .*?)\. Hearings held", re.I)],
        handler=_hearings,
    ))
    nodes.append(ActionNode(
        name="discharged",
        patterns=[re.compile(r"Committee on (.*)\. Discharged (by Unanimous Consent)?", re.I)],
        handler=_discharged,
    ))

    # =========================================================================
    # PRESIDENTIAL ACTIONS
    # =========================================================================

    nodes.append(ActionNode(
        name="to-president",
        patterns=[re.compile(r"Cleared for White House|Presented to President", re.I)],
        handler=_to_president,
    ))
    nodes.append(ActionNode(
        name="signed",
        patterns=[re.compile(r"Signed by President", re.I)],
        handler=_signed,
    ))
    nodes.append(ActionNode(
        name="vetoed",
        patterns=[re.compile(r"Vetoed by President", re.I)],
        handler=_vetoed,
    ))
    nodes.append(ActionNode(
        name="ten-day-rule",
        patterns=[re.compile(r"Sent to Archivist of the United States unsigned")],
        handler=_ten_day_rule,
    ))
    nodes.append(ActionNode(
        name="enacted",
        patterns=[re.compile(r"^(?:Became )?(Public|Private) Law(?: No:)? ([\d\-]+)\.", re.I)],
        handler=_enacted,
    ))

    # =========================================================================
    # REFERRAL
    # =========================================================================

    nodes.append(ActionNode(
        name="referral",
        patterns=[re.compile(r"Referred to (?:the )?(House|Senate)?\s?(?:Committee|Subcommittee)?", re.I)],
        handler=_referral,
    ))

    return nodes


ACTION_NODES = create_action_nodes()
