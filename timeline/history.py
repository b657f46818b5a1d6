"""Milestone summary of a bill's classified action timeline."""

from __future__ import annotations

import re
from typing import Callable, Optional

from timeline.models import (
    ActionType,
    Chamber,
    ClassifiedAction,
    History,
    VoteType,
)

INTRODUCTORY_REMARKS = re.compile(r"Sponsor introductory remarks", re.I)

_ROUTINE_TYPES = {ActionType.REFERRAL, ActionType.CALENDAR}


def activation_from(actions: list[ClassifiedAction]) -> Optional[ClassifiedAction]:
    """Find the first action beyond the routine ones every bill gets.

    - first action is a referral, calendar placement, or plain action:
      the first later action that is not a referral, calendar placement,
      or introductory remarks (e.g. hr3590-111 active, s1-113 inactive)
    - first action is anything else (e.g. a vote, for bills that skip
      committee): that first action (e.g. s227-113)

    Args:
        actions: Classified actions, oldest first

    Returns:
        The activating action, or None if the bill never became active
    """
    if not actions:
        return None
    first = actions[0]
    if first.type not in (_ROUTINE_TYPES | {ActionType.ACTION}):
        return first
    for action in actions[1:]:
        if action.type in _ROUTINE_TYPES:
            continue
        if INTRODUCTORY_REMARKS.search(action.text):
            continue
        return action
    return None


def _last(
    actions: list[ClassifiedAction], predicate: Callable[[ClassifiedAction], bool]
) -> Optional[ClassifiedAction]:
    found = None
    for action in actions:
        if predicate(action):
            found = action
    return found


def _passage_vote(chamber: Chamber) -> Callable[[ClassifiedAction], bool]:
    return lambda a: (
        a.type == ActionType.VOTE
        and a.chamber == chamber
        and a.vote_type != VoteType.OVERRIDE
    )


def _override_vote(chamber: Chamber) -> Callable[[ClassifiedAction], bool]:
    return lambda a: (
        a.type == ActionType.VOTE
        and a.chamber == chamber
        and a.vote_type == VoteType.OVERRIDE
    )


def history_from_actions(actions: list[ClassifiedAction]) -> History:
    """Pull the major historical events out of a classified timeline.

    Args:
        actions: Classified, status-stamped actions, oldest first

    Returns:
        History record, rebuilt from scratch on every call
    """
    fields: dict = {}

    activation = activation_from(actions)
    fields["active"] = activation is not None
    if activation is not None:
        fields["active_at"] = activation.acted_at

    house_vote = _last(actions, _passage_vote(Chamber.HOUSE))
    if house_vote:
        fields["house_passage_result"] = house_vote.result
        fields["house_passage_result_at"] = house_vote.acted_at

    senate_vote = _last(actions, _passage_vote(Chamber.SENATE))
    if senate_vote:
        fields["senate_passage_result"] = senate_vote.result
        fields["senate_passage_result_at"] = senate_vote.acted_at

    cloture = _last(actions, lambda a: (
        a.type == ActionType.VOTE_AUX
        and a.vote_type == VoteType.CLOTURE
        and a.chamber == Chamber.SENATE
    ))
    if cloture:
        fields["senate_cloture_result"] = cloture.result
        fields["senate_cloture_result_at"] = cloture.acted_at

    vetoed = _last(actions, lambda a: a.type == ActionType.VETOED)
    fields["vetoed"] = vetoed is not None
    if vetoed:
        fields["vetoed_at"] = vetoed.acted_at

    house_override = _last(actions, _override_vote(Chamber.HOUSE))
    if house_override:
        fields["house_override_result"] = house_override.result
        fields["house_override_result_at"] = house_override.acted_at

    senate_override = _last(actions, _override_vote(Chamber.SENATE))
    if senate_override:
        fields["senate_override_result"] = senate_override.result
        fields["senate_override_result_at"] = senate_override.acted_at

    enacted = _last(actions, lambda a: a.type == ActionType.ENACTED)
    fields["enacted"] = enacted is not None
    if enacted:
        fields["enacted_at"] = enacted.acted_at

    to_president = _last(actions, lambda a: a.type == ActionType.TOPRESIDENT)
    awaiting = to_president is not None and not fields["vetoed"] and not fields["enacted"]
    fields["awaiting_signature"] = awaiting
    if awaiting:
        fields["awaiting_signature_since"] = to_president.acted_at

    return History(**fields)


def slip_law_from(actions: list[ClassifiedAction]) -> Optional[dict]:
    """Law citation of the first enacted action, if any."""
    for action in actions:
        if action.type == ActionType.ENACTED and action.law is not None:
            return action.law.to_dict()
    return None
