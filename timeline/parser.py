"""Main classification logic for building a bill's action timeline."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Iterable, Optional

from timeline.models import (
    ActionNode,
    BillStatus,
    ClassifiedAction,
    RawAction,
    RuleContext,
)
from timeline.nodes import ACTION_NODES, AMENDMENT_ACTION
from timeline.normalizers import (
    chronological,
    deduplicate_actions,
    format_acted_at,
    strip_links,
)

logger = logging.getLogger(__name__)


class ActionClassifier:
    """Classifies actions and replays the status state machine over them."""

    def __init__(self, action_nodes: Optional[list[ActionNode]] = None):
        """Initialize classifier.

        Args:
            action_nodes: Ordered rule cascade (uses default if None)
        """
        self.nodes = action_nodes or ACTION_NODES

    def classify(self, raw: RawAction, context: RuleContext) -> ClassifiedAction:
        """Classify one action.

        Every node is evaluated; their partial updates are folded in node
        order so later rules overwrite fields set by earlier ones.

        Args:
            raw: The raw action
            context: Bill facts plus the status before this action

        Returns:
            The classified action (status set only if this action changed it)
        """
        action = ClassifiedAction(
            acted_at=format_acted_at(raw.acted_at_date, raw.acted_at_time),
            action_code=raw.action_code,
            text=strip_links(raw.text),
        )
        if AMENDMENT_ACTION.search(action.text):
            return action

        merged: dict[str, Any] = {}
        for node in self.nodes:
            update = node.apply(action.text, context)
            if update is not None:
                logger.debug("[%s] %s matched: %s", context.bill_id, node.name, action.text)
                merged.update(update)
        if not merged:
            return action
        return replace(action, **merged)

    def replay(
        self,
        actions: Iterable[RawAction],
        bill_id: str,
        bill_type: str,
        official_title: Optional[str] = None,
    ) -> list[ClassifiedAction]:
        """Classify chronologically ordered actions, threading status through.

        Args:
            actions: Raw actions, oldest first
            bill_id: Bill identifier, for logging
            bill_type: Bill type code, e.g. "hr"
            official_title: Current official title of the bill

        Returns:
            Classified actions in the same order
        """
        status = BillStatus.INTRODUCED
        classified = []
        for raw in actions:
            context = RuleContext(
                bill_id=bill_id,
                bill_type=bill_type,
                prev_status=status,
                official_title=official_title or "",
            )
            action = self.classify(raw, context)
            if action.status is not None:
                status = action.status
            classified.append(action)
        return classified


def classify_actions(
    raw_actions: Iterable[RawAction],
    bill_id: str,
    bill_type: str,
    official_title: Optional[str] = None,
) -> list[ClassifiedAction]:
    """Build a bill's classified action timeline.

    This is the main entry point for action processing: duplicates are
    dropped in source order, the survivors are put in chronological order,
    and the classifier replays the status state machine over them.

    Args:
        raw_actions: Raw actions in source (newest-first) order
        bill_id: Bill identifier, e.g. "hr1234-116"
        bill_type: Bill type code
        official_title: Current official title

    Returns:
        Classified actions, oldest first
    """
    ordered = chronological(deduplicate_actions(raw_actions))
    return ActionClassifier().replay(ordered, bill_id, bill_type, official_title)


def latest_status(
    actions: list[ClassifiedAction], introduced_at: Optional[str]
) -> tuple[BillStatus, Optional[str]]:
    """Find the last status change in a set of classified actions.

    Args:
        actions: Classified actions, oldest first
        introduced_at: Introduction date, used when no action set a status

    Returns:
        (status, timestamp of the action that set it)
    """
    status, status_at = BillStatus.INTRODUCED, introduced_at
    for action in actions:
        if action.status is not None:
            status, status_at = action.status, action.acted_at
    return status, status_at
