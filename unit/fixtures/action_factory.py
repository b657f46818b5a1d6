"""Factory for creating test actions."""

from datetime import date, timedelta
from typing import Optional

from timeline.models import (
    ActionType,
    BillStatus,
    Chamber,
    ClassifiedAction,
    RawAction,
    VoteType,
)
from unit.fixtures import SourceSystem


class ActionFactory:
    """Factory for raw and classified actions."""

    @staticmethod
    def raw(
        text: str,
        acted_on: str = "2019-03-08",
        acted_at_time: Optional[str] = None,
        source: SourceSystem = SourceSystem.HOUSE_FLOOR,
        action_code: Optional[str] = None,
    ) -> RawAction:
        """Create a single RawAction."""
        return RawAction(
            acted_at_date=acted_on,
            acted_at_time=acted_at_time,
            text=text,
            action_code=action_code,
            source_system_code=source.value,
        )

    @staticmethod
    def newest_first(texts: list[str], start: date = date(2019, 1, 3)) -> list[RawAction]:
        """Raw actions one day apart, given oldest first, returned in
        document (newest-first) order."""
        actions = [
            ActionFactory.raw(text, (start + timedelta(days=i)).isoformat())
            for i, text in enumerate(texts)
        ]
        return list(reversed(actions))

    @staticmethod
    def classified(
        action_type: ActionType,
        acted_at: str = "2019-03-08T00:00:00.000Z",
        text: str = "",
        **kwargs,
    ) -> ClassifiedAction:
        """Create a ClassifiedAction directly, skipping the rule cascade."""
        return ClassifiedAction(
            acted_at=acted_at,
            text=text or f"{action_type.value} action",
            type=action_type,
            **kwargs,
        )

    @staticmethod
    def vote(
        chamber: Chamber,
        result: str = "pass",
        vote_type: VoteType = VoteType.VOTE,
        acted_at: str = "2019-03-08T00:00:00.000Z",
        status: Optional[BillStatus] = None,
    ) -> ClassifiedAction:
        """Create a classified passage, cloture or override vote."""
        action_type = ActionType.VOTE_AUX if vote_type == VoteType.CLOTURE else ActionType.VOTE
        return ActionFactory.classified(
            action_type,
            acted_at=acted_at,
            chamber=chamber,
            result=result,
            vote_type=vote_type,
            status=status,
        )
