"""Timeline-based bill action classification system.

This package turns a bill's raw legislative actions into a typed,
status-stamped timeline.

Main components:
- models: Core data structures (ClassifiedAction, BillStatus, History)
- normalizers: Deduplication and chronological ordering of raw actions
- nodes: The ordered rule cascade and its patterns
- extractors: Vote and procedural field extraction utilities
- status: The legislative status state machine
- parser: Classification and status replay
- history: Milestone summary of a classified timeline
"""

from timeline.models import BillStatus, ClassifiedAction, History, RawAction
from timeline.parser import ActionClassifier, classify_actions, latest_status
from timeline.history import history_from_actions

__all__ = [
    "BillStatus",
    "ClassifiedAction",
    "History",
    "RawAction",
    "ActionClassifier",
    "classify_actions",
    "latest_status",
    "history_from_actions",
]

__version__ = "0.1.0"
