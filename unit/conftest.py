"""Pytest configuration and shared fixtures."""

from unittest.mock import MagicMock

import pytest

from components.interfaces import LocalObjectStore
from unit.fixtures.action_factory import ActionFactory
from unit.fixtures.bill_tree_factory import BillTreeFactory


@pytest.fixture
def action_factory():
    """Provide ActionFactory instance."""
    return ActionFactory()


@pytest.fixture
def bill_tree_factory():
    """Provide BillTreeFactory instance."""
    return BillTreeFactory()


@pytest.fixture
def store(tmp_path):
    """Empty object store in a temporary directory."""
    return LocalObjectStore(tmp_path / "data")


@pytest.fixture
def mock_session():
    """HTTP session whose responses are looked up by URL."""
    def _mock_session(responses: dict[str, bytes]):
        session = MagicMock()

        def _get(url, timeout=None):
            response = MagicMock()
            response.content = responses[url]
            response.raise_for_status.return_value = None
            return response

        session.get.side_effect = _get
        return session
    return _mock_session
