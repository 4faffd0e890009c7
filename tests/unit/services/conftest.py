"""Shared fixtures for resource manager tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from sakpilot.core.dispatcher import ClientFactory


@pytest.fixture
def work_profile(write_profile) -> str:
    """Write a profile named "work" without a default zone and return its name."""
    write_profile("work", current=True)
    return "work"


@pytest.fixture
def mock_client(factory: ClientFactory, mocker: Any) -> MagicMock:
    """Make the factory hand out one mock backend client for every call."""
    client = MagicMock()
    mocker.patch.object(factory, "create_for", return_value=client)
    return client
