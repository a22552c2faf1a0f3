"""Shared fixtures for the SonarQube export tests."""

from __future__ import annotations

import pytest

from ._helpers import FakeResolver


@pytest.fixture
def fake_resolver() -> FakeResolver:
    """Return an empty :class:`FakeResolver`."""
    return FakeResolver()
