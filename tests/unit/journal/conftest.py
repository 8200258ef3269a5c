"""Shared fixtures for journal tests."""

import pytest

from fx_journal.journal.discipline import ConsecutiveLossGuard
from fx_journal.journal.export import TradeExporter


@pytest.fixture
def exporter():
    return TradeExporter(decimal_places=4)


@pytest.fixture
def guard():
    return ConsecutiveLossGuard(limit=3, cooldown_minutes=30)
