"""Shared fixtures for the ledger tests."""

from datetime import datetime

import pytest

from finance_tracker.config import LedgerSettings
from finance_tracker.ledger import LedgerEngine
from finance_tracker.services.storage import InMemoryStore


NOW = datetime(2024, 5, 20, 10, 30)


@pytest.fixture
def ledger_settings():
    return LedgerSettings(timezone="")


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def engine(store, ledger_settings):
    """Empty engine on an in-memory store with a fixed clock."""
    return LedgerEngine(store, settings=ledger_settings, clock=lambda: NOW).load()
