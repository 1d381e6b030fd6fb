from datetime import datetime

import pytest

from config import Settings
from storage import MemoryStore


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def settings():
    return Settings(
        daily_limit=3,
        cooldown_seconds=30,
        reflection_threshold=50,
        abandon_resets_usage=False,
        max_history=200,
    )


@pytest.fixture
def t0():
    return datetime(2026, 10, 19, 9, 0, 0)
