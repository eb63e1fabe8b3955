"""Shared fixtures: one in-memory origin, two tabs looking at it."""
from __future__ import annotations

import pytest

from cart import CartStore
from channel import ChangeChannel
from storage import MemoryStorage
from timers import TimerQueue


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def channel() -> ChangeChannel:
    return ChangeChannel()


@pytest.fixture
def store(storage, channel) -> CartStore:
    s = CartStore(storage, channel, key="cart", context_id="tab-a")
    s.load()
    return s


@pytest.fixture
def timers() -> TimerQueue:
    # Frozen clock; tests move time with advance().
    return TimerQueue(clock=lambda: 0.0)
