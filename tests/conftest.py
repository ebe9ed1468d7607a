"""Pytest configuration and shared fixtures."""

import pytest

from spothost.memory import InMemoryChannel


@pytest.fixture(autouse=True)
def reset_logging_state():
    """Reset logging state before each test."""
    from spothost.logging import reset_logging

    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def channel():
    """In-memory channel for room meet123."""
    return InMemoryChannel(room_jid="meet123@conference.local/tv")


class SequenceLocks:
    """Deterministic lock generator: a1b, a2b, a3b, ..."""

    def __init__(self):
        self.count = 0

    def __call__(self, length: int) -> str:
        self.count += 1
        return f"a{self.count}b"[:length]


@pytest.fixture
def locks():
    return SequenceLocks()
