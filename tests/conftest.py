"""Pytest configuration and shared fixtures."""

import pytest


@pytest.fixture
def mock_settings(tmp_path):
    """Provide settings pointing at a throwaway database."""
    from sms_threads.config import Settings

    return Settings(
        storage_path=tmp_path / "sms_threads.sqlite3",
        storage_retry_delay=0.0,
        log_level="DEBUG",
        debug=True,
    )


@pytest.fixture
def memory_storage():
    """Provide an empty in-memory key-value store."""
    from sms_threads.storage import MemoryKeyValueStore

    return MemoryKeyValueStore()


@pytest.fixture
def drafts(memory_storage):
    """Provide an empty draft store backed by memory."""
    from sms_threads.drafts import DraftStore

    return DraftStore(memory_storage)


@pytest.fixture
def location():
    """Provide a navigation location with no thread selected."""
    from sms_threads.navigation import HashLocation

    return HashLocation("#thread-list")


@pytest.fixture
def threads(drafts, location):
    """Provide an empty thread index wired to the draft store."""
    from sms_threads.threads import ThreadIndex

    index = ThreadIndex(drafts, location=location)
    yield index
    index.close()


@pytest.fixture
def received_message() -> dict:
    """Provide a raw inbound message record."""
    return {
        "id": 1001,
        "threadId": 42,
        "delivery": "received",
        "sender": "555",
        "body": "Are we still on for tonight?",
        "timestamp": 1700000000000,
        "type": "sms",
    }


@pytest.fixture
def sent_message() -> dict:
    """Provide a raw outbound message record."""
    return {
        "id": 1002,
        "threadId": 42,
        "delivery": "sent",
        "receivers": ["111", "222"],
        "body": "Yes, see you at 8",
        "timestamp": 1700000060000,
        "type": "sms",
    }
