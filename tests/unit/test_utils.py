"""Unit tests for utility helpers."""

import pytest

from sms_threads.config import Settings
from sms_threads.exceptions import ConfigurationError
from sms_threads.utils import configure_logging, retry_on_failure


class TestRetryOnFailure:
    """Test suite for the retry decorator."""

    @pytest.mark.asyncio
    async def test_retries_until_success(self) -> None:
        attempts = []

        @retry_on_failure(max_retries=2, delay=0.0, exceptions=(OSError,))
        async def flaky() -> str:
            attempts.append(1)
            if len(attempts) < 3:
                raise OSError("busy")
            return "ok"

        assert await flaky() == "ok"
        assert len(attempts) == 3

    @pytest.mark.asyncio
    async def test_raises_after_exhausting_retries(self) -> None:
        attempts = []

        @retry_on_failure(max_retries=1, delay=0.0)
        async def broken() -> None:
            attempts.append(1)
            raise RuntimeError("still broken")

        with pytest.raises(RuntimeError):
            await broken()
        assert len(attempts) == 2

    @pytest.mark.asyncio
    async def test_other_exceptions_are_not_retried(self) -> None:
        attempts = []

        @retry_on_failure(max_retries=3, delay=0.0, exceptions=(OSError,))
        async def wrong() -> None:
            attempts.append(1)
            raise ValueError("bad input")

        with pytest.raises(ValueError):
            await wrong()
        assert len(attempts) == 1


class TestConfigureLogging:
    """Test suite for logging configuration."""

    def test_accepts_known_level(self) -> None:
        configure_logging(Settings(log_level="debug"))

    def test_rejects_unknown_level(self) -> None:
        with pytest.raises(ConfigurationError):
            configure_logging(Settings(log_level="LOUD"))
