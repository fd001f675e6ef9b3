"""Test the API key pool"""

import logging

import pytest

from tunebridge.core.exceptions import QuotaExhaustedError
from tunebridge.youtube.credentials import CredentialPool


class TestCredentialPool:
    """Test CredentialPool rotation and exhaustion tracking"""

    def test_acquire_starts_at_first_key(self):
        """Test a fresh pool hands out index 0"""
        pool = CredentialPool(["a", "b", "c"])

        assert pool.acquire() == (0, "a")

    def test_empty_keys_are_dropped(self):
        """Test blank entries do not count as credentials"""
        pool = CredentialPool(["", "a", ""])

        assert len(pool) == 1
        assert pool.acquire() == (0, "a")

    def test_mark_exhausted_rotates(self):
        """Test exhausting the active key moves to the next one"""
        pool = CredentialPool(["a", "b", "c"])

        assert pool.mark_exhausted(0) is True
        assert pool.acquire() == (1, "b")
        assert pool.status().exhausted_indices == (1,)

    def test_mark_exhausted_is_idempotent(self):
        """Test two failures on the same key leave one flag and one rotation"""
        pool = CredentialPool(["a", "b", "c"])

        pool.mark_exhausted(0)
        pool.mark_exhausted(0)

        status = pool.status()
        assert status.exhausted_indices == (1,)
        assert status.active_index == 2

    def test_exhausting_inactive_key_keeps_cursor(self):
        """Test a late 403 for a backup key does not move the active key"""
        pool = CredentialPool(["a", "b", "c"])

        assert pool.mark_exhausted(2) is True
        assert pool.acquire() == (0, "a")
        pool.mark_exhausted(0)

        assert pool.acquire() == (1, "b")

    def test_all_exhausted(self):
        """Test acquire raises once every key is exhausted"""
        pool = CredentialPool(["a", "b"])

        assert pool.mark_exhausted(0) is True
        assert pool.mark_exhausted(1) is False
        assert pool.status().all_exhausted
        with pytest.raises(QuotaExhaustedError) as exc_info:
            pool.acquire()
        assert exc_info.value.details["total_credentials"] == 2

    def test_empty_pool_raises(self):
        """Test a pool without credentials can never be used"""
        pool = CredentialPool([])

        with pytest.raises(QuotaExhaustedError, match="No YouTube API credentials"):
            pool.acquire()

    def test_reset(self):
        """Test reset clears flags and rewinds to index 0"""
        pool = CredentialPool(["a", "b", "c"])
        pool.mark_exhausted(0)
        pool.mark_exhausted(1)

        pool.reset()

        status = pool.status()
        assert status.active_index == 1
        assert status.exhausted_indices == ()
        assert pool.acquire() == (0, "a")

    def test_status_snapshot(self):
        """Test status reports totals and sorted exhausted indices"""
        pool = CredentialPool(["a", "b", "c"])
        pool.mark_exhausted(2)
        pool.mark_exhausted(0)

        status = pool.status()
        assert status.total == 3
        assert status.exhausted_indices == (1, 3)
        assert status.active_index == 2
        assert not status.all_exhausted

    def test_status_numbering_matches_log(self, caplog):
        """Test status numbers keys the way the rotation log lines do"""
        pool = CredentialPool(["a", "b"])

        with caplog.at_level(logging.INFO):
            pool.mark_exhausted(0)

        assert "key #1 quota exceeded" in caplog.text
        assert "Switched to YouTube API key #2" in caplog.text
        status = pool.status()
        assert status.exhausted_indices == (1,)
        assert status.active_index == 2
