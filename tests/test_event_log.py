# tests/test_event_log.py
"""Unit tests for the bounded, thread-safe event log."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import threading
import pytest
from detection_dashboard.services.event_log import BoundedEventLog


class TestBoundedEventLog:
    def test_keeps_last_100_of_150_in_order(self):
        log = BoundedEventLog(capacity=100)
        for i in range(150):
            log.append(i)

        assert len(log) == 100
        assert log.snapshot() == list(range(50, 150))
        assert log.recent(100) == list(range(149, 49, -1))

    def test_recent_limit_zero_or_negative_is_empty(self):
        log = BoundedEventLog(capacity=10)
        log.append("a")
        assert log.recent(0) == []
        assert log.recent(-5) == []

    def test_recent_limit_larger_than_size_returns_all_newest_first(self):
        log = BoundedEventLog(capacity=10)
        for item in ("a", "b", "c"):
            log.append(item)
        assert log.recent(500) == ["c", "b", "a"]

    def test_snapshot_is_independent_copy(self):
        log = BoundedEventLog(capacity=10)
        log.append(1)
        snap = log.snapshot()
        log.append(2)
        snap.append(99)
        assert snap == [1, 99]
        assert log.snapshot() == [1, 2]

    def test_remove_first_removes_oldest_match_only(self):
        log = BoundedEventLog(capacity=10)
        for i in (1, 2, 3, 4):
            log.append(i)

        removed = log.remove_first(lambda x: x % 2 == 0)

        assert removed == 2
        assert log.snapshot() == [1, 3, 4]

    def test_remove_first_without_match_returns_none(self):
        log = BoundedEventLog(capacity=10)
        log.append(1)
        assert log.remove_first(lambda x: x > 5) is None
        assert log.snapshot() == [1]

    def test_invalid_capacity_rejected(self):
        with pytest.raises(ValueError):
            BoundedEventLog(capacity=0)

    def test_concurrent_appends_never_exceed_capacity_and_keep_order(self):
        log = BoundedEventLog(capacity=100)

        def writer(tid):
            for i in range(500):
                log.append((tid, i))

        threads = [threading.Thread(target=writer, args=(tid,)) for tid in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        snap = log.snapshot()
        assert len(snap) == 100
        for tid in range(8):
            seq = [i for t, i in snap if t == tid]
            assert seq == sorted(seq)
