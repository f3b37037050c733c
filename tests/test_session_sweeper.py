"""
Tests for the background session sweeper.
"""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from smartchat.models import Role
from smartchat.services import SessionMemory, SessionSweeper


class TestSessionSweeper:
    """Scheduling and sweep execution."""

    @pytest.fixture(autouse=True)
    def setup(self, clock):
        """Create memory with a manual clock and a sweeper around it."""
        self.clock = clock
        self.memory = SessionMemory(max_message_age=timedelta(hours=1), clock=clock)
        self.sweeper = SessionSweeper(self.memory, interval_minutes=30)
        yield
        self.sweeper.stop()

    def test_run_now_sweeps_expired_sessions(self):
        self.memory.append("old", Role.USER, "hello")
        self.clock.advance(hours=2)
        self.memory.append("new", Role.USER, "hello")

        assert self.sweeper.run_now() == 1
        assert not self.memory.session_exists("old")
        assert self.sweeper.last_removed == 1
        assert self.sweeper.last_run is not None

    def test_sweep_failure_is_logged_not_raised(self):
        memory = MagicMock()
        memory.sweep_expired.side_effect = RuntimeError("sweep broke")
        sweeper = SessionSweeper(memory, interval_minutes=5)

        assert sweeper.run_now() == 0

    def test_start_schedules_interval_job(self):
        self.sweeper.start()

        status = self.sweeper.get_status()

        assert status["running"]
        assert status["interval_minutes"] == 30
        assert status["next_run_time"] is not None

    def test_start_is_idempotent(self):
        self.sweeper.start()
        self.sweeper.start()

        assert len(self.sweeper.scheduler.get_jobs()) == 1

    def test_stop(self):
        self.sweeper.start()
        self.sweeper.stop()

        assert not self.sweeper.running
        assert self.sweeper.get_next_run_time() is None

    def test_status_before_start(self):
        status = self.sweeper.get_status()

        assert status == {
            "running": False,
            "interval_minutes": 30,
            "next_run_time": None,
            "last_run": None,
            "last_removed": 0,
        }

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            SessionSweeper(self.memory, interval_minutes=0)
