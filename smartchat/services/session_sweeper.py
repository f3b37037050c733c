"""
Session Sweeper Service

Periodically removes idle conversations from session memory. Uses
APScheduler for reliable scheduling on a background thread.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ..utils import get_logger
from .memory_service import SessionMemory

JOB_ID = "session_memory_sweep"


class SessionSweeper:
    """
    Runs SessionMemory.sweep_expired on a fixed interval.

    Sweep failures are logged and never propagate into the scheduler.
    """

    def __init__(self, memory: SessionMemory, interval_minutes: float = 60):
        """
        Initialize the sweeper.

        Args:
            memory: Session memory to sweep
            interval_minutes: Minutes between sweeps
        """
        if interval_minutes <= 0:
            raise ValueError("interval_minutes must be positive")

        self.memory = memory
        self.interval_minutes = interval_minutes
        self.logger = get_logger("session_sweeper")

        self.scheduler = BackgroundScheduler(
            timezone="UTC",
            daemon=True,
        )

        self.running = False
        self.last_run: Optional[datetime] = None
        self.last_removed = 0

    def start(self) -> None:
        """Start the scheduler."""
        if self.running:
            self.logger.warning("Sweeper already running")
            return

        try:
            self.scheduler.add_job(
                func=self.run_now,
                trigger=IntervalTrigger(minutes=self.interval_minutes),
                id=JOB_ID,
                name="Session Memory Sweep",
                replace_existing=True,
            )

            self.scheduler.start()
            self.running = True

            self.logger.info(
                f"Session sweeper started. Expired sessions are removed every "
                f"{self.interval_minutes} minute(s)"
            )

        except Exception as e:
            self.logger.error(f"Failed to start sweeper: {e}")
            raise

    def stop(self) -> None:
        """Stop the scheduler."""
        if not self.running:
            return

        try:
            self.scheduler.shutdown(wait=True)
            self.running = False
            self.logger.info("Session sweeper stopped")
        except Exception as e:
            self.logger.error(f"Failed to stop sweeper: {e}")

    def run_now(self) -> int:
        """
        Sweep expired sessions immediately.

        Returns:
            Number of sessions removed (0 if the sweep failed)
        """
        try:
            removed = self.memory.sweep_expired()
        except Exception as e:
            self.logger.error(f"Session sweep failed: {e}", exc_info=True)
            return 0

        self.last_run = datetime.now()
        self.last_removed = removed
        self.logger.debug(f"Session sweep complete: {removed} removed")
        return removed

    def get_next_run_time(self) -> Optional[datetime]:
        """
        Get the next scheduled sweep time.

        Returns:
            Next run time or None if scheduler not running
        """
        if not self.running:
            return None

        job = self.scheduler.get_job(JOB_ID)
        if job:
            return job.next_run_time

        return None

    def get_status(self) -> Dict[str, Any]:
        """
        Get sweeper status.

        Returns:
            Dictionary with scheduler status information
        """
        next_run = self.get_next_run_time()
        return {
            "running": self.running,
            "interval_minutes": self.interval_minutes,
            "next_run_time": next_run.isoformat() if next_run else None,
            "last_run": self.last_run.isoformat() if self.last_run else None,
            "last_removed": self.last_removed,
        }
