"""Periodic idle-bucket sweep for a RateLimiter."""

from __future__ import annotations

import logging
import threading

from smskit.ratelimit.limiter import RateLimiter

logger = logging.getLogger(__name__)


class BucketSweeper:
    """Runs ``limiter.sweep()`` every ``interval`` seconds on a daemon thread.

    Started and stopped explicitly by the owning process.
    """

    def __init__(self, limiter: RateLimiter, interval: float | None = None) -> None:
        self._limiter = limiter
        self._interval = (
            float(interval) if interval is not None
            else float(limiter.config.cleanup_interval_seconds)
        )
        if self._interval <= 0:
            raise ValueError("sweep interval must be positive")
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="smskit-bucket-sweeper", daemon=True,
        )
        self._thread.start()
        logger.info("Started rate limit sweeper (interval=%.1fs)", self._interval)

    def stop(self, timeout: float | None = 5.0) -> None:
        thread = self._thread
        if thread is None:
            return
        self._stop.set()
        thread.join(timeout)
        if thread.is_alive():
            # Still mid-sweep; keep the handle so start() cannot spawn a twin
            logger.warning("Rate limit sweeper did not stop within %ss", timeout)
            return
        self._thread = None
        logger.info("Stopped rate limit sweeper")

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            self._limiter.sweep()

    def __enter__(self) -> BucketSweeper:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
