"""Periodic sampler that refreshes process-level gauges."""

from __future__ import annotations

import threading
from typing import Optional

import psutil
from prometheus_client import Counter, Gauge

from ..logging import get_logger

logger = get_logger(__name__)

DEFAULT_SAMPLE_INTERVAL = 15.0


class SystemMetricsSampler:
    """Background task updating uptime, memory and thread metrics.

    The loop waits on a stop event rather than sleeping, so ``stop()`` returns
    promptly. ``tick()`` performs a single sample and is safe to call directly.
    """

    def __init__(
        self,
        uptime: Counter,
        memory_bytes: Gauge,
        threads: Gauge,
        interval_seconds: float = DEFAULT_SAMPLE_INTERVAL,
        process: Optional[psutil.Process] = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.interval_seconds = interval_seconds
        self._uptime = uptime
        self._memory_bytes = memory_bytes
        self._threads = threads
        self._process = process or psutil.Process()
        self._thread: Optional[threading.Thread] = None
        self._stop = threading.Event()
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="system-metrics-sampler", daemon=True
        )
        self._thread.start()
        logger.debug("System metrics sampler started", interval=self.interval_seconds)

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.debug("System metrics sampler stopped", ticks=self.ticks)

    def _run(self) -> None:
        while not self._stop.wait(self.interval_seconds):
            try:
                self.tick()
            except Exception as exc:  # pylint: disable=broad-exception-caught
                logger.warning("System metrics sample failed", error_type=type(exc).__name__)

    def tick(self) -> None:
        """Take one sample."""
        self._uptime.inc(self.interval_seconds)
        self._memory_bytes.set(self._process.memory_info().rss)
        self._threads.set(threading.active_count())
        self.ticks += 1
