"""
Progress sinks for scan lifecycle notifications.

A sink is any callable taking a ``ScanProgress``. Probes run on worker
threads, so sinks are invoked off the event loop; ``QueueProgressSink``
hands events back to a loop safely. Delivery is fire-and-forget: the
scanner wraps every sink with ``safe_emit`` and never sees its failures.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Optional

from hc05_scan.core.logging_utils import get_module_logger
from .models import ScanProgress
from .types import ScanStatus

logger = get_module_logger("Progress")

# Event name the host shell listens on
PROGRESS_EVENT = "hc05-scan-progress"

ProgressSink = Callable[[ScanProgress], None]


def null_sink(progress: ScanProgress) -> None:
    """Discard progress events."""


def safe_emit(sink: Optional[ProgressSink], progress: ScanProgress) -> None:
    """Deliver ``progress`` to ``sink``, ignoring any delivery failure."""
    if sink is None:
        return
    try:
        sink(progress)
    except Exception as exc:
        logger.debug("Dropped %s event for %s: %s", progress.status.value, progress.port, exc)


class LoggingProgressSink:
    """Sink that writes each event to a logger."""

    def __init__(self, log=None):
        self._log = log or logger

    def __call__(self, progress: ScanProgress) -> None:
        if progress.status is ScanStatus.ERROR:
            self._log.warning("%s: %s", progress.port, progress.status.value)
        elif progress.status is ScanStatus.FOUND:
            self._log.info("%s: %s", progress.port, progress.status.value)
        else:
            self._log.debug("%s: %s", progress.port, progress.status.value)


class QueueProgressSink:
    """
    Sink that forwards events into an ``asyncio.Queue`` owned by a loop.

    Usage:
        sink = QueueProgressSink(asyncio.get_running_loop())
        task = asyncio.create_task(detect_hc05(config, sink))
        progress = await sink.queue.get()
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        queue: Optional["asyncio.Queue[ScanProgress]"] = None,
    ):
        self._loop = loop
        self.queue: "asyncio.Queue[ScanProgress]" = queue if queue is not None else asyncio.Queue()

    def __call__(self, progress: ScanProgress) -> None:
        if self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self.queue.put_nowait, progress)


__all__ = [
    "PROGRESS_EVENT",
    "ProgressSink",
    "null_sink",
    "safe_emit",
    "LoggingProgressSink",
    "QueueProgressSink",
]
