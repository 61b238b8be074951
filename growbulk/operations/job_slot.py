"""
Single-active-job guard and cancellation token.

Each engine owns one JobSlot; starting a job while the slot is held fails
immediately instead of queueing.
"""

import logging
import threading
import time
from typing import Optional

from ..models.progress import JobProgress
from ..monitoring.prometheus import bulk_active_jobs
from .exceptions import ConcurrencyError

logger = logging.getLogger(__name__)


class JobSlot:
    """Holds the currently active job (or undo), if any."""

    def __init__(self):
        self._lock = threading.Lock()
        self._label: Optional[str] = None
        self._progress: Optional[JobProgress] = None
        # Monotonic time after which a finished job no longer holds the slot
        self._release_at: Optional[float] = None

    def acquire(self, label: str, progress: Optional[JobProgress] = None):
        """
        Take the slot without blocking.

        A finished job whose grace period has passed is released first, even if
        the timer that should have released it never ran.

        Raises:
            ConcurrencyError: If another job holds the slot
        """
        if not self._lock.acquire(blocking=False):
            if not self._grace_expired():
                raise ConcurrencyError(
                    f"Cannot start {label}: {self._label} is already running"
                )
            logger.debug(f"Grace period of {self._label} expired, releasing slot")
            self.release()
            if not self._lock.acquire(blocking=False):
                raise ConcurrencyError(f"Cannot start {label}: slot is busy")
        self._label = label
        self._progress = progress
        self._release_at = None
        bulk_active_jobs.inc()

    def release_after(self, seconds: float):
        """Keep the slot for ``seconds`` more, then treat it as free."""
        self._release_at = time.monotonic() + seconds

    def release(self, progress: Optional[JobProgress] = None):
        """Free the slot. With ``progress``, only if that job still holds it."""
        if not self._lock.locked():
            return
        if progress is not None and self._progress is not progress:
            return
        self._label = None
        self._progress = None
        self._release_at = None
        bulk_active_jobs.dec()
        self._lock.release()

    def _grace_expired(self) -> bool:
        if self._release_at is None:
            return False
        if self._progress is not None and not self._progress.is_terminal:
            return False
        return time.monotonic() >= self._release_at

    @property
    def is_busy(self) -> bool:
        return self._lock.locked() and not self._grace_expired()

    @property
    def in_grace_period(self) -> bool:
        """A finished job is still being displayed."""
        return self.is_busy and self._release_at is not None

    @property
    def label(self) -> Optional[str]:
        return None if self._grace_expired() else self._label

    @property
    def progress(self) -> Optional[JobProgress]:
        """Progress of the active (or just completed) job."""
        return self._progress


class CancellationToken:
    """Checked by the executor between batches, never mid-batch."""

    def __init__(self):
        self._cancelled = False
        self.reason: Optional[str] = None

    def cancel(self, reason: str = "Batch cancelled by user"):
        if not self._cancelled:
            logger.warning(f"Cancellation requested: {reason}")
        self._cancelled = True
        self.reason = reason

    @property
    def cancelled(self) -> bool:
        return self._cancelled
