"""Background auto-backup scheduler."""

import logging
import threading
import time
from collections.abc import Callable
from typing import Optional

from kedai.domain.entities import Backup
from kedai.domain.settings import AutoBackupConfig, SettingsService
from kedai.domain.snapshot import SnapshotService

logger = logging.getLogger(__name__)

# Triggers closer than this to the previous completed run are ignored
DEBOUNCE_SECONDS = 30


class AutoBackupScheduler:
    """Periodically saves a backup while enabled.

    The scheduler owns its timer thread and cancellation event; callers hold
    the scheduler and call ``start``/``stop`` on it. Backup failures are
    logged and never propagated, so selling is never interrupted.
    """

    def __init__(
        self,
        snapshots: SnapshotService,
        config: AutoBackupConfig,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the scheduler.

        Args:
            snapshots: Snapshot service used to create backups
            config: Initial configuration; ``start`` uses its interval
            clock: Monotonic seconds source, used for debouncing
        """
        self.snapshots = snapshots
        self.config = config
        self.clock = clock
        self._lock = threading.Lock()
        self._in_progress = False
        self._last_run: Optional[float] = None
        self._stop_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    @classmethod
    def from_settings(
        cls,
        snapshots: SnapshotService,
        settings: SettingsService,
        clock: Callable[[], float] = time.monotonic,
    ) -> "AutoBackupScheduler":
        """Build a scheduler from the persisted auto-backup settings."""
        return cls(snapshots, settings.get_auto_backup_config(), clock=clock)

    @property
    def is_running(self) -> bool:
        return self._stop_event is not None and not self._stop_event.is_set()

    @property
    def last_run(self) -> Optional[float]:
        """Clock reading when the previous run completed, or None."""
        return self._last_run

    def start(self) -> None:
        """Run one backup now, then one every ``interval_minutes``.

        Starting a running scheduler replaces its timer.
        """
        self.stop()
        stop_event = threading.Event()
        self._stop_event = stop_event
        self.trigger()

        interval = self.config.interval_minutes * 60
        self._thread = threading.Thread(
            target=self._run, args=(stop_event, interval), name="auto-backup", daemon=True
        )
        self._thread.start()
        logger.info("Auto-backup started (every %d min)", self.config.interval_minutes)

    def stop(self) -> None:
        """Cancel future triggers. A backup already running is left to finish."""
        if self._stop_event is None:
            return
        self._stop_event.set()
        self._stop_event = None
        self._thread = None
        logger.info("Auto-backup stopped")

    def apply(self, config: AutoBackupConfig) -> None:
        """Switch to a new configuration, starting or stopping as needed."""
        self.config = config
        if config.enabled:
            self.start()
        else:
            self.stop()

    def _run(self, stop_event: threading.Event, interval: float) -> None:
        while not stop_event.wait(interval):
            self.trigger()

    def trigger(self) -> Optional[Backup]:
        """Save a backup unless one ran less than DEBOUNCE_SECONDS ago.

        Returns:
            The saved backup, or None if debounced, already running, or failed
        """
        with self._lock:
            if self._in_progress:
                logger.debug("Auto-backup already in progress; skipping trigger")
                return None
            if self._last_run is not None and self.clock() - self._last_run < DEBOUNCE_SECONDS:
                logger.debug("Auto-backup ran recently; skipping trigger")
                return None
            self._in_progress = True

        try:
            return self.snapshots.create_backup(prefix="autobackup")
        except Exception:
            logger.exception("Auto-backup failed")
            return None
        finally:
            with self._lock:
                self._last_run = self.clock()
                self._in_progress = False
