"""Polling monitor that re-reads one process's stat record."""

import logging
import threading
from collections import deque
from pathlib import Path
from queue import Queue

import psutil

from procstat.errors import ProcStatError
from procstat.models import ProcessStatRecord
from procstat.parser import validate_pid
from procstat.reader import read_stat

logger = logging.getLogger(__name__)

MIN_POLL_RATE = 0.1
MIN_HISTORY_SIZE = 0


class StatMonitor:
    """
    Monitor that snapshots one process's /proc/<pid>/stat on an interval.

    Runs in a separate daemon thread and pushes each ProcessStatRecord to a
    thread-safe Queue. A failed read or decode is logged and retried on the
    next interval; once the process no longer exists the loop ends.
    """

    def __init__(
        self,
        pid: int,
        update_queue: Queue[ProcessStatRecord],
        poll_rate: float = 1.0,
        procfs_root: str | Path | None = None,
        history_size: int = 60,
    ) -> None:
        """
        Initialize the StatMonitor.

        Args:
            pid: Process to monitor.
            update_queue: Thread-safe queue to push snapshots to.
            poll_rate: How often to read the record (in seconds). Default 1.0s.
            procfs_root: Mount point of procfs. Defaults to psutil.PROCFS_PATH.
            history_size: How many snapshots get_history() retains. Negative
                values are clamped to 0, which keeps no history.
        """
        validate_pid(pid)
        self._pid = pid
        self._queue = update_queue
        self._poll_rate = max(MIN_POLL_RATE, poll_rate)
        self._procfs_root = procfs_root
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._history: deque[ProcessStatRecord] = deque(maxlen=max(MIN_HISTORY_SIZE, history_size))
        self._exited = False
        self.last_error: Exception | None = None

    @property
    def pid(self) -> int:
        return self._pid

    @property
    def poll_rate(self) -> float:
        """Get the current poll rate."""
        return self._poll_rate

    @poll_rate.setter
    def poll_rate(self, value: float) -> None:
        """Set the poll rate."""
        self._poll_rate = max(MIN_POLL_RATE, value)

    @property
    def is_running(self) -> bool:
        """Check if the monitor thread is running."""
        return self._thread is not None and self._thread.is_alive()

    @property
    def exited(self) -> bool:
        """True once the monitored process was found to be gone."""
        return self._exited

    def start(self) -> None:
        """Start the monitoring thread."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._exited = False
        self._thread = threading.Thread(
            target=self._poll_loop,
            daemon=True,
            name=f"StatMonitor-{self._pid}",
        )
        self._thread.start()
        logger.info(f"Monitoring pid {self._pid} every {self._poll_rate}s")

    def stop(self, timeout: float | None = 5.0) -> None:
        """
        Stop the monitoring thread.

        Args:
            timeout: How long to wait for thread to stop (seconds).
        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None

    def poll_once(self) -> ProcessStatRecord | None:
        """
        Read one snapshot, queue it and add it to the history.

        Returns None when the read failed; the failure is in last_error.
        """
        try:
            record = read_stat(self._pid, self._procfs_root)
        except (ProcStatError, OSError) as exc:
            self.last_error = exc
            if not psutil.pid_exists(self._pid):
                logger.info(f"Process {self._pid} exited: {exc}")
                self._exited = True
            else:
                logger.warning(f"Failed to read stat for pid {self._pid}: {exc}")
            return None

        self._history.append(record)
        self._queue.put(record)
        return record

    def _poll_loop(self) -> None:
        """Main polling loop running in the background thread."""
        while not self._stop_event.is_set():
            self.poll_once()
            if self._exited:
                break

            # Wait for poll_rate seconds or until stop is requested
            self._stop_event.wait(timeout=self._poll_rate)
        logger.debug(f"Stopped monitoring pid {self._pid}")

    def get_history(self) -> list[ProcessStatRecord]:
        """Get the retained snapshots, oldest first."""
        return list(self._history)
