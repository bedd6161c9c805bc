"""Read and decode /proc/<pid>/stat for a live process."""

from pathlib import Path

import psutil

from procstat.models import ProcessStatRecord
from procstat.parser import decode, validate_pid
from procstat.schema import STAT_SCHEMA, StatSchema


def stat_path(pid: int, procfs_root: str | Path | None = None) -> Path:
    """Return the stat file path for ``pid`` under ``procfs_root``."""
    root = Path(procfs_root if procfs_root is not None else psutil.PROCFS_PATH)
    return root / str(pid) / "stat"


def read_stat(
    pid: int,
    procfs_root: str | Path | None = None,
    *,
    schema: StatSchema = STAT_SCHEMA,
    verify_pid: bool = True,
) -> ProcessStatRecord:
    """
    Read the stat record of ``pid`` in one piece and decode it.

    Args:
        pid: Process ID to read.
        procfs_root: Mount point of procfs. Defaults to psutil.PROCFS_PATH.
        schema: The field layout to decode with.
        verify_pid: Require the record's own pid to equal ``pid``.

    Returns:
        A fresh ProcessStatRecord.

    Raises:
        InvalidIdentity: Before any I/O, if ``pid`` is not a positive integer.
        OSError: If the file cannot be read, e.g. FileNotFoundError once the
            process has exited.
        ProcStatError: If the record does not decode.
    """
    validate_pid(pid)
    raw = stat_path(pid, procfs_root).read_bytes()
    return decode(pid, raw, schema=schema, verify_pid=verify_pid)
