"""Data models for procstat."""

from dataclasses import dataclass


class ProcessState:
    """Known single-character state codes reported in /proc/<pid>/stat.

    Decoding never checks a record's state against these; kernels add new
    codes over time and unknown ones are kept verbatim.
    """

    RUNNING = "R"
    SLEEPING = "S"
    DISK_SLEEP = "D"
    ZOMBIE = "Z"
    STOPPED = "T"
    TRACING_STOP = "t"
    PAGING = "W"
    DEAD = "X"
    DEAD_OLD = "x"
    WAKEKILL = "K"
    PARKED = "P"
    IDLE = "I"


@dataclass(slots=True, frozen=True)
class ProcessStatRecord:
    """Immutable snapshot of one /proc/<pid>/stat record.

    Fields follow the kernel's order (see proc(5)). Tick counts are raw clock
    ticks; addresses and sizes are raw kernel values.
    """

    pid: int
    comm: str
    state: str  # 'R', 'S', 'D', 'Z', 'T', ... kept verbatim
    ppid: int
    pgrp: int
    session: int
    tty_nr: int
    tpgid: int  # -1 without a controlling terminal
    flags: int
    minflt: int  # Signed, unlike the other fault counters
    cminflt: int
    majflt: int
    cmajflt: int
    utime: int
    stime: int
    cutime: int
    cstime: int
    priority: int
    nice: int
    num_threads: int
    itrealvalue: int
    starttime: int  # Ticks since boot
    vsize: int  # Bytes
    rss: int  # Pages
    rsslim: int  # Bytes
    startcode: int
    endcode: int
    startstack: int
    kstkesp: int
    kstkeip: int
    signal: int
    blocked: int
    sigignore: int
    sigcatch: int
    wchan: int
    nswap: int
    cnswap: int
    exit_signal: int
    processor: int
    rt_priority: int
    policy: int
    # None when the schema predates the field
    delayacct_blkio_ticks: int | None = None  # Since Linux 2.6.18
    guest_time: int | None = None  # Since Linux 2.6.24
    cguest_time: int | None = None  # Since Linux 2.6.24
    # Fields declared by the schema but not named above, in record order
    extra: tuple[tuple[str, int | str], ...] = ()

    def extra_value(self, name: str) -> int | str:
        """Return a field from ``extra`` by name."""
        for key, value in self.extra:
            if key == name:
                return value
        raise KeyError(name)
