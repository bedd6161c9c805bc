"""Shared fixtures for procstat tests."""

import pytest

# Trailing field values of a realistic record, in kernel order.
SAMPLE_FIELDS = {
    "ppid": 1,
    "pgrp": 123,
    "session": 123,
    "tty_nr": 34816,
    "tpgid": -1,
    "flags": 4194560,
    "minflt": 1523,
    "cminflt": 20,
    "majflt": 3,
    "cmajflt": 0,
    "utime": 250,
    "stime": 75,
    "cutime": -2,
    "cstime": 4,
    "priority": 20,
    "nice": 0,
    "num_threads": 4,
    "itrealvalue": 0,
    "starttime": 987654,
    "vsize": 18446744073709551615,
    "rss": 1234,
    "rsslim": 18446744073709551615,
    "startcode": 94371115282432,
    "endcode": 94371116001093,
    "startstack": 140736722254448,
    "kstkesp": 0,
    "kstkeip": 0,
    "signal": 0,
    "blocked": 65536,
    "sigignore": 3686404,
    "sigcatch": 1266761467,
    "wchan": 0,
    "nswap": 0,
    "cnswap": 0,
    "exit_signal": 17,
    "processor": 3,
    "rt_priority": 0,
    "policy": 0,
    "delayacct_blkio_ticks": 12,
    "guest_time": 0,
    "cguest_time": 0,
}


@pytest.fixture
def sample_fields() -> dict[str, int]:
    """Trailing field values used by make_stat_line by default."""
    return dict(SAMPLE_FIELDS)


@pytest.fixture
def make_stat_line():
    """
    Factory building raw stat records.

    Keyword overrides replace single trailing values; ``extra`` appends
    tokens and ``count`` keeps only the first ``count`` trailing tokens.
    """

    def _make(
        pid: int = 123,
        comm: bytes = b"bash",
        state: bytes = b"S",
        count: int | None = None,
        extra: tuple[str, ...] = (),
        **overrides: object,
    ) -> bytes:
        values = {**SAMPLE_FIELDS, **overrides}
        tokens = [str(value) for value in values.values()]
        if count is not None:
            tokens = tokens[:count]
        tokens.extend(extra)
        head = str(pid).encode() + b" (" + comm + b") " + state
        return head + b" " + " ".join(tokens).encode() + b"\n"

    return _make
