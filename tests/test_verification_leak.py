"""Verification Test: Memory Leak Check.

Repeated decoding and polling must not grow the process's memory: each call
produces an independent snapshot and nothing is cached between calls.
"""

import gc
import os
import time
from queue import Empty, Queue

import psutil

from procstat.models import ProcessStatRecord
from procstat.monitor import StatMonitor
from procstat.parser import decode


def get_current_memory_mb() -> float:
    """Get current process memory usage in MB."""
    process = psutil.Process()
    return process.memory_info().rss / (1024 * 1024)


class TestMemoryLeakCheck:
    """Memory leak verification suite tests."""

    def test_repeated_decode_no_leak(self, make_stat_line):
        """
        Test that decoding the same record many times doesn't leak memory.
        """
        raw = make_stat_line(comm=b"weird (name) here")

        # Warm up so lazily allocated structures are in place
        for _ in range(1_000):
            decode(123, raw)

        gc.collect()
        initial_memory = get_current_memory_mb()

        for _ in range(50_000):
            decode(123, raw)

        gc.collect()
        memory_delta = get_current_memory_mb() - initial_memory

        # Allow small increase due to Python runtime variations
        max_delta_mb = 2.0

        assert memory_delta < max_delta_mb, (
            f"Memory increased by {memory_delta:.2f}MB, expected < {max_delta_mb}MB"
        )

    def test_monitor_memory_stability_short(self, tmp_path, make_stat_line):
        """
        Test that the monitor doesn't leak memory over a short run.

        The history is bounded, so after it fills up memory should be flat.
        """
        pid = os.getpid()
        stat = tmp_path / str(pid) / "stat"
        stat.parent.mkdir()
        stat.write_bytes(make_stat_line(pid=pid))

        queue: Queue[ProcessStatRecord] = Queue()
        monitor = StatMonitor(pid, queue, poll_rate=0.1, procfs_root=tmp_path, history_size=10)

        gc.collect()
        initial_memory = get_current_memory_mb()

        monitor.start()

        try:
            test_duration = 3.0
            start_time = time.time()
            snapshots_processed = 0

            while time.time() - start_time < test_duration:
                try:
                    snapshot = queue.get(timeout=1.0)
                    snapshots_processed += 1
                    _ = snapshot.utime + snapshot.stime
                except Empty:
                    pass

            assert snapshots_processed > 0, "Should have processed at least one snapshot"
            assert len(monitor.get_history()) <= 10

        finally:
            monitor.stop()

        gc.collect()
        memory_delta = get_current_memory_mb() - initial_memory

        max_delta_mb = 2.0

        assert memory_delta < max_delta_mb, (
            f"Memory increased by {memory_delta:.2f}MB, expected < {max_delta_mb}MB"
        )
