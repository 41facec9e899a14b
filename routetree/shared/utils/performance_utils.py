"""Timing and memory helpers used for run statistics."""
import logging
import time
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

import psutil

logger = logging.getLogger(__name__)


def memory_usage_mb(process: Optional[psutil.Process] = None) -> float:
    """Resident set size of a process (default: this one) in MB."""
    process = process or psutil.Process()
    return process.memory_info().rss / (1024 * 1024)


class MemoryProfiler:
    """Tracks the peak RSS seen across explicit samples."""

    def __init__(self):
        self._process = psutil.Process()
        self.start_mb = memory_usage_mb(self._process)
        self.peak_mb = self.start_mb

    def sample(self) -> float:
        current = memory_usage_mb(self._process)
        self.peak_mb = max(self.peak_mb, current)
        return current


@contextmanager
def timing_context(label: str, log_level: int = logging.DEBUG) -> Iterator[Dict[str, float]]:
    """Measure wall time of a block.

    The yielded dict receives ``elapsed`` (seconds) when the block exits.
    """
    timing = {"elapsed": 0.0}
    start = time.perf_counter()
    try:
        yield timing
    finally:
        timing["elapsed"] = time.perf_counter() - start
        logger.log(log_level, f"{label} took {timing['elapsed']:.3f}s")


@contextmanager
def memory_profiler() -> Iterator[MemoryProfiler]:
    """Profile peak memory of a block; a final sample is taken on exit."""
    profiler = MemoryProfiler()
    try:
        yield profiler
    finally:
        profiler.sample()
        logger.debug(f"Memory: start {profiler.start_mb:.1f} MB, peak {profiler.peak_mb:.1f} MB")
