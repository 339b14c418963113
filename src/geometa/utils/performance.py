import logging
import time
from typing import Optional

import psutil
from prometheus_client import Histogram

logger = logging.getLogger(__name__)

# Prometheus Metrics
EXTRACTION_DURATION_SECONDS = Histogram(
    "extraction_duration_seconds",
    "Time spent extracting and normalizing metadata",
    ["task_name"]
)

EXTRACTION_MEMORY_USAGE_BYTES = Histogram(
    "extraction_memory_usage_bytes",
    "Resident memory in bytes at the end of the extraction",
    ["task_name"]
)


class PerformanceMonitor:
    """Helper to measure Time, CPU, and Memory usage."""

    def __init__(self):
        self.start_time = 0.0
        self.end_time = 0.0
        self.end_cpu = 0.0
        self.start_mem = 0
        self.end_mem = 0
        self.process = psutil.Process()

    def start(self):
        self.start_time = time.perf_counter()
        self.process.cpu_percent(interval=None)  # Set baseline for next call
        self.start_mem = self.process.memory_info().rss

    def stop(self):
        self.end_time = time.perf_counter()
        self.end_cpu = self.process.cpu_percent(interval=None)
        self.end_mem = self.process.memory_info().rss

    @property
    def duration(self):
        return self.end_time - self.start_time

    def report(self, label: str, count: Optional[int] = None) -> str:
        count_str = f" (N={count})" if count is not None else ""
        mem_diff_mb = (self.end_mem - self.start_mem) / (1024 * 1024)
        end_mem_mb = self.end_mem / (1024 * 1024)
        msg = (
            f"[{label}]{count_str} Time: {self.duration:.4f}s"
            f" | CPU: {self.end_cpu:.1f}% | Mem: {end_mem_mb:.1f}MB (Delta: {mem_diff_mb:+.2f}MB)"
        )

        EXTRACTION_DURATION_SECONDS.labels(task_name=label).observe(self.duration)
        EXTRACTION_MEMORY_USAGE_BYTES.labels(task_name=label).observe(self.end_mem)

        logger.debug(msg)
        return msg
