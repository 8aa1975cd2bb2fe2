"""
Opt-in hot path profiling.

Set JSONER_PROFILE in the environment to collect per-function call counts,
timings and character throughput for the lexer, deserializer, serializer and
pretty-printer. Without it the context manager does nothing. Statistics are
shared across threads and updated under a lock.
"""

import os
import threading
import time
from dataclasses import dataclass
from typing import Any

PROFILE_HOT_PATHS = __debug__ and "JSONER_PROFILE" in os.environ

_hot_path_stats: dict[str, "HotPathStats"] = {}
_stats_lock = threading.Lock()


@dataclass
class HotPathStats:
    """Accumulated timings for one profiled function."""

    function_name: str
    call_count: int = 0
    total_time_ns: int = 0
    chars_processed: int = 0

    def record_call(self, duration_ns: int, chars: int = 0) -> None:
        self.call_count += 1
        self.total_time_ns += duration_ns
        self.chars_processed += chars

    @property
    def mean_time_ns(self) -> float:
        return self.total_time_ns / self.call_count if self.call_count else 0.0


class ProfileContext:
    """
    Times the enclosed block under `func_name` when profiling is on.

    The block may set `chars` to the number of characters it consumed or
    produced; the count is added to the function's throughput.
    """

    __slots__ = ("func_name", "chars", "start_time")

    def __init__(self, func_name: str) -> None:
        self.func_name = func_name
        self.chars = 0
        self.start_time = 0

    def __enter__(self) -> "ProfileContext":
        if PROFILE_HOT_PATHS:
            self.start_time = time.perf_counter_ns()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if not PROFILE_HOT_PATHS:
            return
        duration = time.perf_counter_ns() - self.start_time
        with _stats_lock:
            stats = _hot_path_stats.get(self.func_name)
            if stats is None:
                stats = _hot_path_stats[self.func_name] = HotPathStats(
                    self.func_name
                )
            stats.record_call(duration, self.chars)


def get_hot_path_stats() -> dict[str, HotPathStats]:
    """Returns a snapshot of the collected statistics."""
    with _stats_lock:
        return dict(_hot_path_stats)


def clear_hot_path_stats() -> None:
    with _stats_lock:
        _hot_path_stats.clear()


def format_hot_path_stats() -> str:
    """Renders the statistics as a table, slowest function first."""
    with _stats_lock:
        rows = sorted(
            _hot_path_stats.values(), key=lambda s: s.total_time_ns, reverse=True
        )
    lines = [
        f"{'function':<24} {'calls':>10} {'chars':>12} "
        f"{'total ms':>12} {'mean ns':>12}"
    ]
    for stats in rows:
        lines.append(
            f"{stats.function_name:<24} {stats.call_count:>10,} "
            f"{stats.chars_processed:>12,} "
            f"{stats.total_time_ns / 1e6:>12.3f} {stats.mean_time_ns:>12.1f}"
        )
    return "\n".join(lines)
