"""
Stream counters.

Counts lines read, messages decoded and displayed, and every skipped line or
discarded message by reason code. Counters are informational: a burst of bad
lines is counted and logged, never escalated.
"""

import logging
import threading
import time
from typing import Dict
from dataclasses import dataclass
from collections import defaultdict

logger = logging.getLogger(__name__)


@dataclass
class CounterSnapshot:
    """Snapshot of counter state at a point in time."""

    counters: Dict[str, int]
    drop_reasons: Dict[str, int]

    def total_dropped(self) -> int:
        """Total lines/messages dropped across all reasons."""
        return sum(self.drop_reasons.values())


class MetricsCollector:
    """
    Thread-safe stream counters.

    Usage:
        collector = MetricsCollector()
        collector.increment('lines_in')
        collector.increment_drop('parse_error')

        snapshot = collector.snapshot()
        print(f"Total dropped: {snapshot.total_dropped()}")
    """

    DROP_REASONS = {
        'parse_error': 'Line is not valid JSON',
        'unknown_type': 'Record discriminator names no known message',
        'invalid_fields': 'Missing or mistyped fields for the message type',
        'mode_filtered': 'Location mode does not match the configured filter',
    }

    STANDARD_COUNTERS = (
        'lines_in',
        'messages_decoded',
        'locations_displayed',
        'raw_samples',
        'debug_messages',
        'packets_dropped',
    )

    def __init__(self):
        """Initialize metrics collector."""
        self._lock = threading.Lock()
        self._counters: Dict[str, int] = defaultdict(int)
        self._drop_reasons: Dict[str, int] = defaultdict(int)
        self._start_time = time.time()

        self._init_standard_counters()

    def _init_standard_counters(self):
        """Initialize standard counter keys to 0 for consistent reporting."""
        with self._lock:
            for counter in self.STANDARD_COUNTERS:
                if counter not in self._counters:
                    self._counters[counter] = 0

            for reason in self.DROP_REASONS:
                if reason not in self._drop_reasons:
                    self._drop_reasons[reason] = 0

    def increment(self, counter_name: str, value: int = 1):
        """
        Increment a counter by value.

        Args:
            counter_name: Name of counter to increment
            value: Amount to increment (default 1)
        """
        with self._lock:
            self._counters[counter_name] += value

    def increment_drop(self, reason: str, value: int = 1):
        """
        Increment drop counter for specific reason.

        Args:
            reason: Drop reason code (should be in DROP_REASONS)
            value: Amount to increment (default 1)
        """
        if reason not in self.DROP_REASONS:
            # Log unknown reason but still count it
            logger.warning(f"Unknown drop reason '{reason}'")

        with self._lock:
            self._drop_reasons[reason] += value
            self._counters['packets_dropped'] += value

    def get_counter(self, counter_name: str) -> int:
        """Get current value of a counter (0 if never incremented)."""
        with self._lock:
            return self._counters.get(counter_name, 0)

    def get_drop_count(self, reason: str) -> int:
        """Get current drop count for a reason code."""
        with self._lock:
            return self._drop_reasons.get(reason, 0)

    def snapshot(self) -> CounterSnapshot:
        """
        Get a snapshot of current metrics state.

        Returns:
            CounterSnapshot with copies of all counters
        """
        with self._lock:
            return CounterSnapshot(
                counters=dict(self._counters),
                drop_reasons=dict(self._drop_reasons),
            )

    def reset(self):
        """Reset all metrics (useful for testing)."""
        with self._lock:
            self._counters.clear()
            self._drop_reasons.clear()
            self._start_time = time.time()
        self._init_standard_counters()

    def get_uptime(self) -> float:
        """Get uptime in seconds since initialization."""
        return time.time() - self._start_time

    def print_summary(self):
        """Print human-readable metrics summary."""
        snapshot = self.snapshot()
        uptime = self.get_uptime()

        print("\n" + "=" * 70)
        print(f"  STREAM SUMMARY (uptime: {uptime:.1f}s)")
        print("=" * 70)

        print("\nCOUNTERS:")
        for name, value in sorted(snapshot.counters.items()):
            print(f"  {name:30s}: {value:8d}")

        total_dropped = snapshot.total_dropped()
        if total_dropped > 0:
            print("\nDROP REASONS:")
            for reason, count in sorted(snapshot.drop_reasons.items()):
                if count > 0:
                    pct = (count / total_dropped) * 100
                    print(f"  {reason:30s}: {count:8d} ({pct:5.1f}%)")

        print("=" * 70 + "\n")
