"""
Stage timing for debug runs.

Each pipeline stage records per-file durations into a TimingMetrics
bucket; the summary is printed to stderr when TOKEN_AUDIT_DEBUG=1.
"""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass


@dataclass
class TimingMetrics:
    """Accumulated durations for one stage.

    Attributes:
        stage_name: Stage label, e.g. 'parse' or 'rename'
        total_ms: Sum of recorded durations
        count: Number of recordings
        max_ms: Slowest recording
        slowest: Label of the slowest recording (usually a file path)
    """

    stage_name: str
    total_ms: float = 0.0
    count: int = 0
    max_ms: float = 0.0
    slowest: str = ''

    def record(self, duration_ms: float, label: str = '') -> None:
        self.total_ms += duration_ms
        self.count += 1
        if duration_ms >= self.max_ms:
            self.max_ms = duration_ms
            self.slowest = label

    @property
    def avg_ms(self) -> float:
        return self.total_ms / self.count if self.count else 0.0

    def to_dict(self) -> dict:
        return {
            'stage_name': self.stage_name,
            'count': self.count,
            'total_ms': round(self.total_ms, 2),
            'avg_ms': round(self.avg_ms, 2),
            'max_ms': round(self.max_ms, 2),
            'slowest': self.slowest,
        }

    def report(self) -> None:
        """Print a one-line summary to stderr."""
        d = self.to_dict()
        print(
            f"DEBUG: {d['stage_name']}: {d['count']} items in {d['total_ms']}ms "
            f"(avg {d['avg_ms']}ms, max {d['max_ms']}ms {d['slowest']})",
            file=sys.stderr,
        )


class Timer:
    """Context manager measuring one unit of work.

    Usage:
        metrics = TimingMetrics('parse')
        with Timer(metrics, label=path):
            parse(path)
    """

    def __init__(self, metrics: TimingMetrics | None = None, label: str = '') -> None:
        self._metrics = metrics
        self._label = label
        self._start = 0.0
        self.elapsed_ms = 0.0

    def __enter__(self) -> Timer:
        self._start = time.perf_counter()
        return self

    def __exit__(self, *args) -> None:
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000
        if self._metrics is not None:
            self._metrics.record(self.elapsed_ms, self._label)
