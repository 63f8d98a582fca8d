from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Optional


@dataclass(frozen=True)
class Sample:
    """One probe outcome. ``latency_ms`` is None when the probe was lost."""

    timestamp: float
    latency_ms: Optional[int] = None

    @property
    def lost(self) -> bool:
        return self.latency_ms is None


class SampleWindow:
    """Probe outcomes from the last ``window_duration`` seconds.

    Samples are appended at the tail and evicted from the head as soon as
    they fall out of the window, so ``loss_count()`` is always exact for the
    retained entries.
    """

    def __init__(self, window_duration: float):
        self.window_duration = window_duration
        self.entries: Deque[Sample] = deque()
        self.lost_count = 0

    def __len__(self) -> int:
        return len(self.entries)

    def insert(self, sample: Sample) -> None:
        """Append ``sample`` and drop everything older than the window.

        Timestamps must not go backwards; eviction stops at the first entry
        still inside the window.
        """
        self.entries.append(sample)
        if sample.lost:
            self.lost_count += 1

        while self.entries:
            oldest = self.entries[0]
            if sample.timestamp - oldest.timestamp <= self.window_duration:
                break
            self.entries.popleft()
            if oldest.lost:
                self.lost_count -= 1

    def size(self) -> int:
        return len(self.entries)

    def loss_count(self) -> int:
        return self.lost_count

    def loss_percentage(self) -> int:
        # Callers check size() first; an empty window raises ZeroDivisionError.
        return self.lost_count * 100 // len(self.entries)
