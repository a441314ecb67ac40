# File: filesize_recon/services/histogram.py

"""
In-memory file size histogram.

A fixed-length list of counters, one per bucket, owned by whoever runs a
reprocess/process pass. Counters only move through ``increment`` and
``decrement_if_positive`` so they can never go negative.
"""

from typing import Iterable, List


class HistogramState:
    def __init__(self, bucket_count: int) -> None:
        if bucket_count <= 0:
            raise ValueError("bucket_count must be positive")
        self.counts: List[int] = [0] * bucket_count
        # Decrements that found an empty bucket or had no size to work with.
        self.anomalies = 0

    def __len__(self) -> int:
        return len(self.counts)

    def reset(self) -> None:
        for i in range(len(self.counts)):
            self.counts[i] = 0
        self.anomalies = 0

    def load(self, counts: Iterable[int]) -> None:
        """Replace every counter, in bucket order."""
        values = list(counts)
        if len(values) != len(self.counts):
            raise ValueError(
                f"Expected {len(self.counts)} counts, got {len(values)}"
            )
        if any(v < 0 for v in values):
            raise ValueError("Bucket counts cannot be negative")
        self.counts[:] = values
        self.anomalies = 0

    def increment(self, index: int) -> None:
        self.counts[index] += 1

    def decrement_if_positive(self, index: int) -> bool:
        if self.counts[index] > 0:
            self.counts[index] -= 1
            return True
        self.record_anomaly()
        return False

    def record_anomaly(self) -> None:
        self.anomalies += 1

    def total(self) -> int:
        return sum(self.counts)
