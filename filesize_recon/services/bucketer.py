# File: filesize_recon/services/bucketer.py

"""
Size bucketing.

Sizes are binned into power-of-two ranges starting at 1 KB (2 ** 10):
bucket 0 holds everything below 1 KB, bucket i holds sizes in
[2 ** (9 + i), 2 ** (10 + i)), and one extra overflow bucket at the end
holds every size at or above the configured upper bound.
"""

from filesize_recon.core.config import MAX_UPPER_BOUND, settings

# 1 KB = 2 ** 10 is the smallest size tracked in its own bucket.
MIN_POWER = 10


def power_index(size: int) -> int:
    """
    Number of right shifts needed until ``size`` becomes zero.

    That is floor(log2(size)) + 1 for positive sizes and 0 for zero.
    """
    if size < 0:
        raise ValueError(f"Object size cannot be negative: {size}")
    return size.bit_length()


class Bucketer:
    """Maps object sizes to bucket indices and bucket indices to upper bounds."""

    def __init__(self, max_file_size_upper_bound: int | None = None) -> None:
        if max_file_size_upper_bound is None:
            max_file_size_upper_bound = settings.max_file_size_upper_bound
        self.max_file_size_upper_bound = max_file_size_upper_bound
        # Extra bin for sizes >= the upper bound.
        self.bucket_count = power_index(max_file_size_upper_bound) - MIN_POWER + 1

    def bucket_index(self, size: int) -> int:
        if size >= self.max_file_size_upper_bound:
            return self.bucket_count - 1
        index = power_index(size)
        return 0 if index < MIN_POWER else index - MIN_POWER

    def upper_bound(self, index: int) -> int:
        if not 0 <= index < self.bucket_count:
            raise IndexError(f"Bucket index {index} out of range")
        if index == self.bucket_count - 1:
            return MAX_UPPER_BOUND
        return 2 ** (MIN_POWER + index)

    def upper_bounds(self) -> list[int]:
        return [self.upper_bound(i) for i in range(self.bucket_count)]

    def index_for_upper_bound(self, upper_bound: int) -> int | None:
        """Position of a persisted bucket key, or None if it is not part of this layout."""
        if upper_bound == MAX_UPPER_BOUND:
            return self.bucket_count - 1
        if upper_bound <= 0 or upper_bound & (upper_bound - 1):
            return None
        index = upper_bound.bit_length() - 1 - MIN_POWER
        if 0 <= index < self.bucket_count - 1:
            return index
        return None
