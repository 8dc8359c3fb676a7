"""
Bloom Filter implementation for TinyBloom with benchmarking hooks.

This module provides the standard Bloom Filter, a space-efficient
probabilistic data structure used for testing set membership with a
tunable false positive rate and no false negatives.

The filter only stores bits. The hash functions live in a separate
HashFunctionSet that is passed to every operation, so the same set must be
used for all insertions and queries against one filter.

References:
    - Bloom, B. H. (1970). Space/time trade-offs in hash coding with allowable errors.
      Communications of the ACM, 13(7), 422-426.
"""

import array
import logging
import math
import sys
import time
from collections import Counter
from typing import IO, Any, Dict, List, Optional, Tuple

from tiny_bloom.algorithms.bloom.hash_set import HashFunctionSet
from tiny_bloom.config import DEFAULT_BASE_SEED, DEFAULT_HASH_FAMILY
from tiny_bloom.core.base import MembershipFilter
from tiny_bloom.core.exceptions import InvalidConfigurationError
from tiny_bloom.core.hash import Key

logger = logging.getLogger(__name__)


def optimal_bit_size(expected_items: int, false_positive_rate: float) -> int:
    """
    Calculate the optimal bit array size: m = -(n * ln(p)) / (ln(2)^2).

    Args:
        expected_items: Expected number of items (n).
        false_positive_rate: Target false positive rate (p), between 0 and 1.

    Returns:
        Bit array size, at least 8.

    Raises:
        InvalidConfigurationError: If n < 1 or p is not strictly between 0 and 1.
    """
    if expected_items < 1:
        raise InvalidConfigurationError("Expected number of items must be at least 1")
    if not (0 < false_positive_rate < 1):
        raise InvalidConfigurationError("False positive rate must be between 0 and 1")

    m = -(expected_items * math.log(false_positive_rate)) / (math.log(2) ** 2)
    return max(8, math.ceil(m))


def optimal_hash_count(bit_size: int, expected_items: int) -> int:
    """
    Calculate the optimal number of hash functions: k = (m/n) * ln(2).

    Args:
        bit_size: Bit array size (m).
        expected_items: Expected number of items (n).

    Returns:
        Number of hash functions, at least 1.

    Raises:
        InvalidConfigurationError: If m < 1 or n < 1.
    """
    if bit_size < 1:
        raise InvalidConfigurationError("Bit size must be at least 1")
    if expected_items < 1:
        raise InvalidConfigurationError("Expected number of items must be at least 1")

    k = (bit_size / expected_items) * math.log(2)
    return max(1, math.ceil(k))


def theoretical_false_positive_rate(bit_size: int, hash_count: int, items: int) -> float:
    """
    Expected false positive rate after ``items`` insertions: (1 - e^(-kn/m))^k.

    Args:
        bit_size: Bit array size (m).
        hash_count: Number of hash functions (k).
        items: Number of inserted items (n).

    Returns:
        The estimated probability, between 0 and 1.

    Raises:
        InvalidConfigurationError: If m < 1, or k or n is negative.
    """
    if bit_size < 1:
        raise InvalidConfigurationError("Bit size must be at least 1")
    if hash_count < 0 or items < 0:
        raise InvalidConfigurationError("Hash count and item count cannot be negative")

    if hash_count == 0:
        # Every query is vacuously a hit
        return 1.0
    if items == 0:
        return 0.0

    fpp = (1.0 - math.exp(-(hash_count * items) / bit_size)) ** hash_count
    return max(0.0, min(fpp, 1.0))


class BloomFilter(MembershipFilter[Key, HashFunctionSet]):
    """
    Bloom Filter for set membership testing with benchmarking hooks.

    A Bloom filter answers "possibly in set" or "definitely not in set". Bits
    are packed eight to a byte and are only ever set, never cleared, so a key
    that was added is always reported as present.

    Example:
        hash_set = HashFunctionSet(5)
        bloom = BloomFilter(800)

        bloom.add("apple", hash_set)
        bloom.exists("apple", hash_set)   # True
        bloom.exists("orange", hash_set)  # False (almost certainly)

        stats = bloom.get_stats(hash_set)
    """

    def __init__(self, size: int):
        """
        Initialize an empty Bloom filter.

        Args:
            size: Number of bits in the filter.

        Raises:
            InvalidConfigurationError: If size is not an integer of at least 1.
        """
        super().__init__()

        if isinstance(size, bool) or not isinstance(size, int):
            raise InvalidConfigurationError(
                f"Filter size must be an integer, got {size.__class__.__name__}"
            )
        if size < 1:
            raise InvalidConfigurationError(
                f"Filter size must be at least 1 bit, got {size}"
            )

        self._size = size

        # 'B' typecode gives unsigned char (8 bits, 0 to 255)
        num_bytes = (size + 7) // 8
        self._bytes = array.array("B", bytes(num_bytes))

        self._warned_empty_hash_set = False
        self._memory_breakdown: Optional[Dict[str, int]] = None

        logger.debug("Created Bloom filter: size=%d bits (%d bytes)", size, num_bytes)

    @classmethod
    def create_for_capacity(
        cls,
        expected_items: int,
        false_positive_rate: float = 0.01,
        base_seed: int = DEFAULT_BASE_SEED,
        family: str = DEFAULT_HASH_FAMILY,
    ) -> Tuple["BloomFilter", HashFunctionSet]:
        """
        Create a filter and matching hash-function set sized for a workload.

        Args:
            expected_items: Expected number of unique items to be added.
            false_positive_rate: Target false positive rate at that load.
            base_seed: Base seed for the hash-function set.
            family: Hash family for the hash-function set.

        Returns:
            A (BloomFilter, HashFunctionSet) pair.

        Raises:
            InvalidConfigurationError: If the parameters are out of range.
        """
        bit_size = optimal_bit_size(expected_items, false_positive_rate)
        hash_count = optimal_hash_count(bit_size, expected_items)
        return cls(bit_size), HashFunctionSet(hash_count, base_seed=base_seed, family=family)

    @property
    def size(self) -> int:
        """Number of bits in the filter."""
        return self._size

    @property
    def num_bytes(self) -> int:
        """Number of bytes backing the bit array."""
        return len(self._bytes)

    @property
    def bit_array(self) -> bytes:
        """Copy of the packed bit array; bit i is byte i // 8, bit i % 8."""
        return self._bytes.tobytes()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(size={self._size})"

    def _indices(self, key: Key, hash_set: HashFunctionSet) -> List[int]:
        if len(hash_set) == 0 and not self._warned_empty_hash_set:
            logger.warning(
                "Bloom filter used with an empty hash-function set; "
                "every key will be reported as present"
            )
            self._warned_empty_hash_set = True
        return hash_set.derive_indices(key, self._size)

    def _set_bit(self, position: int) -> None:
        self._bytes[position // 8] |= 1 << (position % 8)

    def _test_bit(self, position: int) -> bool:
        return bool(self._bytes[position // 8] & (1 << (position % 8)))

    def add(self, key: Key, hash_set: HashFunctionSet) -> None:
        """
        Add a key to the filter.

        Sets the bit at every index the hash-function set derives for the key.
        Adding the same key again leaves the filter unchanged.

        Args:
            key: The key to add (str or bytes-like).
            hash_set: The hash functions used to place the key.
        """
        started_at = time.perf_counter()
        positions = self._indices(key, hash_set)
        super().add(key, hash_set)

        for position in positions:
            self._set_bit(position)

        self._record_update_time(started_at)

    def exists(self, key: Key, hash_set: HashFunctionSet) -> bool:
        """
        Test if a key might be in the filter.

        Args:
            key: The key to test (str or bytes-like).
            hash_set: The hash functions that were used for insertion.

        Returns:
            True if the key might be in the set, False if definitely not in the set.
        """
        for position in self._indices(key, hash_set):
            if not self._test_bit(position):
                return False
        return True

    def print_filter(self, file: Optional[IO[str]] = None) -> None:
        """
        Print the raw packed bytes, e.g. ``[0 4 0 128]``.

        Args:
            file: Stream to write to; defaults to sys.stdout.
        """
        print("[" + " ".join(str(byte) for byte in self._bytes) + "]", file=file)

    def count_set_bits(self) -> int:
        """Count the bits currently set to 1."""
        return sum(bin(byte).count("1") for byte in self._bytes)

    def _count_bits_in_range(self, start: int, end: int) -> int:
        """Count the set bits at positions start <= i < end."""
        count = 0
        for byte_index in range(start // 8, (end + 7) // 8):
            low = max(start - byte_index * 8, 0)
            high = min(end - byte_index * 8, 8)
            mask = ((1 << high) - 1) & ~((1 << low) - 1)
            count += bin(self._bytes[byte_index] & mask).count("1")
        return count

    def fill_ratio(self) -> float:
        """Fraction of the filter's bits that are set."""
        return self.count_set_bits() / self._size

    def is_empty(self) -> bool:
        """
        Check if no bit has been set yet.

        Returns:
            True if the filter is empty, False otherwise.
        """
        return not any(self._bytes)

    def estimate_cardinality(self, hash_set: HashFunctionSet) -> int:
        """
        Estimate the number of unique keys in the filter.

        Uses n ≈ -m * ln(1 - X/m) / k, where X is the number of set bits.
        The estimate depends only on the bit array, so re-adding a key never
        changes it. A saturated filter reports the estimate for one unset bit,
        m * ln(m) / k, the largest value the formula can give.

        Args:
            hash_set: The hash functions used for insertion (supplies k).

        Returns:
            Estimated number of unique keys.
        """
        hash_count = len(hash_set)
        set_bits = self.count_set_bits()

        if hash_count == 0 or set_bits == 0:
            return 0
        # A full bit array has no finite estimate; use the one-unset-bit bound
        set_bits = min(set_bits, self._size - 1)
        if set_bits == 0:
            return 1

        estimate = -self._size * math.log(1.0 - set_bits / self._size) / hash_count
        return max(1, int(round(estimate)))

    def false_positive_probability(self, hash_set: HashFunctionSet) -> float:
        """
        Estimate the current false positive probability from the fill ratio.

        Uses FPP ≈ (set_bits / m)^k, which tracks the real state of the bit
        array rather than the item count.

        Args:
            hash_set: The hash functions used for insertion (supplies k).

        Returns:
            Estimated false positive probability, between 0 and 1.
        """
        fpp = self.fill_ratio() ** len(hash_set)
        return max(0.0, min(fpp, 1.0))

    def error_bounds(self, hash_set: Optional[HashFunctionSet] = None) -> Dict[str, Any]:
        """
        Calculate the theoretical error figures for the filter's current load.

        Args:
            hash_set: The hash functions used for insertion. Without it only
                      the observed fill ratio can be reported.

        Returns:
            A dictionary with the fill ratio and, given a hash set, the
            theoretical false positive rate and a coarse error margin.
        """
        bounds: Dict[str, Any] = {"fill_ratio": self.fill_ratio()}

        if hash_set is None:
            return bounds

        hash_count = len(hash_set)
        items = self._items_processed
        bounds["current_theoretical_fpp"] = theoretical_false_positive_rate(
            self._size, hash_count, items
        )

        if hash_count > 0 and items > 0:
            expected_fill = 1.0 - math.exp(-(hash_count * items) / self._size)
            bounds["theoretical_fill_ratio"] = expected_fill
            if expected_fill < 0.5:
                bounds["error_margin"] = "low"
            elif expected_fill < 0.8:
                bounds["error_margin"] = "moderate"
            else:
                bounds["error_margin"] = "high"

        return bounds

    def estimate_size(self) -> int:
        """
        Estimate the current memory usage of this filter in bytes.

        Provides a detailed breakdown in ``_memory_breakdown``.

        Returns:
            Estimated memory usage in bytes.
        """
        base_size = super().estimate_size()
        array_size = sys.getsizeof(self._bytes)
        size = base_size + array_size

        self._memory_breakdown = {
            "base_object": base_size,
            "byte_array": array_size,
            "byte_array_buffer": len(self._bytes),
            "estimated_total": size,
        }

        return size

    def get_stats(self, hash_set: Optional[HashFunctionSet] = None) -> Dict[str, Any]:
        """
        Get detailed statistics about the current state of the Bloom filter.

        Args:
            hash_set: The hash functions used for insertion. Figures that
                      depend on k are only included when it is given.

        Returns:
            A dictionary containing various statistics about the filter state.
        """
        stats = super().get_stats()

        set_bits = self.count_set_bits()
        stats.update(
            {
                "bit_size": self._size,
                "num_bytes": len(self._bytes),
                "set_bits": set_bits,
                "fill_ratio": set_bits / self._size,
            }
        )

        byte_distribution = Counter(bin(byte).count("1") for byte in self._bytes)
        stats["byte_stats"] = {
            "zero_bytes": byte_distribution.get(0, 0),
            "full_bytes": byte_distribution.get(8, 0),
            "distribution": {
                str(bits): count for bits, count in sorted(byte_distribution.items())
            },
        }

        if hash_set is not None:
            stats["hash_count"] = len(hash_set)
            stats["estimated_unique_items"] = self.estimate_cardinality(hash_set)
            stats["current_fpp"] = self.false_positive_probability(hash_set)

        stats.update(self.error_bounds(hash_set))

        if self._items_processed > 0:
            stats["bits_per_item"] = self._size / self._items_processed

        return stats

    def analyze_hash_quality(self, hash_set: HashFunctionSet) -> Dict[str, Any]:
        """
        Analyze how evenly the hash functions spread bits across the filter.

        The bit array is split into up to ten regions and the coefficient of
        variation of their fill ratios is graded.

        Args:
            hash_set: The hash functions used for insertion.

        Returns:
            A dictionary with hash quality metrics.
        """
        if self.is_empty():
            return {"status": "empty_filter"}

        set_bits = self.count_set_bits()
        expected_ratio = 1.0 - math.exp(
            -(len(hash_set) * self._items_processed) / self._size
        )

        quality: Dict[str, Any] = {
            "bit_sample_size": self._size,
            "filled_ratio": set_bits / self._size,
            "expected_ratio": expected_ratio,
            "ratio_difference": abs(set_bits / self._size - expected_ratio),
        }

        num_regions = min(10, self._size // 100)
        if num_regions < 2:
            quality["note"] = "Filter too small for detailed uniformity analysis"
            return quality

        region_size = self._size // num_regions
        region_fill_ratios = [
            self._count_bits_in_range(i * region_size, (i + 1) * region_size) / region_size
            for i in range(num_regions)
        ]

        avg_fill = sum(region_fill_ratios) / num_regions
        variance = sum((r - avg_fill) ** 2 for r in region_fill_ratios) / num_regions
        std_dev = math.sqrt(variance)
        cv = std_dev / avg_fill if avg_fill > 0 else 0.0

        # Ideal < 0.05, good < 0.1, fair < 0.2
        if cv < 0.05:
            grade = "ideal"
        elif cv < 0.1:
            grade = "good"
        elif cv < 0.2:
            grade = "fair"
        else:
            grade = "poor"

        quality.update(
            {
                "region_std_dev": std_dev,
                "region_cv": cv,
                "uniformity_quality": grade,
                "region_fill_ratios": region_fill_ratios,
            }
        )
        return quality
