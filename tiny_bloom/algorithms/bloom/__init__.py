"""
Bloom Filter implementation for TinyBloom.

This module provides the standard Bloom Filter for efficient set membership
testing with bounded memory usage.

This includes:
- HashFunctionSet: k independently seeded hash functions deriving bit indices
- BloomFilter: Standard insert-only Bloom filter over a packed bit array
"""

from tiny_bloom.algorithms.bloom.base import (
    BloomFilter,
    optimal_bit_size,
    optimal_hash_count,
    theoretical_false_positive_rate,
)
from tiny_bloom.algorithms.bloom.hash_set import HashFunctionSet, derive_indices

__all__ = [
    "BloomFilter",
    "HashFunctionSet",
    "derive_indices",
    "optimal_bit_size",
    "optimal_hash_count",
    "theoretical_false_positive_rate",
]
