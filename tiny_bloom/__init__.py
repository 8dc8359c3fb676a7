"""
tiny-bloom - Lightweight Bloom Filter Library

tiny-bloom is a Python library for approximate set-membership testing with a
fixed memory footprint, built on seeded, stateless 32-bit hash functions.
"""

__version__ = "0.1.0"

# Import main classes to make them available at the top level
from tiny_bloom.algorithms.bloom.base import BloomFilter
from tiny_bloom.algorithms.bloom.hash_set import HashFunctionSet, derive_indices
from tiny_bloom.core.base import MembershipFilter
from tiny_bloom.core.exceptions import InvalidConfigurationError

__all__ = [
    # Core base classes
    "MembershipFilter",
    "InvalidConfigurationError",
    # Algorithm implementations
    "BloomFilter",
    "HashFunctionSet",
    "derive_indices",
]
