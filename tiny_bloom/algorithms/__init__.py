"""
Algorithm implementations for TinyBloom.
"""

from tiny_bloom.algorithms.bloom import BloomFilter, HashFunctionSet

__all__ = [
    "BloomFilter",
    "HashFunctionSet",
]
