"""
Core functionality for TinyBloom.
"""

from tiny_bloom.core.base import MembershipFilter
from tiny_bloom.core.exceptions import InvalidConfigurationError
from tiny_bloom.core.hash import fnv1a_32, key_to_bytes, murmurhash3_32

__all__ = [
    # Base classes
    "MembershipFilter",
    "InvalidConfigurationError",
    # Utility functions
    "murmurhash3_32",
    "fnv1a_32",
    "key_to_bytes",
]
