"""
Hashing functions for TinyBloom.

This module provides stateless, seeded 32-bit hash implementations that require
no external dependencies. Every function maps ``(key, seed)`` straight to a
digest; there is no incremental hasher object to write into or reset.
These functions are tuned for distribution quality, not cryptographic security.
"""

from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]
Key = Union[str, BytesLike]

_MASK_32 = 0xFFFFFFFF


def key_to_bytes(key: Key) -> bytes:
    """
    Normalise a key to the byte string that gets hashed.

    Strings are encoded as UTF-8; bytes-like objects are used as-is.

    Args:
        key: The key to convert.

    Returns:
        The key as an immutable bytes object.

    Raises:
        TypeError: If the key is neither a string nor bytes-like.
    """
    if isinstance(key, str):
        return key.encode("utf-8")
    if isinstance(key, bytes):
        return key
    if isinstance(key, (bytearray, memoryview)):
        return bytes(key)
    raise TypeError(
        f"Keys must be str or bytes-like, got {key.__class__.__name__}"
    )


def murmurhash3_32(key: Key, seed: int = 0) -> int:
    """
    Pure Python implementation of MurmurHash3 (x86, 32-bit variant).

    MurmurHash is a non-cryptographic hash function suitable for general hash-based
    lookup. It's known for being fast, having good distribution, and minimizing collisions.

    Args:
        key: The key to hash (str is encoded as UTF-8)
        seed: Seed for the hash, reduced to 32 bits

    Returns:
        32-bit unsigned hash value
    """
    key_bytes = key_to_bytes(key)
    length = len(key_bytes)

    # MurmurHash3 constants
    c1 = 0xCC9E2D51
    c2 = 0x1B873593

    h = seed & _MASK_32

    # Body: 4-byte little-endian blocks
    nblocks = length // 4
    for i in range(nblocks):
        k = int.from_bytes(key_bytes[i * 4 : i * 4 + 4], "little")

        k = (k * c1) & _MASK_32
        k = ((k << 15) | (k >> 17)) & _MASK_32  # rotl32(k, 15)
        k = (k * c2) & _MASK_32

        h ^= k
        h = ((h << 13) | (h >> 19)) & _MASK_32  # rotl32(h, 13)
        h = (h * 5 + 0xE6546B64) & _MASK_32

    # Tail: remaining 0-3 bytes
    k = 0
    idx = nblocks * 4
    tail = length & 3

    if tail >= 3:
        k ^= key_bytes[idx + 2] << 16
    if tail >= 2:
        k ^= key_bytes[idx + 1] << 8
    if tail >= 1:
        k ^= key_bytes[idx]
        k = (k * c1) & _MASK_32
        k = ((k << 15) | (k >> 17)) & _MASK_32
        k = (k * c2) & _MASK_32
        h ^= k

    # Finalization mix (fmix32)
    h ^= length
    h ^= h >> 16
    h = (h * 0x85EBCA6B) & _MASK_32
    h ^= h >> 13
    h = (h * 0xC2B2AE35) & _MASK_32
    h ^= h >> 16

    return h & _MASK_32


def fnv1a_32(key: Key, seed: int = 0) -> int:
    """
    Pure Python implementation of FNV-1a hash (32-bit variant).

    FNV-1a is a simple but effective non-cryptographic hash function.
    It's slightly faster than MurmurHash3 but with slightly less uniform distribution.

    Args:
        key: The key to hash (str is encoded as UTF-8)
        seed: Seed value, XORed into the offset basis

    Returns:
        32-bit unsigned hash value
    """
    key_bytes = key_to_bytes(key)

    FNV_PRIME = 16777619
    FNV_OFFSET_BASIS = 2166136261

    h = (FNV_OFFSET_BASIS ^ seed) & _MASK_32

    for byte in key_bytes:
        h ^= byte
        h = (h * FNV_PRIME) & _MASK_32

    return h
