"""
Seeded hash-function sets for TinyBloom filters.

A HashFunctionSet stands for ``k`` independent 32-bit hash functions. Each
function is the same stateless hash family evaluated with its own seed, so a
set holds nothing but its seeds and can be shared between filters and callers.
"""

import logging
import secrets
from typing import Callable, Dict, Iterator, List, Tuple

from tiny_bloom.config import DEFAULT_BASE_SEED, DEFAULT_HASH_FAMILY, HASH_FAMILIES
from tiny_bloom.core.exceptions import InvalidConfigurationError
from tiny_bloom.core.hash import Key, fnv1a_32, key_to_bytes, murmurhash3_32

logger = logging.getLogger(__name__)

_SEED_SPACE = 1 << 32

_HASH_FUNCTIONS: Dict[str, Callable[[Key, int], int]] = {
    "murmur3": murmurhash3_32,
    "fnv1a": fnv1a_32,
}

_FAMILIES = {name: _HASH_FUNCTIONS[name] for name in HASH_FAMILIES}


def _check_int(value: object, name: str) -> int:
    # bool is an int subclass but never a meaningful count or seed
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfigurationError(
            f"{name} must be an integer, got {value.__class__.__name__}"
        )
    return value


class HashFunctionSet:
    """
    A fixed, ordered collection of independently seeded 32-bit hash functions.

    Function ``i`` uses seed ``(base_seed + i) mod 2**32``, so the seeds within
    one set are always distinct and a set can be rebuilt exactly from its
    ``count``, ``base_seed`` and ``family``.

    Example:
        hash_set = HashFunctionSet(5, base_seed=42)
        indices = hash_set.derive_indices("alpha", 800)  # five values in [0, 800)
    """

    def __init__(
        self,
        count: int,
        base_seed: int = DEFAULT_BASE_SEED,
        family: str = DEFAULT_HASH_FAMILY,
    ):
        """
        Initialize a new hash-function set.

        Args:
            count: Number of hash functions (k). Zero is allowed and yields a
                   set that derives no indices.
            base_seed: Seed of the first function; later functions add their index.
            family: Name of the hash family, one of config.HASH_FAMILIES.

        Raises:
            InvalidConfigurationError: If count is negative or not an integer,
                                       base_seed is not an integer, or family
                                       is unknown.
        """
        count = _check_int(count, "Hash function count")
        base_seed = _check_int(base_seed, "Base seed")

        if count < 0:
            raise InvalidConfigurationError("Hash function count cannot be negative")
        if count > _SEED_SPACE:
            raise InvalidConfigurationError(
                f"At most {_SEED_SPACE} distinct 32-bit seeds exist, got count={count}"
            )
        if family not in HASH_FAMILIES:
            raise InvalidConfigurationError(
                f"Unknown hash family {family!r}; choose one of {list(HASH_FAMILIES)}"
            )

        self._count = count
        self._base_seed = base_seed % _SEED_SPACE
        self._family = family
        self._hash_fn = _FAMILIES[family]
        self._seeds: Tuple[int, ...] = tuple(
            (self._base_seed + i) % _SEED_SPACE for i in range(count)
        )

        logger.debug(
            "Created %s hash-function set: count=%d base_seed=%#010x",
            family,
            count,
            self._base_seed,
        )

    @classmethod
    def with_random_seed(
        cls, count: int, family: str = DEFAULT_HASH_FAMILY
    ) -> "HashFunctionSet":
        """
        Create a set whose base seed is drawn from the operating system's CSPRNG.

        Args:
            count: Number of hash functions.
            family: Name of the hash family.

        Returns:
            A new HashFunctionSet with k distinct seeds.
        """
        return cls(count, base_seed=secrets.randbits(32), family=family)

    @property
    def count(self) -> int:
        """Number of hash functions in the set."""
        return self._count

    @property
    def base_seed(self) -> int:
        """Seed of function 0."""
        return self._base_seed

    @property
    def family(self) -> str:
        """Name of the hash family."""
        return self._family

    @property
    def seeds(self) -> Tuple[int, ...]:
        """Per-function seeds, in function order."""
        return self._seeds

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[int]:
        return iter(self._seeds)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(count={self._count}, "
            f"base_seed={self._base_seed:#010x}, family={self._family!r})"
        )

    def hash(self, index: int, key: Key) -> int:
        """
        Compute the digest of function ``index`` for ``key``.

        Args:
            index: Function index in [0, count).
            key: The key to hash.

        Returns:
            Unsigned 32-bit digest.

        Raises:
            IndexError: If index is outside [0, count).
        """
        if not 0 <= index < self._count:
            raise IndexError(
                f"Hash function index {index} out of range for {self._count} functions"
            )
        return self._hash_fn(key_to_bytes(key), self._seeds[index])

    def digests(self, key: Key) -> List[int]:
        """
        Compute all digests for ``key``, in function order.

        Args:
            key: The key to hash.

        Returns:
            List of ``count`` unsigned 32-bit digests.
        """
        key_bytes = key_to_bytes(key)
        return [self._hash_fn(key_bytes, seed) for seed in self._seeds]

    def derive_indices(self, key: Key, modulus: int) -> List[int]:
        """
        Map ``key`` to one index per function, each reduced into [0, modulus).

        Args:
            key: The key to hash.
            modulus: Size of the index range, normally a filter's bit count.

        Returns:
            List of ``count`` indices, in function order.

        Raises:
            InvalidConfigurationError: If modulus is not a positive integer.
        """
        modulus = _check_int(modulus, "Modulus")
        if modulus < 1:
            raise InvalidConfigurationError(
                f"Modulus must be at least 1 to derive indices, got {modulus}"
            )
        return [digest % modulus for digest in self.digests(key)]


def derive_indices(key: Key, modulus: int, hash_set: HashFunctionSet) -> List[int]:
    """
    Derive the bit indices of ``key`` for a filter of ``modulus`` bits.

    Convenience wrapper around HashFunctionSet.derive_indices().
    """
    return hash_set.derive_indices(key, modulus)
