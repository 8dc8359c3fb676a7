"""
Unit tests for hashing functions.
"""

import unittest
from collections import Counter

from tiny_bloom.core.hash import fnv1a_32, key_to_bytes, murmurhash3_32


class TestKeyToBytes(unittest.TestCase):
    """Test cases for key normalisation."""

    def test_str_is_utf8_encoded(self):
        self.assertEqual(key_to_bytes("abc"), b"abc")
        self.assertEqual(key_to_bytes("é"), b"\xc3\xa9")

    def test_bytes_like_accepted(self):
        self.assertEqual(key_to_bytes(b"\x00\xff"), b"\x00\xff")
        self.assertEqual(key_to_bytes(bytearray(b"xy")), b"xy")
        self.assertEqual(key_to_bytes(memoryview(b"xy")), b"xy")
        self.assertIsInstance(key_to_bytes(bytearray(b"xy")), bytes)

    def test_other_types_rejected(self):
        for bad in (123, 3.14, (1, 2), None, ["a"]):
            with self.assertRaises(TypeError):
                key_to_bytes(bad)

    def test_str_and_bytes_hash_identically(self):
        self.assertEqual(murmurhash3_32("alpha", 7), murmurhash3_32(b"alpha", 7))
        self.assertEqual(fnv1a_32("alpha", 7), fnv1a_32(b"alpha", 7))


class TestHashFunctions(unittest.TestCase):
    """Test cases for hash functions in tiny_bloom.core.hash."""

    def test_murmurhash3_known_values(self):
        """Test MurmurHash3 against published reference values."""
        test_cases = [
            (b"", 0, 0x00000000),
            (b"", 1, 0x514E28B7),
            ("test", 0, 0xBA6BD213),
            ("hello world", 0, 0x5E928F0F),
            ("Hello, world!", 1234, 0xFAF6CDB3),
            ("The quick brown fox jumps over the lazy dog", 0x9747B28C, 0x2FA826CD),
        ]

        for input_value, seed, expected in test_cases:
            hash_value = murmurhash3_32(input_value, seed)
            self.assertEqual(
                hash_value,
                expected,
                f"MurmurHash3 of {input_value!r} with seed {seed} should be "
                f"{expected:08x}, got {hash_value:08x}",
            )

    def test_fnv1a_known_values(self):
        """Test FNV-1a against published reference values (seed 0)."""
        test_cases = [
            (b"", 0x811C9DC5),
            ("a", 0xE40C292C),
            ("foobar", 0xBF9CF968),
        ]

        for input_value, expected in test_cases:
            self.assertEqual(fnv1a_32(input_value), expected)

    def test_reproducibility(self):
        """Both functions give the same digest for the same key and seed."""
        for input_value in ["hello world", "python", "", "a" * 100, b"\x00\x01"]:
            for seed in (0, 1, 0xFFFFFFFF):
                self.assertEqual(
                    murmurhash3_32(input_value, seed), murmurhash3_32(input_value, seed)
                )
                self.assertEqual(fnv1a_32(input_value, seed), fnv1a_32(input_value, seed))

    def test_murmurhash3_different_inputs(self):
        """Test that MurmurHash3 produces different hashes for different inputs."""
        inputs = ["hello", "Hello", "hello ", "world", "abc", "acb"]
        hashes = [murmurhash3_32(x) for x in inputs]
        self.assertEqual(len(set(hashes)), len(inputs))

    def test_murmurhash3_seed(self):
        """Test that MurmurHash3 produces different outputs with different seeds."""
        hashes = {murmurhash3_32("test seed", seed) for seed in range(10)}
        self.assertEqual(len(hashes), 10)

    def test_fnv1a_seed(self):
        """Test that FNV-1a produces different outputs with different seeds."""
        hashes = {fnv1a_32("test seed", seed) for seed in range(10)}
        self.assertEqual(len(hashes), 10)

    def test_seed_reduced_to_32_bits(self):
        self.assertEqual(
            murmurhash3_32("key", 5), murmurhash3_32("key", (1 << 32) + 5)
        )
        self.assertEqual(fnv1a_32("key", 5), fnv1a_32("key", (1 << 32) + 5))

    def test_range(self):
        """Test that both functions produce unsigned 32-bit values."""
        for input_value in ["test", "", "a" * 1000, b"\xff" * 7]:
            for hash_fn in (murmurhash3_32, fnv1a_32):
                hash_value = hash_fn(input_value, 0xDEADBEEF)
                self.assertIsInstance(hash_value, int)
                self.assertGreaterEqual(hash_value, 0)
                self.assertLessEqual(hash_value, 0xFFFFFFFF)

    def test_murmurhash3_distribution(self):
        """Test that MurmurHash3 spreads keys evenly across buckets."""
        num_buckets = 10
        num_items = 10000
        buckets = Counter(
            murmurhash3_32(str(i)) % num_buckets for i in range(num_items)
        )

        expected = num_items / num_buckets
        for bucket in range(num_buckets):
            self.assertGreaterEqual(buckets[bucket], expected * 0.8)
            self.assertLessEqual(buckets[bucket], expected * 1.2)

    def test_murmurhash3_avalanche(self):
        """Small changes in input should flip many output bits."""
        base_hash = murmurhash3_32("test_avalanche")
        mod_hash = murmurhash3_32("test_avalanchf")

        diff_bits = bin(base_hash ^ mod_hash).count("1")
        self.assertGreaterEqual(
            diff_bits,
            8,
            f"MurmurHash3 changed only {diff_bits} bits with small input change",
        )

    def test_different_hash_functions(self):
        """Test that the two hash functions produce different outputs."""
        for input_value in ["test", "alpha", b"\x01\x02\x03"]:
            self.assertNotEqual(murmurhash3_32(input_value), fnv1a_32(input_value))


if __name__ == "__main__":
    unittest.main()
