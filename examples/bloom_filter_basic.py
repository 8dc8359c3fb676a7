"""
Basic Bloom Filter Demo for TinyBloom.

This example demonstrates how to use the standard Bloom Filter
for space-efficient set membership testing. It highlights its probabilistic
nature (false positives) and its guarantee of no false negatives.
"""

import random

from tiny_bloom import BloomFilter, HashFunctionSet, InvalidConfigurationError
from tiny_bloom.algorithms.bloom import theoretical_false_positive_rate
from tiny_bloom.harness import format_report, generate_random_key, run_trial


def demonstrate_basic_usage():
    """Demonstrate filter construction, adding, and checking."""
    print("\n=== Basic Bloom Filter Demo ===")

    hash_set = HashFunctionSet(5, base_seed=42)
    bf = BloomFilter(800)

    print("Bloom Filter parameters:")
    print(f"  Filter size: {bf.size:,} bits ({bf.num_bytes} bytes)")
    print(f"  Hash functions: {len(hash_set)} (seeds {list(hash_set.seeds)})")
    print(f"  Estimated memory usage: {bf.estimate_size():,} bytes")

    items_to_add = ["alpha", "beta", "gamma"]
    print("\nAdding items to the filter...")
    for item in items_to_add:
        bf.add(item, hash_set)
        print(f"  Added '{item}' at bits {hash_set.derive_indices(item, bf.size)}")

    print("\nRaw filter bytes:")
    bf.print_filter()

    print("\nChecking membership:")
    print("  (Note: 'False' means DEFINITELY NOT present)")
    print("  (Note: 'True' means POSSIBLY present - could be a false positive)")
    for item in items_to_add + ["delta", "epsilon", "zeta"]:
        print(f"  '{item}' in filter? {bf.exists(item, hash_set)}")


def demonstrate_fpp_growth():
    """Show how the false positive rate grows as the filter fills."""
    print("\n=== False Positive Rate vs. Load Demo ===")

    hash_set = HashFunctionSet(5, base_seed=123)
    bf = BloomFilter(10_000)
    rng = random.Random(123)

    inserted = set()
    for step in (100, 500, 1000, 2000, 4000):
        while len(inserted) < step:
            key = generate_random_key(rng=rng)
            inserted.add(key)
            bf.add(key, hash_set)

        probes = [generate_random_key(rng=rng) for _ in range(5000)]
        probes = [key for key in probes if key not in inserted]
        false_positives = sum(1 for key in probes if bf.exists(key, hash_set))

        print(f"\nAfter adding {step} items:")
        print(f"  Fill ratio: {bf.fill_ratio():.2%}")
        print(f"  Observed FPR: {false_positives / len(probes):.4f}")
        print(
            "  Theoretical FPR: "
            f"{theoretical_false_positive_rate(bf.size, len(hash_set), step):.4f}"
        )
        print(f"  Estimated cardinality: {bf.estimate_cardinality(hash_set)}")


def demonstrate_sizing():
    """Size a filter from a capacity and target error rate."""
    print("\n=== Sizing For Capacity Demo ===")

    bf, hash_set = BloomFilter.create_for_capacity(10_000, 0.01, base_seed=7)
    print(f"  10,000 items at 1% FPR -> {bf.size:,} bits, {len(hash_set)} hash functions")

    try:
        BloomFilter(0)
    except InvalidConfigurationError as e:
        print(f"  Zero-size filter rejected: {e}")


def demonstrate_trial():
    """Run the same false positive trial as the command-line harness."""
    print("\n=== False Positive Trial ===")
    result = run_trial(100_000, 5, key_count=10_000, base_seed=1, rng=random.Random(1))
    print(format_report(result))


if __name__ == "__main__":
    demonstrate_basic_usage()
    demonstrate_fpp_growth()
    demonstrate_sizing()
    demonstrate_trial()
