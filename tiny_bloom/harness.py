"""
False positive trial harness for TinyBloom.

Fills a Bloom filter with random keys, probes it with fresh random keys and
reports how many of the probes that were never inserted came back positive.
The harness keeps its own ground-truth set; the filter itself cannot tell a
real member from a false positive.

Run from the command line:

    tiny-bloom-trial --size 800000 --hashes 5

Size and hash count are prompted for when not given as flags.
"""

import argparse
import logging
import random
import secrets
from typing import Any, Callable, Dict, List, Optional, Set

from tiny_bloom.algorithms.bloom.base import BloomFilter, theoretical_false_positive_rate
from tiny_bloom.algorithms.bloom.hash_set import HashFunctionSet
from tiny_bloom.config import (
    DEFAULT_BASE_SEED,
    DEFAULT_KEY_COUNT,
    DEFAULT_KEY_LENGTH,
    KEY_CHARSET,
)
from tiny_bloom.core.exceptions import InvalidConfigurationError

logger = logging.getLogger(__name__)


def generate_random_key(
    length: int = DEFAULT_KEY_LENGTH, rng: Optional[random.Random] = None
) -> str:
    """
    Generate a random alphanumeric key.

    Args:
        length: Number of characters.
        rng: Random generator for reproducible keys. Defaults to the
             operating system's CSPRNG via the secrets module.

    Returns:
        A string of ``length`` characters from KEY_CHARSET.
    """
    choose = rng.choice if rng is not None else secrets.choice
    return "".join(choose(KEY_CHARSET) for _ in range(length))


def run_trial(
    filter_size: int,
    hash_count: int,
    key_count: int = DEFAULT_KEY_COUNT,
    key_length: int = DEFAULT_KEY_LENGTH,
    base_seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> Dict[str, Any]:
    """
    Insert ``key_count`` random keys, then probe with ``key_count`` fresh ones.

    Args:
        filter_size: Number of bits in the filter.
        hash_count: Number of hash functions.
        key_count: Number of keys to insert and number of keys to probe.
        key_length: Length of every generated key.
        base_seed: Base seed for the hash functions. None draws one at random.
        rng: Random generator for the keys. None uses the secrets module.

    Returns:
        A dictionary with the trial parameters, the number of probes that were
        never inserted, the false positive count and the observed and
        theoretical false positive rates.

    Raises:
        InvalidConfigurationError: If the filter or hash set cannot be built.
    """
    if key_count < 0:
        raise InvalidConfigurationError("Key count cannot be negative")

    bloom = BloomFilter(filter_size)
    if base_seed is None:
        hash_set = HashFunctionSet.with_random_seed(hash_count)
    else:
        hash_set = HashFunctionSet(hash_count, base_seed=base_seed)

    logger.info(
        "Running trial: size=%d hashes=%d keys=%d", filter_size, hash_count, key_count
    )

    existing_keys: Set[str] = set()
    for _ in range(key_count):
        key = generate_random_key(key_length, rng)
        existing_keys.add(key)
        bloom.add(key, hash_set)

    non_existent_keys = 0
    false_positives = 0
    for _ in range(key_count):
        key = generate_random_key(key_length, rng)
        found = bloom.exists(key, hash_set)

        if key not in existing_keys:
            non_existent_keys += 1
            if found:
                false_positives += 1

    observed_fpr = false_positives / non_existent_keys if non_existent_keys else 0.0
    result = {
        "filter_size": filter_size,
        "hash_count": hash_count,
        "inserted_keys": key_count,
        "unique_inserted_keys": len(existing_keys),
        "queried_keys": key_count,
        "non_existent_keys": non_existent_keys,
        "false_positives": false_positives,
        "observed_fpr": observed_fpr,
        "theoretical_fpr": theoretical_false_positive_rate(
            filter_size, hash_count, len(existing_keys)
        ),
        "fill_ratio": bloom.fill_ratio(),
    }

    logger.debug("Trial result: %s", result)
    return result


def format_report(result: Dict[str, Any]) -> str:
    """
    Render a trial result as the plain-text statistics block.

    Args:
        result: Dictionary returned by run_trial().

    Returns:
        The report, without a trailing newline.
    """
    lines = [
        "Statistics:",
        f"FilterSize: {result['filter_size']}",
        f"HashFnsSize: {result['hash_count']}",
        (
            f"FalsePositives: {result['false_positives']} out of "
            f"{result['non_existent_keys']} non existing keys and "
            f"{result['inserted_keys']} existing keys."
        ),
        f"ObservedRate: {result['observed_fpr']:.6f}",
        f"TheoreticalRate: {result['theoretical_fpr']:.6f}",
    ]
    return "\n".join(lines)


def prompt_positive_int(prompt: str, input_fn: Callable[[str], str] = input) -> int:
    """
    Ask for a positive integer until one is given.

    Args:
        prompt: Text shown to the user.
        input_fn: Function used to read a line, for testing.

    Returns:
        The integer entered.
    """
    while True:
        answer = input_fn(prompt).strip()
        try:
            value = int(answer)
        except ValueError:
            print(f"'{answer}' is not a whole number, try again.")
            continue
        if value < 1:
            print("Please enter a number greater than zero.")
            continue
        return value


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {text!r}") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser for the trial harness."""
    parser = argparse.ArgumentParser(
        description="Measure the false positive rate of a TinyBloom filter"
    )
    parser.add_argument("--size", type=_positive_int, help="Number of bits in the filter")
    parser.add_argument("--hashes", type=_positive_int, help="Number of hash functions")
    parser.add_argument(
        "--keys",
        type=_positive_int,
        default=DEFAULT_KEY_COUNT,
        help=f"Keys to insert and to probe (default: {DEFAULT_KEY_COUNT})",
    )
    parser.add_argument(
        "--key-length",
        type=_positive_int,
        default=DEFAULT_KEY_LENGTH,
        help=f"Characters per random key (default: {DEFAULT_KEY_LENGTH})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help=(
            "Base seed for the hash functions and key generator; "
            f"random when omitted (library default: {DEFAULT_BASE_SEED:#x})"
        ),
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    return parser


def main(
    argv: Optional[List[str]] = None, input_fn: Callable[[str], str] = input
) -> int:
    """
    Command-line entry point.

    Args:
        argv: Arguments to parse instead of sys.argv.
        input_fn: Function used for interactive prompts.

    Returns:
        Process exit status.
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    filter_size = args.size or prompt_positive_int(
        "Enter size of the bloom filter: ", input_fn
    )
    hash_count = args.hashes or prompt_positive_int(
        "Enter the number of hash functions to be used: ", input_fn
    )

    rng = random.Random(args.seed) if args.seed is not None else None
    result = run_trial(
        filter_size,
        hash_count,
        key_count=args.keys,
        key_length=args.key_length,
        base_seed=args.seed,
        rng=rng,
    )

    print()
    print(format_report(result))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
