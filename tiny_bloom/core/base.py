"""
Base classes and interfaces for TinyBloom membership filters.

This module defines the abstract base class that membership filters implement
to provide a consistent interface across the library. It includes benchmarking
hooks for measuring and comparing performance characteristics.
"""

import abc
import sys
import time
from collections import deque
from typing import Any, Deque, Dict, Generic, Optional, TypeVar

K = TypeVar("K")  # Type for the keys being inserted
H = TypeVar("H")  # Type for the hashing strategy passed to each operation


class MembershipFilter(Generic[K, H], abc.ABC):
    """
    Abstract base class for approximate set-membership structures.

    Implementations receive their hashing strategy with every call instead of
    owning it, so storage and hashing can be configured independently. The base
    class keeps the insertion count and optional timing of recent insertions.
    """

    def __init__(self) -> None:
        """Initialize counters and performance tracking state."""
        self._items_processed = 0

        # Performance tracking attributes
        self._last_update_time: float = 0.0
        self._total_update_time: float = 0.0
        self._update_count: int = 0

        # Optional performance tracking buffer for recent updates
        self._track_recent_updates: bool = False
        self._recent_update_times: Optional[Deque[float]] = None
        self._max_update_history: int = 100

    @abc.abstractmethod
    def add(self, key: K, hasher: H) -> None:
        """
        Insert a key.

        Derived classes call ``super().add(key, hasher)`` to keep the
        insertion count current, then apply their own update.

        Args:
            key: The key to insert.
            hasher: The hashing strategy used to place the key.
        """
        self._items_processed += 1

    @abc.abstractmethod
    def exists(self, key: K, hasher: H) -> bool:
        """
        Test whether a key may have been inserted.

        Args:
            key: The key to test.
            hasher: The same hashing strategy used for insertion.

        Returns:
            False if the key was definitely never inserted, True if it possibly was.
        """
        pass

    def _record_update_time(self, started_at: float) -> None:
        """
        Record the duration of one update that began at ``started_at``.

        Args:
            started_at: Value of ``time.perf_counter()`` taken before the update.
        """
        if not self._track_recent_updates:
            return

        self._last_update_time = time.perf_counter() - started_at
        self._total_update_time += self._last_update_time
        self._update_count += 1

        if self._recent_update_times is not None:
            self._recent_update_times.append(self._last_update_time)

    def estimate_size(self) -> int:
        """
        Estimate the current memory usage of this filter in bytes.

        This is a rough estimate of the object and its instance dictionary.
        Derived classes should add the size of their own storage.

        Returns:
            Estimated memory usage in bytes.
        """
        size = sys.getsizeof(self)

        if hasattr(self, "__dict__"):
            size += sys.getsizeof(self.__dict__)

        if self._recent_update_times is not None:
            size += sys.getsizeof(self._recent_update_times)
            size += len(self._recent_update_times) * sys.getsizeof(0.0)

        return size

    def enable_performance_tracking(
        self, track_recent_updates: bool = True, max_history: int = 100
    ) -> None:
        """
        Enable detailed performance tracking for benchmarking.

        Performance tracking adds some overhead, so it should only be
        enabled when benchmarking or debugging performance issues.

        Args:
            track_recent_updates: Whether to track timing of recent updates.
            max_history: Maximum number of recent updates to track.
        """
        self._track_recent_updates = track_recent_updates
        self._max_update_history = max(1, max_history)

        if track_recent_updates:
            self._recent_update_times = deque(maxlen=self._max_update_history)

    def disable_performance_tracking(self) -> None:
        """Disable performance tracking to reduce overhead."""
        self._track_recent_updates = False
        self._recent_update_times = None

    def get_performance_stats(self) -> Dict[str, Any]:
        """
        Get performance statistics for this filter.

        Returns:
            A dictionary with the number of insertions, memory usage, and
            timing figures in nanoseconds when tracking is enabled.
        """
        stats: Dict[str, Any] = {
            "items_processed": self._items_processed,
            "memory_bytes": self.estimate_size(),
        }

        if self._update_count > 0:
            stats["avg_update_time_ns"] = (
                self._total_update_time / self._update_count
            ) * 1e9
            stats["last_update_time_ns"] = self._last_update_time * 1e9

        if self._recent_update_times:
            recent_times_ns = [t * 1e9 for t in self._recent_update_times]
            stats["recent_update_times_ns"] = recent_times_ns
            stats["min_update_time_ns"] = min(recent_times_ns)
            stats["max_update_time_ns"] = max(recent_times_ns)

        return stats

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the current state of the filter.

        Derived classes should override this method to include their specific
        statistics while calling super().get_stats() to include base metrics.

        Returns:
            A dictionary containing various statistics about the filter state.
        """
        stats: Dict[str, Any] = {
            "type": self.__class__.__name__,
            "items_processed": self._items_processed,
            "memory_bytes": self.estimate_size(),
        }

        if self._update_count > 0:
            stats["avg_update_time_ns"] = (
                self._total_update_time / self._update_count
            ) * 1e9

        return stats

    @property
    def items_processed(self) -> int:
        """Get the total number of add() calls made on this filter."""
        return self._items_processed
