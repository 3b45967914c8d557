"""
Core Garbage Collector for the GC emulator

Main interface tying together the heap store, the mark-and-sweep
collector and the allocation policy that decides when a collection is
triggered automatically.
"""

import threading
from typing import Callable, List, Optional
from enum import Enum, auto
from dataclasses import dataclass
from collections import deque

from .object_model import HeapObject, HeapSnapshot
from .heap_store import HeapStore, validate_size
from .collector import CollectionTrigger, GCReport, MarkSweepCollector
from .errors import ConfigurationError, OutOfMemoryError


class GCMode(Enum):
    """Garbage collection modes"""
    AUTOMATIC = auto()      # Collect once when an allocation does not fit
    MANUAL = auto()         # Explicit collection only


@dataclass
class GCConfiguration:
    """Configuration parameters for the garbage collector"""

    capacity: int = 1000
    mode: GCMode = GCMode.AUTOMATIC

    # Number of recent collection reports kept in memory
    history_size: int = 100

    # Check heap invariants after every mutation
    debug_mode: bool = False

    def __post_init__(self):
        if isinstance(self.capacity, bool) or not isinstance(self.capacity, int) or self.capacity <= 0:
            raise ConfigurationError(f"capacity must be a positive integer, got {self.capacity!r}")
        if not isinstance(self.mode, GCMode):
            raise ConfigurationError(f"mode must be a GCMode, got {self.mode!r}")
        if (isinstance(self.history_size, bool) or not isinstance(self.history_size, int)
                or self.history_size <= 0):
            raise ConfigurationError(f"history_size must be a positive integer, got {self.history_size!r}")


@dataclass
class GCStats:
    """Cumulative allocation and collection statistics"""

    # Collection statistics
    total_collections: int = 0
    automatic_collections: int = 0
    total_pause_time_ms: float = 0.0
    max_pause_time_ms: float = 0.0

    # Allocation statistics
    objects_allocated: int = 0
    bytes_allocated: int = 0
    failed_allocations: int = 0

    # Reclamation statistics
    objects_collected: int = 0
    bytes_collected: int = 0

    @property
    def average_pause_time_ms(self) -> float:
        return self.total_pause_time_ms / max(self.total_collections, 1)


class MemoryManager:
    """
    Emulated heap with a mark-and-sweep garbage collector.

    Every public operation runs under one re-entrant lock, so a cycle
    triggered by an allocation is never interleaved with another caller.
    """

    def __init__(self, config: Optional[GCConfiguration] = None, capacity: Optional[int] = None):
        if config is None:
            config = GCConfiguration() if capacity is None else GCConfiguration(capacity=capacity)
        elif capacity is not None:
            raise ConfigurationError("pass either config or capacity, not both")
        self.config = config

        self.heap = HeapStore(self.config.capacity)
        self.collector = MarkSweepCollector(self.heap)

        self.stats = GCStats()
        self._collection_history: deque = deque(maxlen=self.config.history_size)
        self._listeners: List[Callable[[GCReport], None]] = []

        self._gc_lock = threading.RLock()

    @property
    def capacity(self) -> int:
        return self.heap.capacity

    @property
    def used(self) -> int:
        return self.heap.used

    @property
    def collection_history(self) -> List[GCReport]:
        with self._gc_lock:
            return list(self._collection_history)

    def add_collection_listener(self, callback: Callable[[GCReport], None]):
        """Register a callback invoked with the report of every collection"""
        with self._gc_lock:
            self._listeners.append(callback)

    def remove_collection_listener(self, callback: Callable[[GCReport], None]):
        with self._gc_lock:
            self._listeners.remove(callback)

    def allocate(self, size: int, as_root: bool = False) -> HeapObject:
        """
        Allocate a new object of ``size`` bytes.

        If the object does not fit, one collection cycle runs first (in
        AUTOMATIC mode). Raises OutOfMemoryError if it still does not fit.
        """
        validate_size(size)

        with self._gc_lock:
            report = None
            if not self.heap.fits(size) and self.config.mode == GCMode.AUTOMATIC:
                report = self._collect(CollectionTrigger.ALLOCATION_PRESSURE)

            if not self.heap.fits(size):
                self.stats.failed_allocations += 1
                raise OutOfMemoryError(size, self.heap.used, self.heap.capacity, collection=report)

            obj = self.heap.allocate(size, as_root)

            self.stats.objects_allocated += 1
            self.stats.bytes_allocated += size
            self._verify()
            return obj

    def add_reference(self, from_id: int, to_id: int) -> bool:
        """Add an edge from_id -> to_id; False if either object is missing"""
        with self._gc_lock:
            added = self.heap.add_reference(from_id, to_id)
            self._verify()
            return added

    def add_root(self, object_id: int) -> bool:
        """Add an existing object to the root set"""
        with self._gc_lock:
            added = self.heap.add_root(object_id)
            self._verify()
            return added

    def remove_root(self, object_id: int) -> bool:
        """Remove an object from the root set"""
        with self._gc_lock:
            removed = self.heap.remove_root(object_id)
            self._verify()
            return removed

    def garbage_collect(self) -> GCReport:
        """Run an explicit mark-and-sweep cycle"""
        with self._gc_lock:
            return self._collect(CollectionTrigger.EXPLICIT_REQUEST)

    def query_status(self) -> HeapSnapshot:
        with self._gc_lock:
            return self.heap.snapshot()

    def get_object(self, object_id: int) -> Optional[HeapObject]:
        with self._gc_lock:
            return self.heap.get(object_id)

    def get_statistics(self) -> GCStats:
        with self._gc_lock:
            return GCStats(**self.stats.__dict__)

    def _collect(self, trigger: CollectionTrigger) -> GCReport:
        report = self.collector.collect(trigger)

        self._collection_history.append(report)
        self._update_collection_stats(report)
        self._verify()

        for listener in list(self._listeners):
            listener(report)

        return report

    def _update_collection_stats(self, report: GCReport):
        self.stats.total_collections += 1
        if report.trigger == CollectionTrigger.ALLOCATION_PRESSURE:
            self.stats.automatic_collections += 1

        self.stats.objects_collected += report.removed_count
        self.stats.bytes_collected += report.removed_bytes

        self.stats.total_pause_time_ms += report.pause_time_ms
        self.stats.max_pause_time_ms = max(self.stats.max_pause_time_ms, report.pause_time_ms)

    def _verify(self):
        if self.config.debug_mode:
            self.heap.check_invariants()
