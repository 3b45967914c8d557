"""
Mark-and-Sweep Collector for the GC emulator

Implements a full, non-moving tracing collection over a HeapStore:

- Mark: reset every mark bit, then trace depth-first from each root
- Sweep: reclaim every object left unmarked

Tracing uses an explicit work stack rather than recursion, so deep
reference chains cannot exhaust the interpreter's call stack.
"""

import time
from typing import Any, Dict, List, Tuple
from enum import Enum, auto
from dataclasses import dataclass

from .heap_store import HeapStore
from .object_model import HeapObject


class CollectionTrigger(Enum):
    """Reasons why a GC collection was triggered"""
    EXPLICIT_REQUEST = auto()       # Manual GC request
    ALLOCATION_PRESSURE = auto()    # Allocation did not fit


class GCPhase(Enum):
    """Collector state within a cycle"""
    IDLE = auto()
    MARKING = auto()
    SWEEPING = auto()


@dataclass(frozen=True)
class GCReport:
    """Outcome of a single collection cycle"""
    trigger: CollectionTrigger
    marked_ids: Tuple[int, ...]     # In marking order
    removed_ids: Tuple[int, ...]    # In allocation order
    removed_sizes: Tuple[int, ...]  # Parallel to removed_ids
    removed_bytes: int
    used_before: int
    used_after: int
    start_time: float
    end_time: float

    @property
    def marked_count(self) -> int:
        return len(self.marked_ids)

    @property
    def removed_count(self) -> int:
        return len(self.removed_ids)

    @property
    def pause_time_ms(self) -> float:
        return (self.end_time - self.start_time) * 1000

    def to_dict(self) -> Dict[str, Any]:
        return {
            'trigger': self.trigger.name,
            'marked_count': self.marked_count,
            'removed_count': self.removed_count,
            'removed_bytes': self.removed_bytes,
            'marked_ids': list(self.marked_ids),
            'removed_ids': list(self.removed_ids),
            'removed_sizes': list(self.removed_sizes),
            'used_before': self.used_before,
            'used_after': self.used_after,
            'pause_time_ms': self.pause_time_ms,
        }


class MarkSweepCollector:
    """
    Stop-the-world mark-and-sweep collector bound to one HeapStore.

    A cycle always runs to completion; callers never observe the heap in
    the MARKING or SWEEPING phase unless they inspect it from inside the
    cycle itself.
    """

    def __init__(self, heap: HeapStore):
        self.heap = heap
        self.phase = GCPhase.IDLE

    def collect(self, trigger: CollectionTrigger = CollectionTrigger.EXPLICIT_REQUEST) -> GCReport:
        """Run one full mark-and-sweep cycle"""
        if self.phase is not GCPhase.IDLE:
            raise RuntimeError(f"collection already in progress ({self.phase.name})")

        start_time = time.perf_counter()
        used_before = self.heap.used

        try:
            self.phase = GCPhase.MARKING
            marked_ids = self.mark()

            self.phase = GCPhase.SWEEPING
            removed = self.sweep()
        finally:
            self.phase = GCPhase.IDLE

        end_time = time.perf_counter()
        return GCReport(
            trigger=trigger,
            marked_ids=tuple(marked_ids),
            removed_ids=tuple(obj.object_id for obj in removed),
            removed_sizes=tuple(obj.size for obj in removed),
            removed_bytes=sum(obj.size for obj in removed),
            used_before=used_before,
            used_after=self.heap.used,
            start_time=start_time,
            end_time=end_time
        )

    def mark(self) -> List[int]:
        """
        Mark every object reachable from the root set.

        Returns the ids in the order they were marked. References are
        visited in insertion order, matching a recursive depth-first walk.
        """
        for obj in self.heap:
            obj.marked = False

        marked_order = []
        for root_id in self.heap.roots:
            work_stack = [root_id]

            while work_stack:
                obj = self.heap.get(work_stack.pop())

                # Reclaimed targets are inert; marked ones close cycles
                if obj is None or obj.marked:
                    continue

                obj.marked = True
                marked_order.append(obj.object_id)
                work_stack.extend(reversed(obj.references))

        return marked_order

    def sweep(self) -> List[HeapObject]:
        """Reclaim every unmarked object and return what was removed"""
        garbage = [obj for obj in self.heap if not obj.marked]

        for obj in garbage:
            self.heap.remove(obj.object_id)

        return garbage
