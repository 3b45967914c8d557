"""
Object Model for the GC emulator

Defines the heap object record and the immutable snapshots handed out
to drivers. Objects never hold pointers to each other: references are
plain integer ids resolved through the heap at traversal time.
"""

from typing import Any, Dict, List, Tuple
from dataclasses import dataclass, field


@dataclass
class HeapObject:
    """
    A single object living in the emulated heap.

    ``references`` keeps insertion order and may contain duplicates,
    self-references, or ids of objects that have since been reclaimed.
    ``marked`` is only meaningful while a collection cycle is running.
    """
    object_id: int
    size: int
    references: List[int] = field(default_factory=list)
    marked: bool = False

    def add_reference(self, target_id: int):
        """Append an outgoing edge to another object"""
        self.references.append(target_id)

    def snapshot(self, is_root: bool) -> 'ObjectSnapshot':
        return ObjectSnapshot(
            object_id=self.object_id,
            size=self.size,
            references=tuple(self.references),
            is_root=is_root
        )


@dataclass(frozen=True)
class ObjectSnapshot:
    """Read-only view of one live object"""
    object_id: int
    size: int
    references: Tuple[int, ...]
    is_root: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.object_id,
            'size': self.size,
            'references': list(self.references),
            'root': self.is_root,
        }


@dataclass(frozen=True)
class HeapSnapshot:
    """
    Point-in-time view of the whole heap.

    Objects are listed in allocation order, roots in ascending id order.
    """
    used: int
    capacity: int
    objects: Tuple[ObjectSnapshot, ...]
    roots: Tuple[int, ...]

    @property
    def object_count(self) -> int:
        return len(self.objects)

    @property
    def root_count(self) -> int:
        return len(self.roots)

    @property
    def free(self) -> int:
        return self.capacity - self.used

    @property
    def utilization(self) -> float:
        """Percentage of capacity currently in use (0.0 to 100.0)"""
        return self.used / self.capacity * 100.0 if self.capacity > 0 else 0.0

    def get(self, object_id: int) -> ObjectSnapshot:
        for obj in self.objects:
            if obj.object_id == object_id:
                return obj
        raise KeyError(object_id)

    def object_ids(self) -> List[int]:
        return [obj.object_id for obj in self.objects]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'used': self.used,
            'capacity': self.capacity,
            'object_count': self.object_count,
            'root_count': self.root_count,
            'utilization': round(self.utilization, 1),
            'objects': [obj.to_dict() for obj in self.objects],
            'roots': list(self.roots),
        }
