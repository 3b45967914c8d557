"""
Heap Store for the GC emulator

Owns the live objects, the root set and capacity accounting. The store
knows nothing about collection policy: it refuses allocations that do
not fit and leaves it to the caller to decide whether to collect first.
"""

from typing import Dict, Iterator, List, Optional, Set

from .object_model import HeapObject, HeapSnapshot
from .errors import ConfigurationError, InvalidSizeError, OutOfMemoryError


class HeapStore:
    """
    Arena-style store of heap objects keyed by stable integer ids.

    Ids come from a counter that is never decremented, so an id is
    never reused after its object has been reclaimed.
    """

    def __init__(self, capacity: int):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise ConfigurationError(f"heap capacity must be a positive integer, got {capacity!r}")

        self.capacity = capacity
        self.used = 0
        self.next_id = 0

        self._objects: Dict[int, HeapObject] = {}
        self._roots: Set[int] = set()

    def __len__(self) -> int:
        return len(self._objects)

    def __contains__(self, object_id: int) -> bool:
        return object_id in self._objects

    def __iter__(self) -> Iterator[HeapObject]:
        return iter(list(self._objects.values()))

    @property
    def free(self) -> int:
        return self.capacity - self.used

    @property
    def roots(self) -> List[int]:
        """Root ids in ascending order"""
        return sorted(self._roots)

    def fits(self, size: int) -> bool:
        return self.used + size <= self.capacity

    def is_root(self, object_id: int) -> bool:
        return object_id in self._roots

    def get(self, object_id: int) -> Optional[HeapObject]:
        return self._objects.get(object_id)

    def allocate(self, size: int, as_root: bool = False) -> HeapObject:
        """
        Create a new object of ``size`` bytes.

        Raises OutOfMemoryError without touching any state when the
        object does not fit in the remaining capacity.
        """
        validate_size(size)
        if not self.fits(size):
            raise OutOfMemoryError(size, self.used, self.capacity)

        obj = HeapObject(object_id=self.next_id, size=size)
        self.next_id += 1

        self._objects[obj.object_id] = obj
        self.used += size

        if as_root:
            self._roots.add(obj.object_id)

        return obj

    def add_reference(self, from_id: int, to_id: int) -> bool:
        """Record an edge from_id -> to_id; False if either object is missing"""
        source = self._objects.get(from_id)
        if source is None or to_id not in self._objects:
            return False

        source.add_reference(to_id)
        return True

    def add_root(self, object_id: int) -> bool:
        if object_id not in self._objects:
            return False
        self._roots.add(object_id)
        return True

    def remove_root(self, object_id: int) -> bool:
        """Drop an id from the root set; returns whether it was a root"""
        if object_id in self._roots:
            self._roots.remove(object_id)
            return True
        return False

    def remove(self, object_id: int) -> HeapObject:
        """Reclaim an object, releasing its bytes and any root membership"""
        obj = self._objects.pop(object_id)
        self.used -= obj.size
        self._roots.discard(object_id)
        return obj

    def snapshot(self) -> HeapSnapshot:
        return HeapSnapshot(
            used=self.used,
            capacity=self.capacity,
            objects=tuple(obj.snapshot(obj.object_id in self._roots)
                          for obj in self._objects.values()),
            roots=tuple(self.roots)
        )

    def check_invariants(self):
        """Assert capacity accounting and root-set consistency"""
        total = sum(obj.size for obj in self._objects.values())
        assert self.used == total, f"used={self.used} but live objects hold {total} bytes"
        assert 0 <= self.used <= self.capacity, f"used={self.used} outside [0, {self.capacity}]"

        dangling = self._roots - self._objects.keys()
        assert not dangling, f"root set references missing objects: {sorted(dangling)}"

        assert all(object_id < self.next_id for object_id in self._objects), \
            "object id issued beyond the allocation counter"


def validate_size(size):
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise InvalidSizeError(size)
