"""
GC Emulator

A simulated heap with a mark-and-sweep garbage collector: fixed
capacity, a mutable reference graph between objects, a root set, and
collection cycles triggered explicitly or by allocation pressure.

Architecture:
    gcemulator/
    ├── object_model.py  # Heap objects and snapshots
    ├── heap_store.py    # Objects, roots and capacity accounting
    ├── collector.py     # Mark and sweep phases
    ├── gc_core.py       # Allocation policy and public interface
    └── cli.py           # Console demo and interactive mode

Author: xwest
License: MIT
"""

__version__ = "0.1.0"
__author__ = "xwest"
__license__ = "MIT"

from .object_model import HeapObject, ObjectSnapshot, HeapSnapshot
from .heap_store import HeapStore
from .collector import MarkSweepCollector, GCReport, GCPhase, CollectionTrigger
from .gc_core import MemoryManager, GCConfiguration, GCMode, GCStats
from .errors import HeapError, OutOfMemoryError, InvalidSizeError, ConfigurationError

__all__ = [
    # Core classes
    "MemoryManager", "GCConfiguration", "GCMode", "GCStats",

    # Heap and collector
    "HeapStore", "MarkSweepCollector", "GCReport", "GCPhase", "CollectionTrigger",

    # Object model
    "HeapObject", "ObjectSnapshot", "HeapSnapshot",

    # Errors
    "HeapError", "OutOfMemoryError", "InvalidSizeError", "ConfigurationError",

    # Version info
    "__version__",
    "__author__",
    "__license__",
]
