"""
Error handling for the GC emulator.

Only allocation failures and caller defects are raised as exceptions.
Missing objects in reference/root operations are reported through
boolean results instead.

Author: xwest
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .collector import GCReport


class HeapError(Exception):
    """Base class for all errors raised by the emulated heap."""

    def __init__(self, message: str, help_text: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.help_text = help_text

    def __str__(self) -> str:
        result = self.message
        if self.help_text:
            result += f"\n  help: {self.help_text}"
        return result


class OutOfMemoryError(HeapError):
    """
    Raised when an allocation cannot be satisfied even after a collection.

    The heap is left exactly as it was after the (optional) collection
    cycle: no object is created and no id is consumed.
    """

    def __init__(
        self,
        requested: int,
        used: int,
        capacity: int,
        collection: Optional['GCReport'] = None
    ):
        self.requested = requested
        self.used = used
        self.capacity = capacity
        self.collection = collection

        message = (
            f"cannot allocate {requested} bytes: {used} / {capacity} bytes in use"
        )
        if collection is not None:
            help_text = (
                f"garbage collection reclaimed {collection.removed_bytes} bytes, "
                f"which was not enough; remove roots and retry"
            )
        else:
            help_text = "automatic collection is disabled; run garbage_collect() first"
        super().__init__(message, help_text)

    @property
    def available(self) -> int:
        return self.capacity - self.used


class InvalidSizeError(HeapError, ValueError):
    """Raised for a non-integer or non-positive allocation size."""

    def __init__(self, size):
        self.size = size
        super().__init__(
            f"invalid allocation size: {size!r}",
            "object size must be a positive integer number of bytes"
        )


class ConfigurationError(HeapError, ValueError):
    """Raised when a GCConfiguration holds invalid values."""
    pass
