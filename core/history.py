"""Fixed-capacity ring buffer holding a client's most recent entries."""

from typing import Generic, List, TypeVar

T = TypeVar('T')

DEFAULT_CAPACITY = 10


class History(Generic[T]):
    """
    Ring buffer that overwrites its oldest slot once full.

    Eviction follows physical slot order, i.e. the entry inserted first is the
    one overwritten first, whatever its timestamp. Callers that need
    chronological order must sort the snapshot themselves.

    Not thread-safe on its own; the Registry serialises access.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        """
        Initialize an empty ring buffer.

        Args:
            capacity: Number of slots, at least 1

        Raises:
            ValueError: If capacity is smaller than 1
        """
        if capacity < 1:
            raise ValueError(f"History capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._slots: List[T] = []
        self._position = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def put(self, entry: T) -> None:
        """Write entry at the current ring position and advance it."""
        if len(self._slots) < self._capacity:
            self._slots.append(entry)
        else:
            self._slots[self._position] = entry
        self._position = (self._position + 1) % self._capacity

    def snapshot(self) -> List[T]:
        """Return a copy of the occupied slots in ring order."""
        return list(self._slots)

    def __len__(self) -> int:
        return len(self._slots)

    def __repr__(self) -> str:
        return f"History(capacity={self._capacity!r}, size={len(self._slots)!r})"
