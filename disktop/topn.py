from __future__ import annotations
import heapq
from typing import List, Optional, Tuple
from .models import RankedItem

# (size, -arrival, item): among equal sizes the newest entry sits on top of the
# min-heap, so it is the one evicted and the earliest arrival survives.
_Entry = Tuple[int, int, RankedItem]

class TopNSelector:
    """Keeps the N largest items of an unordered stream in O(N) memory."""

    def __init__(self, capacity: int):
        if capacity < 0:
            raise ValueError(f"capacity must be >= 0, got {capacity}")
        self.capacity = capacity
        self._heap: List[_Entry] = []
        self._arrivals = 0

    def __len__(self) -> int:
        return len(self._heap)

    def smallest(self) -> Optional[int]:
        return self._heap[0][0] if self._heap else None

    def admit(self, item: RankedItem) -> bool:
        if self.capacity <= 0:
            return False
        self._arrivals += 1
        entry = (item.size, -self._arrivals, item)
        if len(self._heap) < self.capacity:
            heapq.heappush(self._heap, entry)
            return True
        if item.size > self._heap[0][0]:
            heapq.heapreplace(self._heap, entry)
            return True
        return False

    def drain_descending(self) -> List[RankedItem]:
        """Remove and return every retained item, largest first.

        Equal sizes are ordered by path so the output is deterministic.
        """
        items = [entry[2] for entry in self._heap]
        self._heap = []
        items.sort(key=lambda it: (-it.size, it.path))
        return items
