#!/usr/bin/env python3
"""
ess_queue.py - Priority Queue for Subwindow Search
==================================================
Max-heap of search states keyed on their cached upper bound.
"""

import heapq
from typing import List, Tuple

from ess_state import SearchState


class StateQueue:
    """
    Best-first frontier. States with equal bounds come out in the order they
    were pushed, so repeated searches visit states identically.
    """

    def __init__(self):
        self._heap: List[Tuple[float, int, SearchState]] = []  # min-heap on -upper
        self._counter = 0  # For tie-breaking
        self.peak_size = 0

    def push(self, state: SearchState):
        """Add a state; the queue owns it until popped."""
        heapq.heappush(self._heap, (-state.upper, self._counter, state))
        self._counter += 1
        if len(self._heap) > self.peak_size:
            self.peak_size = len(self._heap)

    def pop(self) -> SearchState:
        """Remove and return the state with the greatest upper bound."""
        if not self._heap:
            raise IndexError("pop from empty state queue")
        _, _, state = heapq.heappop(self._heap)
        return state

    def peek(self) -> SearchState:
        """Return the best state without removing it."""
        if not self._heap:
            raise IndexError("peek into empty state queue")
        return self._heap[0][2]

    def is_empty(self) -> bool:
        """Check if queue is empty."""
        return not self._heap

    def __len__(self) -> int:
        return len(self._heap)
