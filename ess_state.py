#!/usr/bin/env python3
"""
ess_state.py - Subwindow Search State Space
===========================================
Compact representation of a *set* of rectangles for branch & bound.
A state holds one closed integer interval per rectangle coordinate
(left, top, right, bottom) and the cached upper bound of its best member.
"""

import sys
from dataclasses import dataclass
from typing import Optional, Tuple

from config import Config

LEFT, TOP, RIGHT, BOTTOM = range(4)
COORDINATE_NAMES = ('left', 'top', 'right', 'bottom')

# Upper bound of a state that has not been evaluated yet
UNBOUNDED = sys.float_info.max

Interval4 = Tuple[int, int, int, int]
Rect = Tuple[int, int, int, int]


@dataclass(frozen=True)
class SearchState:
    """
    Set of rectangles with left in [low[0], high[0]], top in [low[1], high[1]],
    right in [low[2], high[2]] and bottom in [low[3], high[3]].

    Instances are immutable fixed-size values: millions of them can sit in the
    queue at once, so no per-instance dict is kept.
    """
    __slots__ = ('low', 'high', 'upper')

    low: Interval4
    high: Interval4
    upper: float

    def __post_init__(self):
        if len(self.low) != 4 or len(self.high) != 4:
            raise ValueError("State needs exactly four coordinate intervals")
        max_value = Config.COORDINATES['max_value']
        for lo, hi in zip(self.low, self.high):
            if lo > hi:
                raise ValueError(f"Empty interval [{lo}, {hi}] in state")
            if lo < 0 or hi > max_value:
                raise ValueError(f"Interval [{lo}, {hi}] outside coordinate range")

    @classmethod
    def full_space(cls, width: int, height: int, qbits: int = 0) -> 'SearchState':
        """
        State containing every rectangle of a width x height image.
        Upper coordinates are rounded down to a multiple of 2**qbits.
        """
        last_x = ((width - 1) >> qbits) << qbits
        last_y = ((height - 1) >> qbits) << qbits
        return cls(low=(0, 0, 0, 0),
                   high=(last_x, last_y, last_x, last_y),
                   upper=UNBOUNDED)

    def split_axis(self, qbits: int = 0) -> Optional[int]:
        """
        Index of the coordinate with the widest interval, measured to the
        precision of 2**qbits. Ties keep the lowest index.
        Returns None once every interval has collapsed.
        """
        split_index = None
        max_width = 0
        for i in range(4):
            interval_width = (self.high[i] >> qbits) - (self.low[i] >> qbits)
            if interval_width > max_width:
                split_index = i
                max_width = interval_width
        return split_index

    def is_legal(self) -> bool:
        """Check that at least one member has left <= right and top <= bottom."""
        return self.low[LEFT] <= self.high[RIGHT] and self.low[TOP] <= self.high[BOTTOM]

    def is_singleton(self) -> bool:
        """Check if the state denotes exactly one rectangle."""
        return self.low == self.high

    def split(self, axis: int) -> Tuple['SearchState', 'SearchState']:
        """
        Bisect one coordinate interval at its midpoint.
        Children inherit this state's upper bound until re-evaluated.
        """
        lo, hi = self.low[axis], self.high[axis]
        if lo == hi:
            raise ValueError(f"Cannot split collapsed {COORDINATE_NAMES[axis]} interval")
        mid = (lo + hi) // 2

        first_high = self.high[:axis] + (mid,) + self.high[axis + 1:]
        second_low = self.low[:axis] + (mid + 1,) + self.low[axis + 1:]
        return (self._derive(self.low, first_high, self.upper),
                self._derive(second_low, self.high, self.upper))

    def with_upper(self, upper: float) -> 'SearchState':
        """Copy of this state with a new cached upper bound."""
        return self._derive(self.low, self.high, upper)

    @staticmethod
    def _derive(low: Interval4, high: Interval4, upper: float) -> 'SearchState':
        """Build a sub-state of a validated state without re-checking its intervals."""
        state = object.__new__(SearchState)
        object.__setattr__(state, 'low', low)
        object.__setattr__(state, 'high', high)
        object.__setattr__(state, 'upper', upper)
        return state

    def ranks_below(self, other: 'SearchState') -> bool:
        """Queue ordering: compares upper bounds only."""
        return self.upper < other.upper

    def union_box(self) -> Rect:
        """Largest member rectangle (left, top, right, bottom)."""
        return (self.low[LEFT], self.low[TOP], self.high[RIGHT], self.high[BOTTOM])

    def intersection_box(self) -> Optional[Rect]:
        """Rectangle contained in every member, or None if members share no pixel."""
        left, top = self.high[LEFT], self.high[TOP]
        right, bottom = self.low[RIGHT], self.low[BOTTOM]
        if left > right or top > bottom:
            return None
        return (left, top, right, bottom)

    def describe(self) -> str:
        """One-line dump of the intervals."""
        return "low < {} {} {} {} > high < {} {} {} {} >".format(*self.low, *self.high)
