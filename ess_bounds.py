#!/usr/bin/env python3
"""
ess_bounds.py - Bounding Functions for Subwindow Search
=======================================================
Upper bounds on rectangle quality over a whole state.

Every evaluator must be admissible (never below the best member's quality)
and monotone (a child state never bounds higher than its parent). The search
returns a globally optimal box only when both hold.
"""

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from ess_state import SearchState, Rect
from utils import InvalidInputError


class BoundEvaluator(ABC):
    """Abstract base class for state bounding functions."""

    @abstractmethod
    def upper_bound(self, state: SearchState) -> float:
        """Upper bound on quality over all rectangles in the state."""
        pass

    @abstractmethod
    def quality(self, left: int, top: int, right: int, bottom: int) -> float:
        """Exact quality of a single rectangle."""
        pass


class IntegralBoundEvaluator(BoundEvaluator):
    """
    Linear quality function: the sum of cell weights inside the rectangle.

    The supplied summed-area table gives the signed sum of any rectangle in
    O(1). The bound adds the positive mass of the state's largest member to
    the negative mass of its smallest common member, which is admissible and
    shrinks as the state is refined.
    """

    def __init__(self, rectangle_sums: np.ndarray, weights: np.ndarray,
                 width: Optional[int] = None, height: Optional[int] = None):
        rectangle_sums = np.asarray(rectangle_sums, dtype=np.float64)
        weights = np.asarray(weights, dtype=np.float64)
        if rectangle_sums.ndim != 2 or rectangle_sums.shape != weights.shape:
            raise InvalidInputError(
                f"Rectangle-sum table {rectangle_sums.shape} does not match "
                f"weights {weights.shape}"
            )

        self.rows, self.cols = weights.shape
        self.width = width or self.cols
        self.height = height or self.rows

        # Pad with zeros so empty prefixes need no branching
        self._signed = np.pad(rectangle_sums, ((1, 0), (1, 0)), mode='constant')
        positive = np.cumsum(np.cumsum(np.maximum(weights, 0.0), axis=0), axis=1)
        self._positive = np.pad(positive, ((1, 0), (1, 0)), mode='constant')
        self._signed.setflags(write=False)
        self._positive.setflags(write=False)

        self.evaluation_count = 0

    def _cells(self, rect: Rect) -> Rect:
        """
        Map pixel coordinates to inclusive grid cells.
        Left/top take the first cell a pixel touches, right/bottom the last.
        """
        left, top, right, bottom = rect
        return (min(left * self.cols // self.width, self.cols - 1),
                min(top * self.rows // self.height, self.rows - 1),
                min(((right + 1) * self.cols - 1) // self.width, self.cols - 1),
                min(((bottom + 1) * self.rows - 1) // self.height, self.rows - 1))

    @staticmethod
    def _table_sum(table: np.ndarray, cells: Rect) -> float:
        """D - B - C + A over a zero-padded prefix table."""
        left, top, right, bottom = cells
        return float(table[bottom + 1, right + 1] - table[top, right + 1]
                     - table[bottom + 1, left] + table[top, left])

    def upper_bound(self, state: SearchState) -> float:
        self.evaluation_count += 1

        union = self._cells(state.union_box())
        bound = self._table_sum(self._positive, union)

        inner = state.intersection_box()
        if inner is not None:
            cells = self._cells(inner)
            bound += self._table_sum(self._signed, cells) - self._table_sum(self._positive, cells)

        return bound

    def quality(self, left: int, top: int, right: int, bottom: int) -> float:
        return self._table_sum(self._signed, self._cells((left, top, right, bottom)))
