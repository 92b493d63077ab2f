#!/usr/bin/env python3
"""
ess_search.py - Efficient Subwindow Search
==========================================
Best-first branch & bound over the 4D space of rectangles
(left, top, right, bottom). The frontier is ordered by an upper bound on
quality; the first state popped whose intervals have all collapsed is the
global optimum, because no other state in the queue can bound higher.

Reference: C. H. Lampert, M. B. Blaschko and T. Hofmann, "Beyond Sliding
Windows: Object Localization by Efficient Subwindow Search", CVPR 2008.
"""

import logging
import time
from typing import Any, Optional

import numpy as np

from config import Config
from ess_bounds import BoundEvaluator, IntegralBoundEvaluator
from ess_progress import SearchDiagnostics, SearchStatistics, create_diagnostics
from ess_queue import StateQueue
from ess_state import SearchState
from models import Box
from utils import (
    InvalidInputError, InternalInvariantViolation, SearchBudgetExceeded,
    timer, validate_dimensions,
)

logger = logging.getLogger(__name__)


def _validate_qbits(qbits: Any):
    if isinstance(qbits, bool) or not isinstance(qbits, (int, np.integer)) or qbits < 0:
        raise InvalidInputError(f"qbits must be a non-negative integer, got {qbits!r}")


class SubwindowSearch:
    """
    Branch & bound driver.

    Pops the state with the highest bound; returns it as a box when no
    coordinate can be split at the current resolution, otherwise replaces it
    by its two legal halves.
    """

    def __init__(self, bound: BoundEvaluator, qbits: int = 0,
                 diagnostics: Optional[SearchDiagnostics] = None,
                 max_iterations: Optional[int] = None,
                 strict_bounds: Optional[bool] = None,
                 bound_tolerance: Optional[float] = None):
        _validate_qbits(qbits)
        search_config = Config.SEARCH

        self.bound = bound
        self.qbits = int(qbits)
        self.diagnostics = diagnostics or SearchDiagnostics()
        self.max_iterations = (max_iterations if max_iterations is not None
                               else search_config['max_iterations'])
        self.strict_bounds = (strict_bounds if strict_bounds is not None
                              else search_config['strict_bounds'])
        self.bound_tolerance = (bound_tolerance if bound_tolerance is not None
                                else search_config['bound_tolerance'])
        self.statistics = SearchStatistics()

    def run(self, width: int, height: int) -> Box:
        """Find the highest-quality rectangle in a width x height image."""
        validate_dimensions(width, height)

        self.statistics = stats = SearchStatistics()
        start = time.time()

        root = SearchState.full_space(int(width), int(height), self.qbits)
        root = root.with_upper(self._evaluate(root))

        queue = StateQueue()
        queue.push(root)
        stats.states_pushed += 1
        self.diagnostics.search_started(root, self.qbits)

        while True:
            if queue.is_empty():
                stats.time_elapsed = time.time() - start
                raise InternalInvariantViolation(
                    f"State queue exhausted after {stats.iterations} iterations; "
                    f"the bounding function is not admissible"
                )

            if self.max_iterations is not None and stats.iterations >= self.max_iterations:
                stats.time_elapsed = time.time() - start
                stats.peak_queue_size = queue.peak_size
                raise SearchBudgetExceeded(stats.iterations, queue.peek().upper)

            state = queue.pop()
            stats.iterations += 1
            self.diagnostics.state_popped(state, stats.iterations, len(queue))

            axis = state.split_axis(self.qbits)
            if axis is None:
                box = self._make_box(state)
                stats.time_elapsed = time.time() - start
                stats.peak_queue_size = queue.peak_size
                self.diagnostics.search_finished(box, stats)
                return box

            for child in state.split(axis):
                if not child.is_legal():
                    stats.states_discarded += 1
                    continue

                upper = self._evaluate(child)
                self._check_monotone(state, child, upper)
                queue.push(child.with_upper(upper))
                stats.states_pushed += 1

    def _evaluate(self, state: SearchState) -> float:
        self.statistics.bound_evaluations += 1
        return float(self.bound.upper_bound(state))

    def _check_monotone(self, parent: SearchState, child: SearchState, upper: float):
        """Child bounds must not exceed their parent's."""
        if upper <= parent.upper + self.bound_tolerance:
            return

        message = (f"Child bound {upper:.6g} exceeds parent bound {parent.upper:.6g} "
                   f"for {child.describe()}")
        if self.strict_bounds:
            raise InternalInvariantViolation(message)
        logger.warning(message)

    def _make_box(self, state: SearchState) -> Box:
        left, top, right, bottom = (int(v) for v in state.union_box())
        score = float(self.bound.quality(left, top, right, bottom))
        return Box(left=left, top=top, right=right, bottom=bottom, score=score)


@timer
def search(width: int, height: int,
           rectangle_sums: Optional[np.ndarray], rows: int, cols: int,
           weights: Optional[np.ndarray],
           qbits: int = 0, verbose: int = 0,
           bound: Optional[BoundEvaluator] = None,
           diagnostics: Optional[SearchDiagnostics] = None,
           max_iterations: Optional[int] = None) -> Box:
    """
    Find the axis-aligned rectangle maximizing quality over a weight grid.

    Args:
        width, height: Image size in pixels (1..32767)
        rectangle_sums: Summed-area table over the grid, shape (rows, cols)
        rows, cols: Grid dimensions
        weights: Per-cell weights, shape (rows, cols)
        qbits: Coordinates closer than 2**qbits count as equal
        verbose: Diagnostic level; never changes the result
        bound: Bounding function; defaults to IntegralBoundEvaluator
        diagnostics: Progress sink; defaults to one matching verbose
        max_iterations: Optional iteration cap

    Returns:
        Optimal Box with its exact score
    """
    validate_dimensions(width, height)
    _validate_qbits(qbits)

    for name, value in (('rows', rows), ('cols', cols)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
            raise InvalidInputError(f"{name} must be a positive integer, got {value!r}")

    if bound is None:
        for name, grid in (('rectangle_sums', rectangle_sums), ('weights', weights)):
            if grid is None or np.shape(grid) != (rows, cols):
                raise InvalidInputError(
                    f"{name} shape {np.shape(grid) if grid is not None else None} "
                    f"does not match grid ({rows}, {cols})"
                )
        bound = IntegralBoundEvaluator(rectangle_sums, weights, width=width, height=height)

    if diagnostics is None:
        diagnostics = create_diagnostics(verbose)

    driver = SubwindowSearch(bound, qbits=qbits, diagnostics=diagnostics,
                             max_iterations=max_iterations)
    return driver.run(width, height)
