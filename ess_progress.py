#!/usr/bin/env python3
"""
ess_progress.py - Search Progress Tracking
==========================================
Statistics collected during a search and the diagnostics sinks that report
them. Sinks observe the search; they never influence which box is returned.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from config import Config
from ess_state import SearchState
from models import Box
from utils import safe_divide

logger = logging.getLogger(__name__)


@dataclass
class SearchStatistics:
    """Statistics collected during search."""
    iterations: int = 0
    states_pushed: int = 0
    states_discarded: int = 0  # illegal children
    bound_evaluations: int = 0
    peak_queue_size: int = 0
    time_elapsed: float = 0.0

    @property
    def iterations_per_second(self) -> float:
        return safe_divide(self.iterations, self.time_elapsed)

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result['iterations_per_second'] = self.iterations_per_second
        return result


class SearchDiagnostics:
    """Silent sink; subclasses override the hooks they care about."""

    def search_started(self, root: SearchState, qbits: int):
        pass

    def state_popped(self, state: SearchState, iteration: int, queue_size: int):
        pass

    def search_finished(self, box: Box, statistics: SearchStatistics):
        pass


class LoggingDiagnostics(SearchDiagnostics):
    """
    Reports search progress through the logging module.

    verbose >= 1 logs start, periodic progress and the result;
    verbose >= 2 also logs every popped state at DEBUG level.
    """

    def __init__(self, verbose: int = 1, progress_interval: Optional[int] = None,
                 log: Optional[logging.Logger] = None):
        self.verbose = verbose
        self.progress_interval = progress_interval or Config.SEARCH['progress_interval']
        self.log = log or logger

    def search_started(self, root: SearchState, qbits: int):
        self.log.info(f"Starting subwindow search: {root.describe()}, "
                      f"qbits={qbits}, root bound={root.upper:.6g}")

    def state_popped(self, state: SearchState, iteration: int, queue_size: int):
        if self.verbose >= 2:
            self.log.debug(f"[{iteration}] bound={state.upper:.6g} {state.describe()}")
        if iteration % self.progress_interval == 0:
            self.log.info(f"  Explored {iteration} states, queue size {queue_size}, "
                          f"best bound {state.upper:.6g}")

    def search_finished(self, box: Box, statistics: SearchStatistics):
        self.log.info(f"Found box ({box.left}, {box.top}, {box.right}, {box.bottom}) "
                      f"score={box.score:.6g} after {statistics.iterations} iterations "
                      f"in {statistics.time_elapsed:.2f}s "
                      f"(peak queue {statistics.peak_queue_size})")


def create_diagnostics(verbose: int) -> SearchDiagnostics:
    """Diagnostics sink matching a verbosity level."""
    if verbose and verbose > 0:
        return LoggingDiagnostics(verbose=verbose)
    return SearchDiagnostics()
