#!/usr/bin/env python3
"""
Efficient Subwindow Search
==========================
Command line entry point: loads a precomputed weight map and summed-area
table, runs the branch & bound search and reports the best box.
"""

import argparse
import logging
import sys
from typing import List, Optional

from config import Config
from ess_bounds import IntegralBoundEvaluator
from ess_progress import create_diagnostics
from ess_search import SubwindowSearch
from utils import (
    ValidationError, InternalInvariantViolation, SearchBudgetExceeded,
    setup_logging, load_weight_map, load_rectangle_sums, save_json,
)

# Setup logging
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Efficient Subwindow Search over a precomputed weight map",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s scores.npz                          # weights + rectangle_sums archive
  %(prog)s weights.npy --sums sums.npy         # separate arrays
  %(prog)s scores.npz --qbits 2                # coarser, faster search
  %(prog)s scores.npz --json box.json --plot box.png
        """
    )

    parser.add_argument(
        "weights",
        help="Weight map (.npy, .npz or image file)"
    )

    parser.add_argument(
        "--sums",
        help="Summed-area table (.npy) matching the weight map"
    )

    parser.add_argument(
        "--qbits",
        type=int,
        default=None,
        help="Quantization bits; coordinates closer than 2**qbits count as equal"
    )

    parser.add_argument(
        "--width",
        type=int,
        help="Image width in pixels (default: grid columns)"
    )

    parser.add_argument(
        "--height",
        type=int,
        help="Image height in pixels (default: grid rows)"
    )

    parser.add_argument(
        "--max-iterations",
        type=int,
        help="Abort the search after this many iterations"
    )

    parser.add_argument(
        "--json",
        help="Write the result to a JSON file"
    )

    parser.add_argument(
        "--plot",
        help="Write an image of the weight map with the box outlined"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Enable verbose logging (repeat for per-state tracing)"
    )

    parser.add_argument(
        "--config",
        help="Path to configuration file (JSON or YAML)"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    if args.config:
        try:
            Config.from_file(args.config)
        except (OSError, ValueError) as e:
            logger.error(f"Could not load config {args.config}: {e}")
            return 2

    verbose = args.verbose or Config.SEARCH['verbose']
    setup_logging("DEBUG" if verbose >= 2 else "INFO" if verbose else Config.LOGGING['level'])

    qbits = args.qbits if args.qbits is not None else Config.SEARCH['qbits']

    try:
        weights, rectangle_sums = load_weight_map(args.weights)
        if args.sums:
            rectangle_sums = load_rectangle_sums(args.sums)
        if rectangle_sums is None:
            raise ValidationError(
                "No summed-area table: pass --sums or store 'rectangle_sums' in the .npz"
            )

        rows, cols = weights.shape
        width = args.width if args.width is not None else cols
        height = args.height if args.height is not None else rows

        bound = IntegralBoundEvaluator(rectangle_sums, weights, width=width, height=height)
        driver = SubwindowSearch(bound, qbits=qbits,
                                 diagnostics=create_diagnostics(verbose),
                                 max_iterations=args.max_iterations)
        box = driver.run(width, height)

    except ValidationError as e:
        logger.error(f"Invalid input: {e}")
        return 2
    except (InternalInvariantViolation, SearchBudgetExceeded) as e:
        logger.error(f"Search failed: {e}")
        return 1

    stats = driver.statistics

    # Print results
    print("\n" + "="*60)
    print("SUBWINDOW SEARCH RESULT")
    print("="*60)
    print(f"Grid: {rows} x {cols}, image: {width} x {height}, qbits: {qbits}")
    print(f"Box: left={box.left} top={box.top} right={box.right} bottom={box.bottom}")
    print(f"Size: {box.width} x {box.height}")
    print(f"Score: {box.score:.6f}")
    print(f"Iterations: {stats.iterations} (peak queue {stats.peak_queue_size})")
    print(f"Search Time: {stats.time_elapsed:.2f}s")
    print("="*60)

    if args.json:
        save_json({'box': box.to_dict(), 'statistics': stats.to_dict(),
                   'qbits': qbits, 'width': width, 'height': height}, args.json)
        logger.info(f"Result saved to {args.json}")

    if args.plot:
        from ess_visualizer import save_visualization
        save_visualization(args.plot, weights, box, width, height)

    return 0


if __name__ == "__main__":
    sys.exit(main())
