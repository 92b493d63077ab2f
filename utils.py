"""
utils.py - Utility Functions and Helpers
=========================================
Common utility functions used throughout the system.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union
from functools import wraps
import time

import numpy as np


logger = logging.getLogger(__name__)


# ============================================================================
# FILE OPERATIONS
# ============================================================================

def ensure_directory(path: Union[str, Path]) -> Path:
    """Ensure directory exists, create if necessary."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def save_json(data: Dict, filepath: Union[str, Path], indent: int = 2):
    """Save data to JSON file."""
    filepath = Path(filepath)
    ensure_directory(filepath.parent)

    with open(filepath, 'w') as f:
        json.dump(data, f, indent=indent, default=str)

    logger.debug(f"Saved JSON to {filepath}")


def load_json(filepath: Union[str, Path]) -> Dict:
    """Load data from JSON file."""
    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"JSON file not found: {filepath}")

    with open(filepath, 'r') as f:
        data = json.load(f)

    logger.debug(f"Loaded JSON from {filepath}")
    return data


# ============================================================================
# WEIGHT MAP LOADING
# ============================================================================

def _as_grid(array: Any, name: str) -> np.ndarray:
    """Convert to a 2D float64 array or fail with InvalidInputError."""
    grid = np.asarray(array, dtype=np.float64)
    if grid.ndim != 2:
        raise InvalidInputError(f"{name} must be a 2D array, got shape {grid.shape}")
    return grid


def load_weight_map(filepath: Union[str, Path]) -> Tuple[np.ndarray, Optional[np.ndarray]]:
    """
    Load a precomputed weight map.

    Args:
        filepath: .npy array, .npz archive with 'weights' (and optionally
            'rectangle_sums'), or an image file OpenCV can read at any depth

    Returns:
        Tuple of (weights, rectangle_sums or None)
    """
    from config import Config

    filepath = Path(filepath)
    if not filepath.exists():
        raise InvalidInputError(f"Weight map not found: {filepath}")

    suffix = filepath.suffix.lower()
    rectangle_sums = None

    if suffix in Config.ARRAY_FORMATS:
        if suffix == '.npz':
            with np.load(filepath) as archive:
                if 'weights' not in archive:
                    raise InvalidInputError(f"{filepath} has no 'weights' array")
                weights = archive['weights']
                if 'rectangle_sums' in archive:
                    rectangle_sums = _as_grid(archive['rectangle_sums'], 'rectangle_sums')
        else:
            weights = np.load(filepath)
    elif suffix in Config.IMAGE_FORMATS:
        import cv2
        image = cv2.imread(str(filepath), cv2.IMREAD_ANYDEPTH | cv2.IMREAD_GRAYSCALE)
        if image is None:
            raise InvalidInputError(f"Could not read weight image: {filepath}")
        weights = image
    else:
        raise InvalidInputError(f"Unsupported weight map format: {suffix}")

    weights = _as_grid(weights, 'weights')
    logger.debug(f"Loaded {weights.shape[0]}x{weights.shape[1]} weight map from {filepath}")
    return weights, rectangle_sums


def load_rectangle_sums(filepath: Union[str, Path]) -> np.ndarray:
    """Load a precomputed summed-area table stored as .npy."""
    filepath = Path(filepath)
    if not filepath.exists():
        raise InvalidInputError(f"Rectangle-sum table not found: {filepath}")
    if filepath.suffix.lower() != '.npy':
        raise InvalidInputError(f"Rectangle-sum table must be .npy: {filepath}")
    return _as_grid(np.load(filepath), 'rectangle_sums')


# ============================================================================
# PERFORMANCE UTILITIES
# ============================================================================

def timer(func):
    """Decorator to time function execution."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        start = time.time()
        result = func(*args, **kwargs)
        end = time.time()
        logger.debug(f"{func.__name__} took {end - start:.2f} seconds")
        return result
    return wrapper


# ============================================================================
# LOGGING
# ============================================================================

def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None):
    """Setup logging configuration."""
    from config import Config

    log_config = Config.LOGGING

    # Set log level
    level = getattr(logging, log_level.upper(), logging.INFO)

    # Create formatter
    formatter = logging.Formatter(
        log_config['format'],
        datefmt=log_config['date_format']
    )

    # Setup handlers
    handlers = []

    # Console handler
    if log_config.get('console_output', True):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    # File handler
    if log_file or log_config.get('file'):
        file_path = log_file or log_config['file']
        ensure_directory(Path(file_path).parent)

        from logging.handlers import RotatingFileHandler
        file_handler = RotatingFileHandler(
            file_path,
            maxBytes=log_config.get('max_bytes', 10*1024*1024),
            backupCount=log_config.get('backup_count', 5)
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    # Configure root logger
    logging.basicConfig(
        level=level,
        handlers=handlers
    )

    logger.info(f"Logging configured: level={log_level}")


# ============================================================================
# VALIDATION AND ERROR HANDLING
# ============================================================================

class ValidationError(Exception):
    """Custom exception for validation errors."""
    pass


class InvalidInputError(ValidationError):
    """Search input is malformed: non-positive size, bad grid, bad qbits."""
    pass


class InputTooLargeError(ValidationError):
    """Image side exceeds the 16-bit coordinate range."""
    pass


class InternalInvariantViolation(RuntimeError):
    """
    The search reached a state that a correct bound cannot produce.
    Raised instead of returning a possibly non-optimal box.
    """
    pass


class SearchBudgetExceeded(RuntimeError):
    """Iteration cap reached before the optimum was isolated."""

    def __init__(self, iterations: int, best_upper_bound: float):
        super().__init__(
            f"Search stopped after {iterations} iterations; "
            f"best remaining upper bound {best_upper_bound:.6g}"
        )
        self.iterations = iterations
        self.best_upper_bound = best_upper_bound


def validate_dimensions(width: Any, height: Any, max_value: Optional[int] = None):
    """
    Check image dimensions before any search work.
    Raises InvalidInputError or InputTooLargeError.
    """
    from config import Config

    if max_value is None:
        max_value = Config.COORDINATES['max_value']

    for name, value in (('width', width), ('height', height)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InvalidInputError(f"{name} must be an integer, got {value!r}")
        if value <= 0:
            raise InvalidInputError(f"{name} must be positive, got {value}")
        if value > max_value:
            raise InputTooLargeError(
                f"{name}={value} exceeds coordinate range (max {max_value})"
            )


def safe_divide(numerator: float, denominator: float,
                default: float = 0) -> float:
    """Safe division with default value for division by zero."""
    if denominator == 0:
        return default
    return numerator / denominator
