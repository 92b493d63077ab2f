#!/usr/bin/env python3
"""
ess_visualizer.py - Search Result Visualization
===============================================
Renders a weight map as a heat image with the found box outlined.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import cv2
import numpy as np

from config import Config
from models import Box
from utils import ensure_directory

logger = logging.getLogger(__name__)

COLORMAPS = {
    'jet': cv2.COLORMAP_JET,
    'viridis': cv2.COLORMAP_VIRIDIS,
    'hot': cv2.COLORMAP_HOT,
    'gray': None,
}


def render_weight_map(weights: np.ndarray, box: Optional[Box] = None,
                      width: Optional[int] = None, height: Optional[int] = None) -> np.ndarray:
    """
    Create a BGR image of the weight map with the box drawn on top.

    Args:
        weights: 2D weight grid
        box: Box in pixel coordinates of a width x height image
        width, height: Image size the box refers to (defaults to grid size)

    Returns:
        uint8 BGR image
    """
    vis_config = Config.VISUALIZATION
    weights = np.asarray(weights, dtype=np.float64)
    rows, cols = weights.shape
    width = width or cols
    height = height or rows

    # Normalize to 0-255
    low, high = float(weights.min()), float(weights.max())
    if high > low:
        normalized = ((weights - low) / (high - low) * 255.0).astype(np.uint8)
    else:
        normalized = np.zeros(weights.shape, dtype=np.uint8)

    # Upscale small grids so the box outline stays visible
    scale = max(1, int(np.ceil(vis_config['min_size'] / max(width, height))))
    image = cv2.resize(normalized, (width * scale, height * scale),
                       interpolation=cv2.INTER_NEAREST)

    colormap = COLORMAPS.get(vis_config['colormap'], cv2.COLORMAP_JET)
    if colormap is None:
        image = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    else:
        image = cv2.applyColorMap(image, colormap)

    if box is not None:
        top_left = (box.left * scale, box.top * scale)
        bottom_right = ((box.right + 1) * scale - 1, (box.bottom + 1) * scale - 1)
        cv2.rectangle(image, top_left, bottom_right,
                      tuple(int(c) for c in vis_config['box_color']),
                      vis_config['line_thickness'])
        cv2.putText(image, f"{box.score:.3g}", (top_left[0] + 4, top_left[1] + 16),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5,
                    tuple(int(c) for c in vis_config['box_color']), 1)

    return image


def save_visualization(output_path: Union[str, Path], weights: np.ndarray,
                       box: Optional[Box] = None, width: Optional[int] = None,
                       height: Optional[int] = None) -> Path:
    """Render and write the visualization to disk."""
    output_path = Path(output_path)
    ensure_directory(output_path.parent)

    image = render_weight_map(weights, box, width, height)
    if not cv2.imwrite(str(output_path), image):
        raise IOError(f"Could not write visualization to {output_path}")

    logger.info(f"Visualization saved to {output_path}")
    return output_path
