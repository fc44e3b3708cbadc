"""
Adaptive anti-alias pre-filter.

map_coordinates only interpolates, it does not low-pass. When the output
samples are further apart than one canvas pixel the canvas is blurred first,
with a Gaussian whose width follows the sample spacing.
"""

from typing import Optional

import numpy as np
from scipy import ndimage

from .profiling import profile


@profile
def prefilter(canvas: np.ndarray, spacing: float, kernel_size: float) -> np.ndarray:
    """Gaussian blur with sigma = spacing * kernel_size over the spatial axes."""
    sigma = spacing * kernel_size
    sigmas = (sigma, sigma) + (0.0,) * (canvas.ndim - 2)
    return ndimage.gaussian_filter(canvas, sigma=sigmas, mode='nearest')


def spacing_bucket(spacing: float, bucket: float) -> float:
    """Quantise spacing so near-equal frames share one filtered canvas."""
    if bucket <= 0:
        return spacing
    return max(1.0, round(spacing / bucket) * bucket)


class FilteredCanvasCache:
    """
    Most recent filtered canvas, keyed by the quantised spacing.

    Owned by a single renderer (the orchestrator, or one worker process).
    `version` increases every time the filtered canvas is replaced.
    """

    def __init__(self):
        self.key: Optional[float] = None
        self.filtered: Optional[np.ndarray] = None
        self.version = 0

    def get(self, canvas: np.ndarray, spacing: float, kernel_size: float, bucket: float) -> np.ndarray:
        effective = spacing_bucket(spacing, bucket)
        if bucket <= 0:
            # exact spacing every frame, nothing worth keeping
            return prefilter(canvas, effective, kernel_size)
        if self.filtered is None or self.key != effective:
            self.filtered = prefilter(canvas, effective, kernel_size)
            self.key = effective
            self.version += 1
        return self.filtered

    def clear(self):
        self.key = None
        self.filtered = None


def select_canvas(
    canvas: np.ndarray,
    spacing: float,
    antialias: bool,
    kernel_size: float,
    bucket: float,
    cache: Optional[FilteredCanvasCache] = None
) -> np.ndarray:
    """Canvas to sample a frame from: the raw one, or a pre-filtered copy."""
    if not antialias or spacing <= 1:
        return canvas
    if cache is None:
        return prefilter(canvas, spacing_bucket(spacing, bucket), kernel_size)
    return cache.get(canvas, spacing, kernel_size, bucket)
