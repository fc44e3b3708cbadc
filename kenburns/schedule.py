"""
Viewport schedule: frame count, base scale, per-frame rect interpolation
and the sample spacing used to decide on anti-alias pre-filtering.
"""

import math
from typing import List, Sequence, Tuple

import numpy as np

from .rect import Rect


def frame_count(duration: float, frame_rate: float) -> int:
    """round(duration * frame_rate), halves rounded up."""
    return int(math.floor(duration * frame_rate + 0.5))


def base_scale(frame_size: Sequence[int], canvas_shape: Sequence[int]) -> float:
    """Scale at which the full canvas covers the frame with no empty border."""
    frame_h, frame_w = frame_size
    canvas_h, canvas_w = canvas_shape[:2]
    return max(frame_h / canvas_h, frame_w / canvas_w)


def viewport_size(rect: Rect, frame_size: Sequence[int], scale0: float) -> Tuple[float, float]:
    """(width, height) of the viewport in canvas pixels."""
    frame_h, frame_w = frame_size
    return frame_w / scale0 * rect.scale, frame_h / scale0 * rect.scale


def progress(frame_index: int, n_frames: int) -> float:
    if not 0 <= frame_index < n_frames:
        raise IndexError(f"frame_index {frame_index} out of range for {n_frames} frames")
    if n_frames == 1:
        return 0.0
    return frame_index / (n_frames - 1)


def interpolate_rect(config, frame_index: int) -> Rect:
    """
    Viewport for one frame: start + w * (end - start) with
    w = translation(frame_index / (n - 1)). w is not clamped.
    """
    n_frames = frame_count(config.duration, config.frame_rate)
    w = float(config.translation(progress(frame_index, n_frames)))
    start = Rect.from_value(config.start_rect)
    end = Rect.from_value(config.end_rect)
    return start.lerp(end, w)


def create_crops(config) -> List[Rect]:
    n_frames = frame_count(config.duration, config.frame_rate)
    return [interpolate_rect(config, k) for k in range(n_frames)]


def sample_spacing(config, rect: Rect, canvas_shape: Sequence[int]) -> float:
    """
    Distance in canvas pixels between adjacent output samples, taking the
    more demanding axis. Above 1 the frame is a minification of the canvas.
    """
    return rect_spacing(rect, config.frame_size, base_scale(config.frame_size, canvas_shape))


def rect_spacing(rect: Rect, frame_size: Sequence[int], scale0: float) -> float:
    frame_h, frame_w = frame_size
    w, h = viewport_size(rect, frame_size, scale0)
    return max(w / frame_w, h / frame_h)


def preview_indices(n_frames: int, sample_count: int) -> np.ndarray:
    """Evenly spread frame indices, first and last always included."""
    if sample_count >= n_frames:
        return np.arange(n_frames)
    return np.round(np.linspace(0, n_frames - 1, sample_count)).astype(int)
