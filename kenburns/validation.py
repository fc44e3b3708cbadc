"""
Validation of a KenBurnsConfig against the canvas it will render.

Every check raises ConfigurationError naming the offending field; nothing
is corrected silently.
"""

import math
import numbers
from dataclasses import replace
from typing import Sequence

import numpy as np

from .config import KenBurnsConfig
from .errors import ConfigurationError
from .rect import Rect
from .sampler import DEPRECATED_METHODS, EDGE_MODES, ResamplingMethod
from .schedule import frame_count


def _is_real(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _positive_real(value, field: str) -> float:
    if not _is_real(value) or not math.isfinite(value) or value <= 0:
        raise ConfigurationError(f"expected a positive finite number, got {value!r}", field)
    return float(value)


def validate_canvas(canvas) -> np.ndarray:
    if not isinstance(canvas, np.ndarray):
        raise ConfigurationError(f"expected a numpy array, got {type(canvas).__name__}", 'canvas')
    if not (np.issubdtype(canvas.dtype, np.number) or canvas.dtype == np.bool_):
        raise ConfigurationError(f"expected a numeric array, got dtype {canvas.dtype}", 'canvas')
    if not (canvas.ndim == 2 or (canvas.ndim == 3 and canvas.shape[2] in (1, 3))):
        raise ConfigurationError(f"size(canvas, 3) must either be 1 or 3, got shape {canvas.shape}", 'canvas')
    if canvas.shape[0] < 1 or canvas.shape[1] < 1:
        raise ConfigurationError(f"canvas is empty, shape {canvas.shape}", 'canvas')
    if canvas.ndim == 3 and canvas.shape[2] == 1:
        canvas = canvas[..., 0]
    return canvas


def validate_method(method) -> ResamplingMethod:
    try:
        method = ResamplingMethod(method)
    except ValueError:
        choices = ', '.join(repr(m.value) for m in ResamplingMethod)
        raise ConfigurationError(f"should be one of {choices}, got {method!r}", 'method') from None
    if method in DEPRECATED_METHODS:
        print(f"Warning: method '{method.value}' is deprecated. Use 'gridded'.")
    return method


def validate_translation(translation):
    if not callable(translation):
        raise ConfigurationError(f"expected a function mapping [0, 1] -> [0, 1], got {translation!r}", 'translation')
    for t in (0.0, 1.0):
        try:
            value = np.asarray(translation(t))
        except Exception as e:
            raise ConfigurationError(f"translation({t}) failed: {e}", 'translation') from e
        if value.ndim != 0 or not (np.issubdtype(value.dtype, np.number) and not np.iscomplexobj(value)):
            raise ConfigurationError(f"translation({t}) must return a real scalar, got {value!r}", 'translation')
        if not np.isfinite(value):
            raise ConfigurationError(f"translation({t}) is not finite", 'translation')
    return translation


def validate_frame_size(frame_size) -> tuple:
    try:
        values = list(frame_size)
    except TypeError:
        raise ConfigurationError(f"expected (height, width), got {frame_size!r}", 'frame_size') from None
    if len(values) != 2:
        raise ConfigurationError(f"expected 2 values (height, width), got {len(values)}", 'frame_size')
    for v in values:
        if isinstance(v, bool) or not isinstance(v, numbers.Integral) or v <= 0:
            raise ConfigurationError(f"expected positive integers, got {frame_size!r}", 'frame_size')
    return int(values[0]), int(values[1])


def validate_rect(value, canvas_shape: Sequence[int], field: str) -> Rect:
    try:
        rect = Rect.from_value(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(str(e), field) from None

    canvas_h, canvas_w = canvas_shape[:2]
    if not math.isfinite(rect.x) or not 1 <= rect.x <= canvas_w:
        raise ConfigurationError(f"x must be in [1, {canvas_w}], got {rect.x}", f"{field}.x")
    if not math.isfinite(rect.y) or not 1 <= rect.y <= canvas_h:
        raise ConfigurationError(f"y must be in [1, {canvas_h}], got {rect.y}", f"{field}.y")
    if not math.isfinite(rect.scale) or not 0 < rect.scale <= 1:
        raise ConfigurationError(f"scale must be in (0, 1], got {rect.scale}", f"{field}.scale")
    return rect


def validate_config(config: KenBurnsConfig, canvas_shape: Sequence[int]) -> KenBurnsConfig:
    """
    Check every field and return a normalised snapshot: rects as Rect,
    method as ResamplingMethod, frame_size as a tuple of ints.
    The config passed in is left untouched.
    """
    method = validate_method(config.method)
    translation = validate_translation(config.translation)
    duration = _positive_real(config.duration, 'duration')
    frame_rate = _positive_real(config.frame_rate, 'frame_rate')
    if frame_count(duration, frame_rate) < 1:
        raise ConfigurationError(
            f"duration * frame_rate = {duration * frame_rate:g} rounds to zero frames", 'duration'
        )
    frame_size = validate_frame_size(config.frame_size)

    if config.start_rect is None or config.end_rect is None:
        config = config.with_canvas_defaults(canvas_shape)
    start_rect = validate_rect(config.start_rect, canvas_shape, 'start_rect')
    end_rect = validate_rect(config.end_rect, canvas_shape, 'end_rect')

    filter_kernel_size = _positive_real(config.filter_kernel_size, 'filter_kernel_size')
    if not _is_real(config.filter_bucket) or not math.isfinite(config.filter_bucket) or config.filter_bucket < 0:
        raise ConfigurationError(f"expected a number >= 0, got {config.filter_bucket!r}", 'filter_bucket')

    order = config.interpolation_order
    if isinstance(order, bool) or not isinstance(order, numbers.Integral) or not 0 <= order <= 5:
        raise ConfigurationError(f"expected an integer in [0, 5], got {order!r}", 'interpolation_order')
    if config.edge_mode not in EDGE_MODES:
        raise ConfigurationError(f"should be one of {EDGE_MODES}, got {config.edge_mode!r}", 'edge_mode')
    workers = config.workers
    if isinstance(workers, bool) or not isinstance(workers, numbers.Integral) or workers < 0:
        raise ConfigurationError(f"expected an integer >= 0, got {workers!r}", 'workers')

    return replace(
        config,
        duration=duration,
        frame_rate=frame_rate,
        frame_size=frame_size,
        start_rect=start_rect,
        end_rect=end_rect,
        translation=translation,
        method=method,
        interpolation_order=int(order),
        filter_kernel_size=filter_kernel_size,
        filter_bucket=float(config.filter_bucket),
        workers=int(workers),
    )
