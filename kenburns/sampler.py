"""
Frame sampling: render one viewport of the canvas into an output-sized frame.

Three strategies are available:
    crop       - integer crop + resize. Cheap, but the truncated crop
                 coordinates make the result shake between frames.
    translate  - sub-pixel shift, resize, then a hard crop. Smoother, but
                 two resampling passes compound their error.
    gridded    - one interpolation pass at the exact source coordinates of
                 every output pixel. Default.

All strategies extend the canvas by replicating its edge pixels ('clamp').
With edge_mode='error' any viewport reaching outside the canvas raises
SamplingError instead.
"""

from enum import Enum
from typing import Sequence, Tuple

import cv2
import numpy as np
from scipy import ndimage

from .errors import SamplingError
from .profiling import profile
from .rect import Rect
from .schedule import viewport_size


class ResamplingMethod(str, Enum):
    CROP = 'crop'
    TRANSLATE = 'translate'
    GRIDDED = 'gridded'


DEPRECATED_METHODS = (ResamplingMethod.CROP, ResamplingMethod.TRANSLATE)
EDGE_MODES = ('clamp', 'error')

# dtypes cv2.resize accepts
_CV2_DTYPES = (np.uint8, np.uint16, np.int16, np.float32, np.float64)

_EDGE_TOLERANCE = 1e-6


def to_float_canvas(canvas: np.ndarray) -> np.ndarray:
    """Float32 copy scaled to [0, 1] for integer images; float32 input is returned as is."""
    if canvas.dtype == np.float32:
        return canvas
    if canvas.dtype == np.bool_:
        return canvas.astype(np.float32)
    if np.issubdtype(canvas.dtype, np.integer):
        info = np.iinfo(canvas.dtype)
        if info.min < 0:
            return ((canvas.astype(np.float32) - info.min) / (info.max - info.min)).astype(np.float32)
        return canvas.astype(np.float32) / info.max
    return canvas.astype(np.float32)


def working_canvas(canvas: np.ndarray, method: ResamplingMethod) -> np.ndarray:
    """Canvas in the numeric domain the strategy samples from."""
    if method is ResamplingMethod.GRIDDED or canvas.dtype.type not in _CV2_DTYPES:
        return to_float_canvas(canvas)
    return canvas


def frame_shape(frame_size: Sequence[int], canvas_shape: Sequence[int]) -> Tuple[int, ...]:
    return (int(frame_size[0]), int(frame_size[1])) + tuple(canvas_shape[2:])


def check_bounds(rect: Rect, frame_size: Sequence[int], canvas_shape: Sequence[int], scale0: float):
    """Raise SamplingError if the viewport leaves [1, W] x [1, H]."""
    canvas_h, canvas_w = canvas_shape[:2]
    w, h = viewport_size(rect, frame_size, scale0)
    x_end = rect.x - 1 + w
    y_end = rect.y - 1 + h
    if (rect.x < 1 - _EDGE_TOLERANCE or rect.y < 1 - _EDGE_TOLERANCE
            or x_end > canvas_w + _EDGE_TOLERANCE or y_end > canvas_h + _EDGE_TOLERANCE):
        raise SamplingError(
            f"Viewport x=[{rect.x:.3f}, {x_end:.3f}] y=[{rect.y:.3f}, {y_end:.3f}] "
            f"is outside the {canvas_w}x{canvas_h} canvas"
        )


def _clamped_window(canvas: np.ndarray, x0: int, y0: int, w: int, h: int) -> np.ndarray:
    """Integer window; rows and columns past the border repeat the edge pixel."""
    canvas_h, canvas_w = canvas.shape[:2]
    rows = np.clip(np.arange(y0, y0 + h), 0, canvas_h - 1)
    cols = np.clip(np.arange(x0, x0 + w), 0, canvas_w - 1)
    return canvas[rows[:, None], cols[None, :]]


def _sample_crop(canvas, rect, frame_size, scale0):
    frame_h, frame_w = frame_size
    w, h = viewport_size(rect, frame_size, scale0)
    # no resampling at crop time: coordinates truncate to whole pixels
    x0 = int(np.floor(rect.x)) - 1
    y0 = int(np.floor(rect.y)) - 1
    window = _clamped_window(canvas, x0, y0, max(1, int(round(w))), max(1, int(round(h))))
    return cv2.resize(window, (frame_w, frame_h), interpolation=cv2.INTER_LINEAR)


def _sample_translate(canvas, rect, frame_size, scale0):
    frame_h, frame_w = frame_size
    canvas_h, canvas_w = canvas.shape[:2]

    offset = (1.0 - rect.y, 1.0 - rect.x) + (0.0,) * (canvas.ndim - 2)
    moved = ndimage.shift(canvas, offset, order=1, mode='nearest')

    factor = scale0 / rect.scale
    size = (max(1, int(np.ceil(canvas_w * factor))), max(1, int(np.ceil(canvas_h * factor))))
    resized = cv2.resize(moved, size, interpolation=cv2.INTER_LINEAR)

    # hard crop; a short result is extended with its edge pixels
    return _clamped_window(resized, 0, 0, frame_w, frame_h)


def _sample_gridded(canvas, rect, frame_size, scale0, order):
    frame_h, frame_w = frame_size
    w, h = viewport_size(rect, frame_size, scale0)

    # 1-based canvas coordinates of every output pixel, shifted to 0-based
    xs = np.linspace(rect.x, rect.x - 1 + w, frame_w) - 1.0
    ys = np.linspace(rect.y, rect.y - 1 + h, frame_h) - 1.0
    coords = np.array(np.meshgrid(ys, xs, indexing='ij'))

    if canvas.ndim == 2:
        frame = ndimage.map_coordinates(canvas, coords, order=order, mode='nearest')
    else:
        frame = np.stack([
            ndimage.map_coordinates(canvas[..., c], coords, order=order, mode='nearest')
            for c in range(canvas.shape[2])
        ], axis=-1)

    if order > 1:
        # higher-order splines ring past the input range
        frame = np.clip(frame, canvas.min(), canvas.max())
    return frame


@profile
def sample_frame(
    canvas: np.ndarray,
    rect: Rect,
    frame_size: Sequence[int],
    method: ResamplingMethod,
    base_scale: float,
    order: int = 1,
    edge_mode: str = 'clamp'
) -> np.ndarray:
    """
    Render the viewport `rect` of `canvas` into a frame of shape
    frame_size (+ channels).

    crop and translate keep the canvas dtype; gridded returns float32,
    integer canvases scaled to [0, 1] and float canvases in their own range.
    """
    method = ResamplingMethod(method)
    frame_size = (int(frame_size[0]), int(frame_size[1]))

    if edge_mode == 'error':
        check_bounds(rect, frame_size, canvas.shape, base_scale)

    if method is ResamplingMethod.CROP:
        return _sample_crop(canvas, rect, frame_size, base_scale)
    if method is ResamplingMethod.TRANSLATE:
        return _sample_translate(canvas, rect, frame_size, base_scale)
    return _sample_gridded(to_float_canvas(canvas), rect, frame_size, base_scale, order)
