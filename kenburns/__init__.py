"""
Ken Burns effect: pan and zoom a virtual camera over a still image.

Interpolates a viewport between a start and an end rect over time and
resamples the image into video frames, with optional adaptive
anti-alias pre-filtering.
"""

from .rect import Rect
from .config import KenBurnsConfig
from .errors import KenBurnsError, ConfigurationError, SamplingError, SinkError
from .warps import linear, ease_sin, ease_cos, back_forth, compose, get_warp
from .schedule import frame_count, base_scale, interpolate_rect, create_crops, sample_spacing
from .antialias import prefilter, FilteredCanvasCache
from .sampler import ResamplingMethod, sample_frame
from .validation import validate_config
from .sequence import KenBurnsSequence, RenderState, RectPreview

__all__ = [
    'Rect',
    'KenBurnsConfig',
    'KenBurnsError',
    'ConfigurationError',
    'SamplingError',
    'SinkError',
    'linear',
    'ease_sin',
    'ease_cos',
    'back_forth',
    'compose',
    'get_warp',
    'frame_count',
    'base_scale',
    'interpolate_rect',
    'create_crops',
    'sample_spacing',
    'prefilter',
    'FilteredCanvasCache',
    'ResamplingMethod',
    'sample_frame',
    'validate_config',
    'KenBurnsSequence',
    'RenderState',
    'RectPreview',
]
