"""
Configuration for a Ken Burns render.
"""

from dataclasses import dataclass, replace
from typing import Optional, Sequence, Tuple, Union

from .rect import Rect
from .sampler import ResamplingMethod
from .warps import TimeWarp, ease_sin, get_warp


RectLike = Union[Rect, Sequence[float]]


@dataclass
class KenBurnsConfig:
    duration: float = 3.0  # seconds
    frame_rate: float = 25.0
    frame_size: Tuple[int, int] = (240, 320)  # (height, width)

    # [x, y, scale] in canvas space; None = derived from the canvas
    start_rect: Optional[RectLike] = None
    end_rect: Optional[RectLike] = None

    # maps [0, 1] -> [0, 1]; see kenburns.warps
    translation: TimeWarp = ease_sin

    # 'crop' and 'translate' are deprecated
    method: Union[ResamplingMethod, str] = ResamplingMethod.GRIDDED
    interpolation_order: int = 1  # spline order of the gridded interpolant
    edge_mode: str = 'clamp'  # 'clamp' or 'error'

    # Experimental, off by default.
    # filter_kernel_size 1: hardly any aliasing, 0.5: some aliasing but crisp
    # contrast, >>1: blurry frames
    antialias: bool = False
    filter_kernel_size: float = 0.5
    filter_bucket: float = 0.05  # spacing step sharing one filtered canvas, 0 = exact

    workers: int = 0  # >1 renders frames in worker processes
    show_progress: bool = True
    profile: bool = False

    def with_canvas_defaults(self, canvas_shape: Sequence[int]) -> 'KenBurnsConfig':
        """Fill the rects left unset: the full canvas, zooming into its top-left area."""
        canvas_h, canvas_w = canvas_shape[:2]
        start = self.start_rect if self.start_rect is not None else Rect(1.0, 1.0, 1.0)
        end = self.end_rect
        if end is None:
            end = Rect(0.2 * round(canvas_w), 0.2 * round(canvas_h), 0.5)
        return replace(self, start_rect=start, end_rect=end)

    @classmethod
    def from_pipeline(cls, pipeline_config) -> 'KenBurnsConfig':
        """Create a KenBurnsConfig from a PipelineConfig."""
        # duck-typed to keep kenburns free of the config package
        return cls(
            duration=pipeline_config.duration,
            frame_rate=pipeline_config.frame_rate,
            frame_size=(pipeline_config.frame_height, pipeline_config.frame_width),
            start_rect=_optional_rect(pipeline_config.start_rect),
            end_rect=_optional_rect(pipeline_config.end_rect),
            translation=get_warp(pipeline_config.translation),
            method=pipeline_config.method,
            interpolation_order=pipeline_config.interpolation_order,
            edge_mode=pipeline_config.edge_mode,
            antialias=pipeline_config.antialias,
            filter_kernel_size=pipeline_config.filter_kernel_size,
            filter_bucket=pipeline_config.filter_bucket,
            workers=pipeline_config.workers,
            profile=pipeline_config.profile,
        )


def _optional_rect(value) -> Optional[Rect]:
    if value is None:
        return None
    return Rect.from_value(value)
