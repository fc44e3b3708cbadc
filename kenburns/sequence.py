"""
KenBurnsSequence: drives the per-frame loop from a configuration to a
video sink.

    config -> validation -> for each frame index:
        rect -> sample spacing -> (optional) pre-filter -> frame -> sink

Frames are always delivered to the sink in index order. With
config.workers > 1 frames are computed in a process pool and reordered
before they reach the sink.
"""

import multiprocessing
from collections.abc import Sequence as SequenceABC
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple

import numpy as np
from tqdm import tqdm

from .antialias import FilteredCanvasCache, select_canvas
from .config import KenBurnsConfig
from .errors import ConfigurationError, SinkError
from .profiling import profile_block, profiler
from .rect import Rect
from .sampler import ResamplingMethod, frame_shape, sample_frame, working_canvas
from .schedule import (
    base_scale, create_crops, frame_count, interpolate_rect, preview_indices, rect_spacing, sample_spacing
)
from .validation import validate_canvas, validate_config


class RenderState(Enum):
    UNVALIDATED = 'unvalidated'
    RENDERING = 'rendering'
    DONE = 'done'
    FAILED = 'failed'


@dataclass(frozen=True)
class FrameParams:
    """Everything a worker needs to turn a rect into a frame."""
    frame_size: Tuple[int, int]
    method: ResamplingMethod
    base_scale: float
    interpolation_order: int
    edge_mode: str
    antialias: bool
    filter_kernel_size: float
    filter_bucket: float

    @classmethod
    def from_config(cls, config: KenBurnsConfig, canvas_shape) -> 'FrameParams':
        return cls(
            frame_size=tuple(config.frame_size),
            method=config.method,
            base_scale=base_scale(config.frame_size, canvas_shape),
            interpolation_order=config.interpolation_order,
            edge_mode=config.edge_mode,
            antialias=config.antialias,
            filter_kernel_size=config.filter_kernel_size,
            filter_bucket=config.filter_bucket,
        )


def render_frame(canvas: np.ndarray, rect: Rect, params: FrameParams,
                 cache: Optional[FilteredCanvasCache] = None) -> np.ndarray:
    """One frame; pure apart from the optional filtered-canvas cache."""
    spacing = rect_spacing(rect, params.frame_size, params.base_scale)
    source = select_canvas(canvas, spacing, params.antialias, params.filter_kernel_size,
                           params.filter_bucket, cache)
    return sample_frame(source, rect, params.frame_size, params.method, params.base_scale,
                        order=params.interpolation_order, edge_mode=params.edge_mode)


# Per-process state of pool workers. Each worker filters its own canvas copy.
_worker_state = {}


def _init_worker(canvas: np.ndarray, params: FrameParams):
    _worker_state['canvas'] = canvas
    _worker_state['params'] = params
    _worker_state['cache'] = FilteredCanvasCache()


def render_frame_wrapper(rect: Rect) -> np.ndarray:
    return render_frame(_worker_state['canvas'], rect, _worker_state['params'], _worker_state['cache'])


class RectPreview(SequenceABC):
    """
    Representative rects of a schedule, computed on access.

    Finite and restartable: iterating twice gives the same rects.
    """

    def __init__(self, config: KenBurnsConfig, sample_count: int):
        self._config = config
        self.frame_indices = preview_indices(frame_count(config.duration, config.frame_rate), sample_count)

    def __len__(self) -> int:
        return len(self.frame_indices)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(len(self)))]
        return interpolate_rect(self._config, int(self.frame_indices[index]))

    def __repr__(self) -> str:
        return f"RectPreview({len(self)} of {frame_count(self._config.duration, self._config.frame_rate)} frames)"


class KenBurnsSequence:
    """
    Ken Burns movie creator for one still image.

        seq = KenBurnsSequence(canvas)
        seq.config.end_rect = Rect(50, 10, 0.7)
        seq.render(VideoFileExporter('kenburns.mp4', fps=seq.config.frame_rate, ...))
    """

    def __init__(self, canvas: np.ndarray, config: Optional[KenBurnsConfig] = None):
        self.canvas = validate_canvas(canvas)
        self._config = (config or KenBurnsConfig()).with_canvas_defaults(self.canvas.shape)
        self.state = RenderState.UNVALIDATED
        self._cache = FilteredCanvasCache()

    @property
    def config(self) -> KenBurnsConfig:
        return self._config

    @config.setter
    def config(self, config: KenBurnsConfig):
        if self.state is RenderState.RENDERING:
            raise RuntimeError("Cannot replace the configuration while rendering")
        self._config = config.with_canvas_defaults(self.canvas.shape)
        self.state = RenderState.UNVALIDATED

    @property
    def channels(self) -> int:
        return self.canvas.shape[2] if self.canvas.ndim == 3 else 1

    @property
    def frame_shape(self) -> Tuple[int, ...]:
        """Shape every frame handed to the sink has."""
        return frame_shape(self._config.frame_size, self.canvas.shape)

    @property
    def frame_count(self) -> int:
        return frame_count(self._config.duration, self._config.frame_rate)

    @property
    def base_scale(self) -> float:
        return base_scale(self._config.frame_size, self.canvas.shape)

    def validate(self) -> KenBurnsConfig:
        return validate_config(self._config, self.canvas.shape)

    def crops(self) -> List[Rect]:
        return create_crops(self.validate())

    def spacing(self, rect: Rect) -> float:
        return sample_spacing(self._config, rect, self.canvas.shape)

    def preview_rects(self, sample_count: int = 25) -> RectPreview:
        """Up to sample_count rects spread over the schedule, first and last included."""
        if isinstance(sample_count, bool) or not isinstance(sample_count, (int, np.integer)) or sample_count < 2:
            raise ConfigurationError(f"expected an integer >= 2, got {sample_count!r}", 'sample_count')
        return RectPreview(self.validate(), int(sample_count))

    def frames(self) -> Iterator[np.ndarray]:
        """Yield every frame in order without a sink."""
        config = self.validate()
        try:
            yield from self._iter_frames(config, create_crops(config))
        finally:
            self._cache.clear()

    def render(self, sink) -> int:
        """
        Render all frames into `sink` (open, write_frame per frame, close).

        Configuration errors are raised before the sink is touched. Any later
        failure aborts the sink, so no partial video is left claiming success.
        Returns the number of frames written.
        """
        if self.state is RenderState.RENDERING:
            raise RuntimeError("A render is already in progress on this sequence")

        self.state = RenderState.UNVALIDATED
        try:
            config = self.validate()
        except ConfigurationError:
            self.state = RenderState.FAILED
            raise

        self.state = RenderState.RENDERING
        opened = False
        written = 0
        frames = None
        try:
            crops = create_crops(config)
            frames = self._iter_frames(config, crops)
            print(f"Making {getattr(sink, 'name', type(sink).__name__)}...")
            print(f"Total frames: {len(crops)}")

            _sink_call(sink.open, 'open')
            opened = True
            for frame in frames:
                _sink_call(sink.write_frame, 'write frame', frame)
                written += 1
            _sink_call(sink.close, 'close')
        except BaseException:
            self.state = RenderState.FAILED
            if opened:
                # sinks without abort() only get closed
                getattr(sink, 'abort', sink.close)()
            raise
        finally:
            if frames is not None:
                # stops the worker pool early on failure
                frames.close()
            self._cache.clear()

        self.state = RenderState.DONE
        print("done.")
        return written

    def _iter_frames(self, config: KenBurnsConfig, crops: List[Rect]) -> Iterator[np.ndarray]:
        was_enabled = profiler.enabled
        profiler.enabled = config.profile
        try:
            with profile_block('prepare_canvas'):
                canvas = working_canvas(self.canvas, config.method)
            params = FrameParams.from_config(config, canvas.shape)

            progress = dict(total=len(crops), desc="Creating frames", disable=not config.show_progress)
            if config.workers > 1 and len(crops) > 1:
                with multiprocessing.Pool(processes=config.workers, initializer=_init_worker,
                                          initargs=(canvas, params)) as pool:
                    # imap keeps index order
                    yield from tqdm(pool.imap(render_frame_wrapper, crops), **progress)
            else:
                for rect in tqdm(crops, **progress):
                    yield render_frame(canvas, rect, params, self._cache)
        finally:
            profiler.enabled = was_enabled


def _sink_call(fn, action: str, *args):
    try:
        return fn(*args)
    except SinkError:
        raise
    except Exception as e:
        raise SinkError(f"Video sink failed to {action}: {e}") from e
