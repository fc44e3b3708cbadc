from __future__ import annotations

import numpy as np
import pytest

from kenburns import KenBurnsConfig
from rendering.base import VideoSink


@pytest.fixture
def rgb_canvas() -> np.ndarray:
    rng = np.random.default_rng(0)
    return rng.integers(0, 256, size=(60, 80, 3), dtype=np.uint8)


@pytest.fixture
def gradient_canvas() -> np.ndarray:
    h, w = 48, 64
    y, x = np.mgrid[0:h, 0:w].astype(np.float32)
    return ((x / (w - 1) + y / (h - 1)) / 2).astype(np.float32)


def quiet_config(**kwargs) -> KenBurnsConfig:
    kwargs.setdefault('show_progress', False)
    return KenBurnsConfig(**kwargs)


class RecordingSink(VideoSink):
    """Records every call; optionally fails on a given call."""

    def __init__(self, frame_shape, fail_on: str | None = None, fail_at_frame: int = 0):
        super().__init__(frame_shape)
        self.calls: list[str] = []
        self.frames: list[np.ndarray] = []
        self.fail_on = fail_on
        self.fail_at_frame = fail_at_frame
        self.aborted = False

    def open(self):
        self.calls.append('open')
        if self.fail_on == 'open':
            raise OSError("disk full")

    def write_frame(self, frame):
        self.calls.append('write_frame')
        if self.fail_on == 'write_frame' and len(self.frames) == self.fail_at_frame:
            raise OSError("encoder crashed")
        self._check_frame(frame)
        self.frames.append(frame)

    def close(self):
        self.calls.append('close')
        if self.fail_on == 'close':
            raise OSError("could not finalize")

    def abort(self):
        self.calls.append('abort')
        self.aborted = True
