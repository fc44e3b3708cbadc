"""
Base video sink defining the interface the Ken Burns renderer writes to.
"""

import numpy as np
from abc import ABC, abstractmethod
from typing import Sequence, Tuple

from kenburns.errors import SinkError


class VideoSink(ABC):
    """
    Ordered frame stream: open(), write_frame() once per frame, close().
    abort() ends the stream after a failed render and discards what was written.
    """

    def __init__(self, frame_shape: Sequence[int]):
        self.frame_shape: Tuple[int, ...] = tuple(int(s) for s in frame_shape)

    @property
    def name(self) -> str:
        return type(self).__name__

    def _check_frame(self, frame: np.ndarray):
        if not isinstance(frame, np.ndarray) or frame.shape != self.frame_shape:
            shape = getattr(frame, 'shape', None)
            raise SinkError(f"{self.name} expects frames of shape {self.frame_shape}, got {shape}")

    @abstractmethod
    def open(self):
        pass

    @abstractmethod
    def write_frame(self, frame: np.ndarray):
        pass

    @abstractmethod
    def close(self):
        pass

    def abort(self):
        self.close()
