"""
Video sinks and exporters for rendered Ken Burns frames.
Keeps the renderer decoupled from files and codecs.
"""

import json
import numpy as np
import imageio
from pathlib import Path
from typing import List, Optional, Sequence

from config.render_config import VideoConfig
from kenburns.errors import SinkError
from kenburns.rect import Rect
from .base import VideoSink
from .utils import frame_to_uint8


class VideoFileExporter(VideoSink):
    """
    Streams frames to a video file through imageio's ffmpeg writer.

    Float frames are expected in [0, 1] and converted to uint8.
    abort() closes the writer and deletes the partial file.
    """

    def __init__(self, output_path: str, fps: float, frame_shape: Sequence[int],
                 video_config: VideoConfig = None):
        super().__init__(frame_shape)
        self.output_path = Path(output_path)
        self.fps = fps
        self.video_config = video_config or VideoConfig()
        self._writer = None
        self.frames_written = 0

    @property
    def name(self) -> str:
        return str(self.output_path)

    def open(self):
        if self._writer is not None:
            raise SinkError(f"{self.name} is already open")
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._writer = imageio.get_writer(
            str(self.output_path),
            fps=self.fps,
            **self.video_config.writer_kwargs(str(self.output_path))
        )
        self.frames_written = 0

    def write_frame(self, frame: np.ndarray):
        if self._writer is None:
            raise SinkError(f"{self.name} is not open")
        self._check_frame(frame)
        self._writer.append_data(frame_to_uint8(frame))
        self.frames_written += 1

    def close(self):
        if self._writer is None:
            raise SinkError(f"{self.name} is not open")
        writer, self._writer = self._writer, None
        writer.close()
        print(f"Saved video: {self.output_path}")
        print(f"  Total frames: {self.frames_written}")
        print(f"  Duration: {self.frames_written / self.fps:.2f}s at {self.fps:g} fps")

    def abort(self):
        writer, self._writer = self._writer, None
        try:
            if writer is not None:
                writer.close()
        finally:
            if self.output_path.exists():
                self.output_path.unlink()
                print(f"Removed partial video: {self.output_path}")


class FrameCollector(VideoSink):
    """In-memory sink; keeps every frame written, in order."""

    def __init__(self, frame_shape: Sequence[int]):
        super().__init__(frame_shape)
        self.frames: List[np.ndarray] = []
        self.is_open = False
        self.closed = False
        self.aborted = False

    def open(self):
        if self.is_open:
            raise SinkError("FrameCollector is already open")
        self.frames = []
        self.is_open = True
        self.closed = False
        self.aborted = False

    def write_frame(self, frame: np.ndarray):
        if not self.is_open:
            raise SinkError("FrameCollector is not open")
        self._check_frame(frame)
        self.frames.append(np.array(frame, copy=True))

    def close(self):
        if not self.is_open:
            raise SinkError("FrameCollector is not open")
        self.is_open = False
        self.closed = True

    def abort(self):
        self.frames = []
        self.is_open = False
        self.aborted = True


def save_frame_as_image(frame: np.ndarray, output_path: str):
    """Save a single rendered frame (e.g. PNG)."""
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    imageio.imwrite(output_path, frame_to_uint8(frame))


def export_crops(crops: Sequence[Rect], output_path: str, frame_indices: Optional[Sequence[int]] = None):
    """
    Export a crop schedule to JSON, e.g. for an external previewer.

    Format:
    {
        "num_crops": int,
        "crops": [
            {"frame": int, "x": float, "y": float, "scale": float}
        ]
    }
    """
    if frame_indices is None:
        frame_indices = range(len(crops))

    data = {
        "num_crops": len(crops),
        "crops": [
            {"frame": int(k), "x": rect.x, "y": rect.y, "scale": rect.scale}
            for k, rect in zip(frame_indices, crops)
        ]
    }

    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w') as f:
        json.dump(data, f, indent=2)

    return data


def load_crops(path: str) -> List[Rect]:
    with open(path, 'r') as f:
        data = json.load(f)
    return [Rect(c["x"], c["y"], c["scale"]) for c in data["crops"]]
