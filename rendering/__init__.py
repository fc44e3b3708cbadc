"""
Collaborators around the Ken Burns core: image loading, video sinks,
crop schedule export and preview plots.
"""

from config.render_config import VideoConfig
from .base import VideoSink
from .exporters import (
    VideoFileExporter,
    FrameCollector,
    save_frame_as_image,
    export_crops,
    load_crops
)
from .images import load_canvas
from .utils import frame_to_uint8
