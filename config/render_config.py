"""
Configuration for video encoding.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

FFMPEG_SUFFIXES = ('.mp4', '.m4v', '.mov', '.mkv', '.avi', '.webm')


@dataclass
class VideoConfig:
    codec: str = 'libx264'
    quality: Optional[float] = 8  # imageio-ffmpeg scale 0-10, None = ffmpeg default
    pixelformat: str = 'yuv420p'  # browser-friendly
    macro_block_size: int = 16  # frame sizes are padded up to a multiple of this

    def writer_kwargs(self, output_path: str) -> Dict[str, Any]:
        """Extra imageio.get_writer() arguments for this output format."""
        if Path(output_path).suffix.lower() not in FFMPEG_SUFFIXES:
            return {}
        return {
            'codec': self.codec,
            'quality': self.quality,
            'pixelformat': self.pixelformat,
            'macro_block_size': self.macro_block_size,
        }
