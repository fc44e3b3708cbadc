"""
Unified configuration for the Ken Burns rendering pipeline.

All output paths are derived from the source image path.
This is the single source of truth for render.py.
"""

from dataclasses import dataclass, field, asdict
from typing import List, Optional, Union
from pathlib import Path
import json

from .render_config import VideoConfig


@dataclass
class PipelineConfig:
    """
    Settings for one Ken Burns video. Output paths are derived from
    source_image; rects are [x, y, scale] in canvas space.
    """

    # ==================== MAIN SETTING ====================
    source_image: str = 'images/source.png'
    upsample: float = 1.0  # >1 for small images, reduces blockiness when zooming

    # ==================== OUTPUT SETTINGS ====================
    output_base: str = 'outputs'
    video_suffix: str = '.mp4'

    # ==================== TIMING ====================
    duration: float = 3.0  # seconds
    frame_rate: float = 25.0

    # ==================== GEOMETRY ====================
    frame_height: int = 240
    frame_width: int = 320

    # None = full canvas / zoom into the top-left area
    start_rect: Optional[List[float]] = None
    end_rect: Optional[List[float]] = None

    # Warp names applied outermost first: ["cos", "back_forth"] = cos(back_forth(t))
    translation: Union[str, List[str]] = 'sin'

    # ==================== RESAMPLING ====================
    method: str = 'gridded'  # 'crop' and 'translate' are deprecated
    interpolation_order: int = 1
    edge_mode: str = 'clamp'

    antialias: bool = False
    filter_kernel_size: float = 0.5
    filter_bucket: float = 0.05

    # ==================== VIDEO ====================
    video: VideoConfig = field(default_factory=VideoConfig)

    # ==================== MISC ====================
    workers: int = 0
    preview_frames: int = 25
    profile: bool = False

    # ==================== DERIVED PATHS ====================
    @property
    def image_name(self) -> str:
        return Path(self.source_image).stem

    @property
    def output_dir(self) -> Path:
        return Path(self.output_base) / 'kenburns'

    @property
    def video_path(self) -> Path:
        return self.output_dir / f'{self.image_name}_kenburns{self.video_suffix}'

    @property
    def preview_path(self) -> Path:
        return self.output_dir / f'{self.image_name}_preview.png'

    @property
    def crops_path(self) -> Path:
        return self.output_dir / f'{self.image_name}_crops.json'

    @property
    def frame_size(self):
        return (self.frame_height, self.frame_width)

    # ==================== DIRECTORY CREATION ====================
    def create_output_dirs(self):
        self.output_dir.mkdir(parents=True, exist_ok=True)


def load_config(path: str = 'config/pipeline.json') -> PipelineConfig:
    """Load config from JSON file, with defaults for missing fields."""
    config_path = Path(path)
    if not config_path.exists():
        return PipelineConfig()

    with open(config_path, 'r') as f:
        data = json.load(f)

    if 'video' in data:
        data['video'] = VideoConfig(**data['video'])

    return PipelineConfig(**data)


def save_config(config: PipelineConfig, path: str = 'config/pipeline.json'):
    """Save config to JSON file."""
    config_path = Path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w') as f:
        json.dump(asdict(config), f, indent=2)

    print(f"Saved config to {config_path}")
