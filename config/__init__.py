"""
Configuration module.
"""

from .pipeline import PipelineConfig, load_config, save_config
from .render_config import VideoConfig

__all__ = [
    'PipelineConfig',
    'load_config',
    'save_config',
    'VideoConfig',
]
