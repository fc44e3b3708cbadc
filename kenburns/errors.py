"""
Exceptions raised while configuring or rendering a Ken Burns sequence.
"""

from typing import Optional


class KenBurnsError(Exception):
    pass


class ConfigurationError(KenBurnsError, ValueError):
    """Invalid configuration. Always raised before the sink is opened."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(f"{field}: {message}" if field else message)
        self.field = field


class SamplingError(KenBurnsError):
    """A viewport needs canvas pixels outside the image with edge_mode='error'."""


class SinkError(KenBurnsError):
    """The video sink failed to open, accept a frame or close."""
