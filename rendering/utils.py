"""
Rendering utility functions.
"""

import numpy as np


def frame_to_uint8(frame: np.ndarray) -> np.ndarray:
    """
    Convert a frame to uint8 for encoding.

    Floats are taken to be in [0, 1], as frames rendered from integer images
    are. Float canvases in another range must be normalised before rendering.
    """
    if frame.dtype == np.uint8:
        return frame
    if np.issubdtype(frame.dtype, np.floating):
        return (np.clip(frame, 0, 1) * 255 + 0.5).astype(np.uint8)
    if frame.dtype == np.uint16:
        return (frame >> 8).astype(np.uint8)
    return np.clip(frame, 0, 255).astype(np.uint8)
