"""
Image loading for the Ken Burns renderer.
"""

import cv2
import numpy as np
from PIL import Image


def load_canvas(path: str, upsample: float = 1.0) -> np.ndarray:
    """
    Load an image as a canvas: [H, W] for grayscale, [H, W, 3] otherwise.

    For small images it can be worth upsampling before rendering; this
    keeps high zoom levels from looking blocky.
    """
    img = Image.open(path)

    if img.mode in ('1', 'L', 'LA', 'I', 'I;16', 'F'):
        img = img.convert('L')
    elif img.mode != 'RGB':
        img = img.convert('RGB')

    canvas = np.array(img)

    if upsample <= 0:
        raise ValueError(f"upsample must be positive, got {upsample}")
    if upsample != 1.0:
        canvas = cv2.resize(canvas, None, fx=upsample, fy=upsample, interpolation=cv2.INTER_CUBIC)

    return canvas
