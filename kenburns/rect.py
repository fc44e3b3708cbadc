"""
Viewport rectangle in canvas space.
"""

from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np


@dataclass(frozen=True)
class Rect:
    """
    Viewport descriptor (x, y, scale).

    x, y are the 1-based canvas coordinates of the top-left corner.
    scale is relative to the base scale: 1 shows the whole canvas,
    smaller values zoom in.
    """
    x: float
    y: float
    scale: float

    def __repr__(self) -> str:
        return f"Rect({self.x:.2f}, {self.y:.2f}, {self.scale:.3f})"

    def lerp(self, other: 'Rect', w: float) -> 'Rect':
        """Affine blend; w=0 gives self and w=1 gives other exactly."""
        return Rect(
            (1.0 - w) * self.x + w * other.x,
            (1.0 - w) * self.y + w * other.y,
            (1.0 - w) * self.scale + w * other.scale,
        )

    def isclose(self, other: 'Rect', atol: float = 1e-9) -> bool:
        return bool(np.allclose(self.to_array(), other.to_array(), rtol=0.0, atol=atol))

    def to_tuple(self) -> tuple:
        return (self.x, self.y, self.scale)

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.scale], dtype=np.float64)

    @classmethod
    def from_value(cls, value: Union['Rect', Sequence[float], np.ndarray]) -> 'Rect':
        """Accept a Rect or any 3-element sequence."""
        if isinstance(value, Rect):
            return value
        arr = np.asarray(value, dtype=np.float64).reshape(-1)
        if arr.size != 3:
            raise ValueError(f"Expected 3 values (x, y, scale), got {arr.size}")
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))
