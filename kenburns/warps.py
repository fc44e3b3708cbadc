"""
Time-warp functions mapping normalized progress [0, 1] to the
interpolation parameter used for the viewport rect.

Warps are plain callables and work on floats as well as numpy arrays.
Output is not clamped, so compositions may overshoot.
"""

from functools import reduce
from typing import Callable, Dict, List, Sequence, Union

import numpy as np


TimeWarp = Callable[[float], float]


def linear(t):
    return t


def ease_sin(t):
    """Fast start, slow end."""
    return np.sin(np.pi / 2 * t)


def ease_cos(t):
    """Slow start and end."""
    return 0.5 - 0.5 * np.cos(np.pi * t)


def back_forth(t):
    """Go to the end rect at t=0.5 and come back."""
    t = np.asarray(t, dtype=np.float64)
    out = 2 * t * (t < 0.5) + (2 - 2 * t) * (t >= 0.5)
    return out if out.ndim else float(out)


def compose(*warps: TimeWarp) -> TimeWarp:
    """compose(f, g)(t) == f(g(t))"""
    if not warps:
        return linear
    return reduce(lambda f, g: lambda t: f(g(t)), warps)


WARPS: Dict[str, TimeWarp] = {
    'linear': linear,
    'sin': ease_sin,
    'cos': ease_cos,
    'back_forth': back_forth,
}


def get_warp(warp: Union[str, Sequence[str], None]) -> TimeWarp:
    """
    Resolve a warp from its name, or from a list of names applied
    outermost first: ['cos', 'back_forth'] -> cos(back_forth(t)).
    """
    if warp is None:
        return ease_sin
    names: List[str] = [warp] if isinstance(warp, str) else list(warp)
    unknown = [n for n in names if n not in WARPS]
    if unknown:
        raise KeyError(f"Unknown time warp(s) {unknown}, choose from {sorted(WARPS)}")
    return compose(*(WARPS[n] for n in names))
