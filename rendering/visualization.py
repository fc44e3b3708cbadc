"""
Preview of a Ken Burns schedule: the crop rects drawn over the canvas.
"""

import matplotlib.pyplot as plt
import numpy as np
from pathlib import Path
from typing import Optional

from kenburns import KenBurnsSequence


def show_canvas(sequence: KenBurnsSequence, ax=None):
    """Draw the source canvas."""
    if ax is None:
        ax = plt.gca()
    cmap = 'gray' if sequence.canvas.ndim == 2 else None
    return ax.imshow(sequence.canvas, cmap=cmap)


def plot_crops(
    sequence: KenBurnsSequence,
    ax=None,
    n_frames: int = 25,
    cmap: str = 'viridis',
    title: Optional[str] = None,
    save_path: Optional[str] = None,
    show: bool = False
):
    """
    Outline the viewport of up to n_frames frames on the canvas axes.

    Returns the line handles, first frame first.
    """
    preview = sequence.preview_rects(n_frames)
    canvas_h, canvas_w = sequence.canvas.shape[:2]
    frame_h, frame_w = sequence.config.frame_size
    scale0 = sequence.base_scale

    if ax is None:
        ax = plt.gca()

    ax.set_aspect('equal')
    ax.set_xlim(1, canvas_w)
    ax.set_ylim(canvas_h, 1)  # image convention: y grows downwards
    if title:
        ax.set_title(title)

    colormap = plt.get_cmap(cmap)
    frames = preview.frame_indices
    last = max(int(frames[-1]), 1)

    handles = []
    for k, rect in zip(frames, preview):
        w = frame_w / scale0 * rect.scale
        h = frame_h / scale0 * rect.scale
        x = rect.x + np.array([0, 0, 1, 1, 0]) * w
        y = rect.y + np.array([0, 1, 1, 0, 0]) * h
        color = colormap((int(k) - int(frames[0])) / last)
        (line,) = ax.plot(x, y, color=color, label=f'Frame {int(k) + 1}')
        handles.append(line)

    ax.legend([handles[0], handles[-1]], ['Start', 'End'], loc='upper left', bbox_to_anchor=(1.02, 1.0))

    if save_path:
        Path(save_path).parent.mkdir(parents=True, exist_ok=True)
        ax.figure.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Saved preview to {save_path}")

    if show:
        plt.show()
    return handles
