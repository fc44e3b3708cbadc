"""
Rendering Script

Creates a Ken Burns video (a camera panning and zooming over a still image).

Configuration is loaded from config/pipeline.json.
All paths are derived from the source image name.

Modes:
    preview - Plot the crop rects over the image and export the crop schedule
    video   - Render the video
    both    - Preview, then render
"""

import argparse
import os
from pathlib import Path

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from config import load_config
from kenburns import KenBurnsConfig, KenBurnsSequence
from rendering import VideoFileExporter, load_canvas, export_crops
from rendering.visualization import plot_crops, show_canvas


def remove_if_exists(path: str):
    """Remove file if it exists to ensure fresh write."""
    p = Path(path)
    if p.exists():
        try:
            os.remove(p)
            print(f"Removed existing file: {path}")
        except OSError as e:
            print(f"Error removing {path}: {e}")


def build_sequence(pipeline) -> KenBurnsSequence:
    if not Path(pipeline.source_image).exists():
        raise FileNotFoundError(
            f"Source image not found at {pipeline.source_image}. "
            f"Set source_image in the pipeline config."
        )

    print(f"Loading {pipeline.source_image}...")
    canvas = load_canvas(pipeline.source_image, upsample=pipeline.upsample)
    print(f"  Canvas: {canvas.shape[1]}x{canvas.shape[0]}")

    return KenBurnsSequence(canvas, KenBurnsConfig.from_pipeline(pipeline))


def render_preview(pipeline, sequence: KenBurnsSequence):
    """Save the crop overlay plot and the crop schedule."""
    fig, ax = plt.subplots(figsize=(10, 8))
    show_canvas(sequence, ax)
    plot_crops(
        sequence, ax,
        n_frames=pipeline.preview_frames,
        title=pipeline.video_path.name,
        save_path=str(pipeline.preview_path)
    )
    plt.close(fig)

    export_crops(sequence.crops(), str(pipeline.crops_path))
    print(f"Exported crop schedule to {pipeline.crops_path}")


def render_video(pipeline, sequence: KenBurnsSequence):
    output_path = str(pipeline.video_path)
    remove_if_exists(output_path)

    sink = VideoFileExporter(
        output_path,
        fps=pipeline.frame_rate,
        frame_shape=sequence.frame_shape,
        video_config=pipeline.video
    )
    sequence.render(sink)
    return output_path


def main():
    parser = argparse.ArgumentParser(description="Render a Ken Burns video from a still image.")
    parser.add_argument(
        '--config',
        type=str,
        default='config/pipeline.json',
        help='Pipeline config JSON (default: config/pipeline.json)'
    )
    parser.add_argument(
        '--mode',
        type=str,
        choices=['preview', 'video', 'both'],
        default='both',
        help='Rendering mode: preview, video, or both (default: both)'
    )
    args = parser.parse_args()

    pipeline = load_config(args.config)
    pipeline.create_output_dirs()

    print(f"Rendering for: {pipeline.source_image}")
    print(f"Output: {pipeline.output_dir}")
    print(f"Mode: {args.mode}")
    print()

    sequence = build_sequence(pipeline)

    if args.mode in ('preview', 'both'):
        render_preview(pipeline, sequence)
    if args.mode in ('video', 'both'):
        render_video(pipeline, sequence)


if __name__ == '__main__':
    main()
