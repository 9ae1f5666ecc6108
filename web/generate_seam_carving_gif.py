#!/usr/bin/env python3
"""
Generate a GIF showing an image being seam carved, with the next seam
to be removed overlaid at each step.
"""

import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import argparse
import numpy as np
from PIL import Image

from liquid_resize import CarvingEngine, DEFAULT_MIN_WIDTH, PixelGrid, mark_seam


def render_frame(engine, n, canvas_width, show_seams=False):
    """Preview after n seams, padded on the right to the original width."""
    preview = engine.preview_at_seam_count(n)
    if show_seams and n < engine.progress():
        preview = mark_seam(preview, engine.seams(n + 1)[n])

    frame = Image.new('RGB', (canvas_width, preview.height), (255, 255, 255))
    frame.paste(Image.fromarray(preview.to_array()), (0, 0))
    return frame


def generate_gif(image_path, output_path, step=5, fps=10, min_width=DEFAULT_MIN_WIDTH,
                 show_seams=False):
    """
    Generate a GIF of the carving progress.

    Args:
        image_path: Input image
        output_path: Path to save the output GIF
        step: Seams removed between frames
        fps: Frames per second for the GIF
        min_width: Width at which carving stops
        show_seams: If True, overlay the next seam on each frame
    """
    img = Image.open(image_path).convert('RGB')
    grid = PixelGrid.from_array(np.array(img))

    label = "with seams" if show_seams else "clean"
    print(f"Carving {image_path} ({grid.width}x{grid.height}, {label})...")

    frames = []
    with CarvingEngine(grid, min_width=min_width) as engine:
        engine.join()
        total = engine.progress()

        for n in range(0, total + 1, step):
            frames.append(render_frame(engine, n, grid.width, show_seams))
            if (n // step + 1) % 10 == 0:
                print(f"  Processed {n}/{total} seams")

    if not frames:
        print("Error: No frames were generated")
        sys.exit(1)

    duration = int(1000 / fps)

    print(f"Saving GIF to {output_path}...")
    frames[0].save(
        output_path,
        save_all=True,
        append_images=frames[1:],
        duration=duration,
        loop=0,
        optimize=False
    )

    print(f" GIF created successfully: {output_path}")
    print(f"  Frames: {len(frames)}, Duration: {len(frames) * duration / 1000:.1f}s")


def main():
    parser = argparse.ArgumentParser(
        description="Generate a GIF of seam carving progress"
    )
    parser.add_argument('image', type=str, help='Input image path')
    parser.add_argument(
        '--output',
        type=str,
        help='Output GIF filename (default: {image_name}.gif)'
    )
    parser.add_argument(
        '--step',
        type=int,
        default=5,
        help='Seams removed between frames (default: 5)'
    )
    parser.add_argument(
        '--fps',
        type=int,
        default=10,
        help='Frames per second (default: 10)'
    )
    parser.add_argument(
        '--min-width',
        type=int,
        default=DEFAULT_MIN_WIDTH,
        help=f'Width at which carving stops (default: {DEFAULT_MIN_WIDTH})'
    )
    parser.add_argument(
        '--seams',
        action='store_true',
        help='Overlay the next seam on each frame (default: clean image)'
    )

    args = parser.parse_args()

    if not os.path.exists(args.image):
        print(f"Error: {args.image} not found")
        sys.exit(1)

    name = os.path.splitext(os.path.basename(args.image))[0]
    output = args.output or f"{name}.gif"
    generate_gif(args.image, output, step=max(1, args.step), fps=args.fps,
                 min_width=args.min_width, show_seams=args.seams)


if __name__ == "__main__":
    main()
