"""
Basic seam carving example.

Loads an image, starts a background carving engine, and saves the first
seam, the energy map, a few previews and the committed result.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import argparse
import logging
import numpy as np
from PIL import Image
import matplotlib.pyplot as plt

from liquid_resize import (PixelGrid, CarvingEngine, DEFAULT_MIN_WIDTH,
                           dual_gradient_energy, normalize_energy,
                           find_vertical_seam, mark_seam)


def load_image(path: str) -> PixelGrid:
    """Load image and convert to a pixel grid."""
    img = Image.open(path).convert('RGB')
    return PixelGrid.from_array(np.array(img))


def save_image(grid: PixelGrid, path: str):
    """Save a pixel grid as an image."""
    Image.fromarray(grid.to_array()).save(path)
    print(f"Saved: {path}")


def plot_energy_and_seam(grid: PixelGrid, path: str):
    """Side-by-side plot of the image with its first seam and the energy map."""
    energy = dual_gradient_energy(grid)
    seam = find_vertical_seam(energy)
    marked = mark_seam(grid, seam)

    fig, axes = plt.subplots(1, 2, figsize=(12, 5))
    axes[0].imshow(marked.to_array())
    axes[0].set_title('First seam')
    axes[1].imshow(normalize_energy(energy).numpy(), cmap='inferno')
    axes[1].set_title('Dual-gradient energy')
    for ax in axes:
        ax.axis('off')
    plt.tight_layout()
    plt.savefig(path, dpi=120)
    plt.close(fig)
    print(f"Saved: {path}")


def main():
    parser = argparse.ArgumentParser(description="Seam carve an image")
    parser.add_argument('image', type=str, help='Input image path')
    parser.add_argument('--output-dir', type=str, default='output',
                        help='Directory for results (default: output)')
    parser.add_argument('--min-width', type=int, default=DEFAULT_MIN_WIDTH,
                        help=f'Width at which the worker stops (default: {DEFAULT_MIN_WIDTH})')
    parser.add_argument('--keep', type=float, default=0.6,
                        help='Fraction of the width to keep in the committed result')
    parser.add_argument('--verbose', action='store_true')
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    os.makedirs(args.output_dir, exist_ok=True)

    print("Loading image...")
    grid = load_image(args.image)
    print(f"Image size: {grid.width} x {grid.height}")

    plot_energy_and_seam(grid, os.path.join(args.output_dir, 'energy_and_seam.png'))

    with CarvingEngine(grid, min_width=args.min_width) as engine:
        # Previews can be taken while the worker is still running
        for fraction in (0.9, 0.75):
            n = int(grid.width * (1 - fraction))
            done = engine.wait_for_progress(n)
            preview = engine.preview_at_seam_count(n)
            print(f"  Preview at {n} seams ({done} computed), width {preview.width}")
            save_image(preview, os.path.join(args.output_dir, f'preview_{preview.width}.png'))

        n = int(grid.width * (1 - args.keep))
        engine.wait_for_progress(n)
        result = engine.commit_at_seam_count(n)
        save_image(result, os.path.join(args.output_dir, 'carved.png'))

    print(f"\nDone! Check the {args.output_dir}/ directory for results.")


if __name__ == '__main__':
    main()
