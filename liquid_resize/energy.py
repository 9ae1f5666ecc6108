"""
Energy functions for seam carving.

The energy function determines which pixels are "important".
Low-energy seams are preferred for removal.

We use the dual-gradient energy: squared RGB differences between the
left/right and above/below neighbours of each pixel.
"""

import torch

from .grid import PixelGrid


def dual_gradient_energy(grid: PixelGrid) -> torch.Tensor:
    """
    Compute dual-gradient energy for a pixel grid.

    E(r, c) = sum_ch (L - R)^2 + sum_ch (A - B)^2

    where L/R are the left/right neighbours and A/B the pixels above/below.
    A pixel on the border stands in for its own missing neighbour, so an
    edge column only sees half of the horizontal difference. No wraparound.

    Args:
        grid: PixelGrid (H x W RGB)

    Returns:
        Energy map (H, W), int64, non-negative
    """
    H, W = grid.height, grid.width
    img = grid.pixels.reshape(H, W, 3).to(torch.int64)

    # Border pixels duplicate themselves in place of the missing neighbour
    left = img.clone()
    left[:, 1:] = img[:, :-1]

    right = img.clone()
    right[:, :-1] = img[:, 1:]

    above = img.clone()
    above[1:, :] = img[:-1, :]

    below = img.clone()
    below[:-1, :] = img[1:, :]

    x_diff = ((left - right) ** 2).sum(dim=-1)
    y_diff = ((above - below) ** 2).sum(dim=-1)

    return x_diff + y_diff


def normalize_energy(energy: torch.Tensor, eps: float = 1e-8) -> torch.Tensor:
    """Remap energy to [0, 1] for display.

    This is a monotonic transform so seam positions are unchanged.

    Args:
        energy: Energy map (H, W)
        eps: Small value to avoid division by zero

    Returns:
        Normalized float energy map in [0, 1]
    """
    energy = energy.float()
    e_min = energy.min()
    e_max = energy.max()
    return (energy - e_min) / (e_max - e_min + eps)
