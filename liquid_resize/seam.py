"""
Vertical seam computation and removal.

A seam is stored as a long tensor of flat pixel offsets, one per row,
top to bottom. The column of row i is offset % width.
"""

import torch
from typing import Tuple

from .grid import PixelGrid


def _leftmost_argmin(values: torch.Tensor) -> int:
    """Index of the first minimum. Ties always go to the lowest index."""
    return int((values == values.min()).nonzero()[0])


def cumulative_energy(energy: torch.Tensor) -> torch.Tensor:
    """
    Minimum cost of any connected seam ending at each pixel.

    M[0, j] = E[0, j]
    M[i, j] = E[i, j] + min(M[i-1, j-1], M[i-1, j], M[i-1, j+1])

    Neighbours that fall off the grid are dropped. The full (H, W) table is
    kept so the seam can be traced back without storing parent pointers.

    Args:
        energy: Energy map (H, W)

    Returns:
        Cumulative cost table (H, W), same dtype as energy
    """
    H, W = energy.shape
    M = torch.empty_like(energy)
    M[0] = energy[0]

    for i in range(1, H):
        M_prev = M[i - 1]
        # Edge columns repeat themselves, which drops the missing neighbour from the min
        M_left = M_prev.clone()
        M_left[1:] = M_prev[:-1]
        M_right = M_prev.clone()
        M_right[:-1] = M_prev[1:]

        M[i] = energy[i] + torch.minimum(torch.minimum(M_left, M_prev), M_right)

    return M


def find_vertical_seam(energy: torch.Tensor) -> torch.Tensor:
    """
    Find the globally minimal vertical seam by dynamic programming.

    The bottom row picks its leftmost minimum; each row above picks the
    leftmost minimum among the two or three cells adjacent to the column
    chosen below it. Ties always break left, so symmetric inputs give
    reproducible seams.

    Args:
        energy: Energy map (H, W)

    Returns:
        Seam as flat offsets (H,), top to bottom
    """
    H, W = energy.shape
    M = cumulative_energy(energy)

    col = _leftmost_argmin(M[H - 1])
    offsets = [(H - 1) * W + col]

    for i in range(H - 1, 0, -1):
        lo = max(0, col - 1)
        hi = min(W - 1, col + 1)
        col = lo + _leftmost_argmin(M[i - 1, lo:hi + 1])
        offsets.append((i - 1) * W + col)

    offsets.reverse()
    return torch.tensor(offsets, dtype=torch.long)


def seam_columns(seam: torch.Tensor, width: int) -> torch.Tensor:
    """Column index per row for a seam of flat offsets."""
    return seam % width


def seam_cost(energy: torch.Tensor, seam: torch.Tensor) -> int:
    """Total energy along a seam."""
    return int(energy.reshape(-1)[seam].sum().item())


def remove_seam(grid: PixelGrid, seam: torch.Tensor) -> PixelGrid:
    """
    Remove a vertical seam from a grid.

    One pass over the flat pixel run keeps every pixel whose offset is not
    in the seam. The seam is trusted: offsets must be one per row, in
    ascending order and in range.

    Args:
        grid: PixelGrid (H x W)
        seam: Flat offsets (H,)

    Returns:
        New PixelGrid (H x W-1)
    """
    keep = torch.ones(grid.height * grid.width, dtype=torch.bool)
    keep[seam] = False
    return PixelGrid(grid.pixels[keep], grid.width - 1, grid.height)


def mark_seam(grid: PixelGrid, seam: torch.Tensor,
              color: Tuple[int, int, int] = (255, 0, 0)) -> PixelGrid:
    """Copy of the grid with the seam's pixels painted (for visualization only)."""
    marked = grid.copy()
    marked.pixels[seam] = torch.tensor(color, dtype=torch.uint8)
    return marked
