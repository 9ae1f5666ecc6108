"""Shared test fixtures for liquid-resize test suite."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import torch
import pytest
from liquid_resize.grid import PixelGrid


@pytest.fixture
def random_grid():
    """Seeded 24x40 random RGB grid."""
    return make_random_grid(24, 40, seed=42)


@pytest.fixture
def bright_column_grid():
    """3x3 grid: black columns 0 and 2, grey column 1."""
    dark, bright = (0, 0, 0), (10, 10, 10)
    return PixelGrid.from_rows([[dark, bright, dark]] * 3)


def make_random_grid(H, W, seed=0):
    """Uniform random RGB noise."""
    gen = torch.Generator().manual_seed(seed)
    pixels = torch.randint(0, 256, (H * W, 3), generator=gen, dtype=torch.uint8)
    return PixelGrid(pixels, W, H)


def make_solid_grid(H, W, color=(128, 64, 32)):
    """Single-colour grid."""
    pixels = torch.tensor(color, dtype=torch.uint8).expand(H * W, 3).clone()
    return PixelGrid(pixels, W, H)


def make_index_grid(H, W):
    """Grid whose red channel holds the column index and green the row index."""
    rows = [[(c, r, 0) for c in range(W)] for r in range(H)]
    return PixelGrid.from_rows(rows)
