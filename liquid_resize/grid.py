"""
Pixel grid container shared by every stage of the carving pipeline.

A grid is a row-major run of RGB pixels stored as a uint8 tensor of shape
(height * width, 3). Seams address pixels by flat offset into that run, so
the flat layout is kept instead of the (C, H, W) layout used for float images.
"""

import numpy as np
import torch
from typing import Callable, List, Sequence, Tuple

from .errors import InvalidDimensions

Pixel = Tuple[int, int, int]

# sink(width, height, pixel_bytes, has_alpha)
DisplaySink = Callable[[int, int, bytes, bool], None]


class PixelGrid:
    """Row-major RGB pixels plus their width and height."""

    def __init__(self, pixels: torch.Tensor, width: int, height: int):
        width, height = int(width), int(height)
        if width < 1 or height < 1:
            raise InvalidDimensions(f"Grid must be at least 1x1, got {width}x{height}")
        if pixels.dim() != 2 or pixels.shape[1] != 3:
            raise InvalidDimensions(
                f"Expected pixels of shape (N, 3), got {tuple(pixels.shape)}")
        if pixels.shape[0] != width * height:
            raise InvalidDimensions(
                f"{pixels.shape[0]} pixels don't fill a {width}x{height} grid")
        if pixels.dtype != torch.uint8:
            if pixels.min() < 0 or pixels.max() > 255:
                raise ValueError("Channel values must be in [0, 255]")

        self.pixels = pixels.to(torch.uint8)
        self.width = width
        self.height = height

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Pixel]]) -> 'PixelGrid':
        """Build a grid from nested rows of (r, g, b) tuples."""
        height = len(rows)
        width = len(rows[0]) if height else 0
        if height == 0 or width == 0:
            raise InvalidDimensions("Grid must have at least one row and one column")
        for i, row in enumerate(rows):
            if len(row) != width:
                raise InvalidDimensions(
                    f"Row {i} has {len(row)} pixels, expected {width}")

        flat = torch.tensor([tuple(p) for row in rows for p in row], dtype=torch.int64)
        if flat.shape[1] != 3:
            raise InvalidDimensions(f"Pixels must have 3 channels, got {flat.shape[1]}")
        return cls(flat, width, height)

    @classmethod
    def from_bytes(cls, width: int, height: int, data: bytes) -> 'PixelGrid':
        """Build a grid from packed RGB bytes (3 bytes per pixel, row-major)."""
        if len(data) != width * height * 3:
            raise InvalidDimensions(
                f"{len(data)} bytes don't hold a {width}x{height} RGB image")
        array = np.frombuffer(data, dtype=np.uint8).reshape(-1, 3).copy()
        return cls(torch.from_numpy(array), width, height)

    @classmethod
    def from_array(cls, array: np.ndarray) -> 'PixelGrid':
        """Build a grid from an (H, W, 3) uint8 array, e.g. np.array(pil_image)."""
        if array.ndim != 3 or array.shape[2] != 3:
            raise InvalidDimensions(f"Expected an (H, W, 3) array, got {array.shape}")
        H, W = array.shape[:2]
        flat = np.ascontiguousarray(array, dtype=np.uint8).reshape(H * W, 3)
        return cls(torch.from_numpy(flat.copy()), W, H)

    @classmethod
    def from_tensor(cls, image: torch.Tensor) -> 'PixelGrid':
        """
        Build a grid from a float image tensor with values in [0, 1].

        Args:
            image: RGB image tensor (3, H, W) or grayscale (H, W)

        Returns:
            PixelGrid with the same height and width
        """
        if image.dim() == 2:
            image = image.unsqueeze(0).expand(3, -1, -1)
        if image.dim() != 3 or image.shape[0] != 3:
            raise InvalidDimensions(
                f"Expected a (3, H, W) or (H, W) tensor, got {tuple(image.shape)}")

        _, H, W = image.shape
        scaled = (image.clamp(0.0, 1.0) * 255.0).round().to(torch.uint8)
        return cls(scaled.permute(1, 2, 0).reshape(H * W, 3), W, H)

    def to_rows(self) -> List[List[Pixel]]:
        rows = self.pixels.reshape(self.height, self.width, 3).tolist()
        return [[tuple(p) for p in row] for row in rows]

    def to_bytes(self) -> bytes:
        return self.pixels.contiguous().numpy().tobytes()

    def to_array(self) -> np.ndarray:
        """(H, W, 3) uint8 copy, ready for Image.fromarray."""
        return self.pixels.reshape(self.height, self.width, 3).numpy().copy()

    def to_tensor(self) -> torch.Tensor:
        """Float (3, H, W) copy with values in [0, 1]."""
        hwc = self.pixels.reshape(self.height, self.width, 3)
        return hwc.permute(2, 0, 1).float() / 255.0

    def copy(self) -> 'PixelGrid':
        return PixelGrid(self.pixels.clone(), self.width, self.height)

    def pixel(self, row: int, col: int) -> Pixel:
        return tuple(self.pixels[row * self.width + col].tolist())

    def present(self, sink: DisplaySink) -> None:
        """Hand this grid to a display sink. Grids never carry alpha."""
        sink(self.width, self.height, self.to_bytes(), False)

    def __len__(self):
        return self.width * self.height

    def __eq__(self, other):
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return (self.width == other.width and self.height == other.height
                and torch.equal(self.pixels, other.pixels))

    __hash__ = None

    def __repr__(self):
        return f"PixelGrid(width={self.width}, height={self.height})"
