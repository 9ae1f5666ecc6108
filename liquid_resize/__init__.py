"""
Content-aware image resizing by vertical seam carving.

A background worker precomputes minimum-energy seams so any intermediate
width can be previewed or committed by replaying them over the original.
"""

__version__ = "0.1.0"

from .errors import LiquidResizeError, InvalidDimensions, EngineUnavailable
from .grid import PixelGrid
from .energy import dual_gradient_energy, normalize_energy
from .seam import (cumulative_energy, find_vertical_seam, remove_seam,
                   seam_columns, seam_cost, mark_seam)
from .carving import (
    DEFAULT_MIN_WIDTH,
    SeamHistory,
    CarvingEngine,
    carve_image,
    replay_seams,
)
from .session import Session

__all__ = [
    'LiquidResizeError',
    'InvalidDimensions',
    'EngineUnavailable',
    'PixelGrid',
    'dual_gradient_energy',
    'normalize_energy',
    'cumulative_energy',
    'find_vertical_seam',
    'remove_seam',
    'seam_columns',
    'seam_cost',
    'mark_seam',
    'DEFAULT_MIN_WIDTH',
    'SeamHistory',
    'CarvingEngine',
    'carve_image',
    'replay_seams',
    'Session',
]
