"""
Host-facing session API.

A Session holds at most one CarvingEngine. Loading a new image cancels the
previous engine and waits for its worker to exit before the new one starts.
The module-level functions drive a process-wide default session.
"""

import logging
import threading
from typing import Optional

from .carving import DEFAULT_MIN_WIDTH, CarvingEngine
from .errors import EngineUnavailable
from .grid import PixelGrid

logger = logging.getLogger(__name__)


class Session:
    """Owner of the single active carving engine."""

    def __init__(self, min_width: int = DEFAULT_MIN_WIDTH):
        self.min_width = min_width
        self._engine: Optional[CarvingEngine] = None
        self._lock = threading.Lock()

    @property
    def engine(self) -> CarvingEngine:
        engine = self._engine
        if engine is None:
            raise EngineUnavailable("No image loaded")
        return engine

    def load(self, grid: PixelGrid) -> CarvingEngine:
        """Start carving a new image, tearing down any previous engine first."""
        with self._lock:
            self._shutdown()
            self._engine = CarvingEngine(grid, min_width=self.min_width)
            logger.info(f"Loaded {grid.width}x{grid.height} image")
            return self._engine

    def progress(self) -> int:
        return self.engine.progress()

    def preview_at_seam_count(self, n: int) -> PixelGrid:
        return self.engine.preview_at_seam_count(n)

    def commit_at_seam_count(self, n: int) -> PixelGrid:
        return self.engine.commit_at_seam_count(n)

    def close(self):
        with self._lock:
            self._shutdown()

    def _shutdown(self):
        # Caller holds self._lock
        if self._engine is not None:
            self._engine.cancel()
            self._engine.join()
            self._engine = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


_default_session = Session()


def load(grid: PixelGrid) -> CarvingEngine:
    """Begin a new carving session on the default session, replacing any prior one."""
    return _default_session.load(grid)


def progress(engine: CarvingEngine) -> int:
    return engine.progress()


def preview_at_seam_count(engine: CarvingEngine, n: int) -> PixelGrid:
    return engine.preview_at_seam_count(n)


def commit_at_seam_count(engine: CarvingEngine, n: int) -> PixelGrid:
    return engine.commit_at_seam_count(n)
