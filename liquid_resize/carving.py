"""
High-level carving: the background worker that precomputes seams and the
replay used to preview or commit any intermediate width.

The worker owns its working grid outright. The only thing it shares with
other threads is the SeamHistory, which only ever grows. Previews never look
at the working grid: they replay the first n seams over a fresh copy of the
original image.
"""

import logging
import threading
import torch
from typing import List, Optional, Sequence, Tuple

from .energy import dual_gradient_energy
from .errors import EngineUnavailable
from .grid import PixelGrid
from .seam import find_vertical_seam, remove_seam

logger = logging.getLogger(__name__)

DEFAULT_MIN_WIDTH = 10


def carve_image(grid: PixelGrid, n_seams: int) -> Tuple[PixelGrid, List[torch.Tensor]]:
    """
    Remove n_seams vertical seams on the calling thread.

    Args:
        grid: PixelGrid to carve (left untouched)
        n_seams: Number of seams to remove, capped so at least one column remains

    Returns:
        (carved grid, seams in removal order)
    """
    carved = grid.copy()
    seams = []

    for i in range(min(n_seams, grid.width - 1)):
        energy = dual_gradient_energy(carved)
        seam = find_vertical_seam(energy)
        carved = remove_seam(carved, seam)
        seams.append(seam)

    return carved, seams


def replay_seams(original: PixelGrid, seams: Sequence[torch.Tensor]) -> PixelGrid:
    """Apply recorded seams, in order, to a copy of the original grid."""
    carved = original.copy()
    for seam in seams:
        carved = remove_seam(carved, seam)
    return carved


class SeamHistory:
    """
    Append-only, lock-guarded list of seams.

    Entry i is valid for a grid of width original_width - i. Readers always
    see a prefix of what the worker will eventually produce.
    """

    def __init__(self):
        self._seams: List[torch.Tensor] = []
        self._cond = threading.Condition(threading.Lock())
        self._closed = False
        self._error: Optional[BaseException] = None

    def _check(self):
        # Caller holds the lock
        if self._error is not None:
            raise EngineUnavailable(
                f"Carving worker failed after {len(self._seams)} seams"
            ) from self._error

    def append(self, seam: torch.Tensor):
        with self._cond:
            self._seams.append(seam)
            self._cond.notify_all()

    def close(self, error: Optional[BaseException] = None):
        """Mark the history complete. With an error, the history is broken for good."""
        with self._cond:
            self._closed = True
            self._error = error
            self._cond.notify_all()

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    @property
    def broken(self) -> bool:
        with self._cond:
            return self._error is not None

    def __len__(self):
        with self._cond:
            self._check()
            return len(self._seams)

    def snapshot(self, n: Optional[int] = None) -> List[torch.Tensor]:
        """Copy of the first n entries, n clamped to [0, len]."""
        with self._cond:
            self._check()
            if n is None:
                n = len(self._seams)
            n = max(0, min(n, len(self._seams)))
            return list(self._seams[:n])

    def wait_for(self, n: int, timeout: Optional[float] = None) -> int:
        """Block until at least n entries exist or the history is closed."""
        with self._cond:
            self._cond.wait_for(lambda: len(self._seams) >= n or self._closed,
                                timeout=timeout)
            self._check()
            return len(self._seams)


class CarvingEngine:
    """
    One carving session for one image.

    Construction copies the image and starts a worker thread that removes
    seams until the image is min_width columns wide or the session is
    cancelled. Any width between the original and the current progress can
    be previewed or committed at any time without waiting on the worker.

    Args:
        grid: Original image
        min_width: Width floor at which the worker stops
        start: Start the worker immediately
    """

    def __init__(self, grid: PixelGrid, min_width: int = DEFAULT_MIN_WIDTH,
                 start: bool = True):
        self._original = grid.copy()
        self.min_width = max(1, int(min_width))
        self.history = SeamHistory()
        self._cancel = threading.Event()
        self._started = False
        self._final: Optional[PixelGrid] = None
        self._thread = threading.Thread(target=self._run, name="carving-worker",
                                        daemon=True)
        if start:
            self.start()

    @property
    def original(self) -> PixelGrid:
        """A copy of the original image."""
        return self._original.copy()

    @property
    def original_width(self) -> int:
        return self._original.width

    @property
    def height(self) -> int:
        return self._original.height

    @property
    def max_seams(self) -> int:
        """Number of seams the worker produces if it isn't cancelled."""
        return max(0, self.original_width - self.min_width)

    @property
    def is_running(self) -> bool:
        return self._thread.is_alive()

    @property
    def is_finished(self) -> bool:
        return self.history.closed

    def start(self):
        self._started = True
        self._thread.start()

    def _run(self):
        try:
            working = self._original.copy()
            logger.info(f"Carving {working.width}x{working.height} image "
                        f"down to {self.min_width} columns")
            while working.width > self.min_width:
                if self._cancel.is_set():
                    logger.info(f"Carving cancelled after {len(self.history)} seams")
                    break
                energy = dual_gradient_energy(working)
                seam = find_vertical_seam(energy)
                self.history.append(seam)
                working = remove_seam(working, seam)
                logger.debug(f"Seam {len(self.history)} removed, width {working.width}")
        except Exception as e:
            logger.exception(f"Carving worker failed: {e}")
            self.history.close(error=e)
        else:
            self._final = working
            if working.width <= self.min_width:
                logger.info(f"Carving finished: {self.max_seams} seams computed")
            self.history.close()

    def cancel(self):
        """Ask the worker to stop after its current seam."""
        self._cancel.set()

    def join(self, timeout: Optional[float] = None):
        if self._thread.is_alive():
            self._thread.join(timeout)

    def progress(self) -> int:
        """Number of seams computed so far."""
        return len(self.history)

    def wait_for_progress(self, n: int, timeout: Optional[float] = None) -> int:
        """
        Block until n seams exist, the worker stops, or the timeout expires.

        n is capped at max_seams so asking for more than the worker will ever
        produce returns once it finishes.

        An engine that was never started returns its progress straight away.

        Returns:
            Progress at the time of return
        """
        if not self._started:
            return self.progress()
        return self.history.wait_for(min(n, self.max_seams), timeout=timeout)

    def final_grid(self) -> Optional[PixelGrid]:
        """
        Copy of the worker's own working grid once it has stopped.

        None while the worker is running, before it starts, or if it failed.
        """
        if self._thread.is_alive() or not self.is_finished or self._final is None:
            return None
        return self._final.copy()

    def seams(self, n: Optional[int] = None) -> List[torch.Tensor]:
        """Copies of the first n seams (all computed seams if n is None)."""
        return [seam.clone() for seam in self.history.snapshot(n)]

    def preview_at_seam_count(self, n: int) -> PixelGrid:
        """
        Image after removing the first n seams.

        n is clamped to [0, progress()]; asking ahead of the worker returns
        the latest available width instead of waiting.

        Returns:
            PixelGrid of width original_width - clamp(n, 0, progress())
        """
        seams = self.history.snapshot(n)
        return replay_seams(self._original, seams)

    def commit_at_seam_count(self, n: int) -> PixelGrid:
        """Same as preview_at_seam_count, for the result the caller keeps."""
        result = self.preview_at_seam_count(n)
        logger.info(f"Committed {self.original_width - result.width} seams, "
                    f"width {result.width}")
        return result

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.cancel()
        self.join()
        return False

    def __repr__(self):
        return f"CarvingEngine({self.original_width}x{self.height}, min_width={self.min_width})"
