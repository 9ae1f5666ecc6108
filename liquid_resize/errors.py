"""
Exceptions raised by the seam carving core.
"""


class LiquidResizeError(Exception):
    """Base class for all liquid-resize errors."""


class InvalidDimensions(LiquidResizeError, ValueError):
    """A pixel grid was built with a pixel count that doesn't match
    width * height, or with a width/height below 1."""


class EngineUnavailable(LiquidResizeError, RuntimeError):
    """The carving session is broken (its worker died mid-run).

    The session has to be discarded and a new one loaded; nothing
    retries it.
    """
