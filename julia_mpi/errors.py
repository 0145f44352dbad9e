class JuliaError(Exception):
    """Base class of every fatal condition of a render run."""


class InvalidInput(JuliaError):
    """Missing, non-integer or non-positive image height."""


class CoordinateOutOfRange(JuliaError):
    """A pixel outside the image was requested (internal invariant violation)."""

    def __init__(self, x: int, y: int, width: int, height: int):
        super().__init__(f"Invalid ({x},{y}) pixel coordinates in a {width} x {height} image")
        self.x = x
        self.y = y
        self.width = width
        self.height = height


class HeaderIOError(JuliaError):
    """The bitmap header could not be created or written."""


class CollectiveWriteError(JuliaError):
    """A participant failed to open or append to the shared output file."""


class RenderError(JuliaError):
    """A local worker process terminated abnormally."""
