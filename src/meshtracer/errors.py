"""Exception types raised by meshtracer.

Geometry evaluated inside Taichi kernels never raises: degenerate triangles
are reported as misses there. These exceptions cover host-side parsing and
the NumPy geometry helpers.
"""


class MeshTracerError(Exception):
    """Base class for all meshtracer errors."""


class MeshFormatError(MeshTracerError, ValueError):
    """Raised when mesh input cannot be parsed or references invalid data.

    Attributes:
        line_number: 1-based line number of the offending record, or None
            when the error is not tied to a single line.
    """

    def __init__(self, message: str, line_number: int | None = None) -> None:
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class DegenerateVectorError(MeshTracerError, ArithmeticError):
    """Raised when a zero-length vector is used where a direction is required."""


class DegenerateTriangleError(MeshTracerError, ArithmeticError):
    """Raised when barycentric coordinates are requested for a zero-area triangle."""
