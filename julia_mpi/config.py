import os
import logging
from dataclasses import dataclass
from typing import Tuple

# Output is always written to the working directory and replaced on every run
OUTFILE = "out_julia_mpi.bmp"

# Bitmap header length, and the largest file its unsigned 32-bit size field can describe
HEADER_SIZE = 54
MAX_FILE_SIZE = 0xFFFFFFFF

# Default tint used by the renderer, as in every run of the original program
TINT_BIAS = 1.0


@dataclass(frozen=True)
class JuliaParams:
    """Constants of the Julia-set view and of its coloring curves."""
    # "Zoom in" to a pleasing view of the Julia set
    x_min: float = -1.6
    x_max: float = 1.6
    y_min: float = -0.9
    y_max: float = 0.9

    # Point that defines the Julia set
    c_real: float = -0.79
    c_imag: float = 0.15

    max_iterations: int = 300
    escape_radius:  float = 2.0

    # Shaping curves: channel = scale * tint**tint_exponent * bias**exponent
    tint_exponent:  float = 1.2
    red_scale:      float = -500.0
    red_exponent:   float = 1.6
    green_scale:    float = -255.0
    green_exponent: float = 0.3
    blue_offset:    float = 255.0
    blue_scale:     float = -255.0
    blue_exponent:  float = 3.0

    # Flat color for points that never escape
    inside_color: Tuple[int, int, int] = (200, 100, 100)

    def __post_init__(self):
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be positive, got {self.max_iterations}")
        if self.x_max <= self.x_min or self.y_max <= self.y_min:
            raise ValueError("viewport bounds must satisfy min < max")

    @property
    def c(self) -> complex:
        return complex(self.c_real, self.c_imag)


DEFAULT_PARAMS = JuliaParams()


def log_level() -> int:
    """Level for the package loggers, taken from JULIA_LOG_LEVEL (name or number)."""
    value = os.environ.get("JULIA_LOG_LEVEL", "INFO").strip()
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value.upper())
    return level if isinstance(level, int) else logging.INFO
