"""
Escape-time coloring of a single pixel of the Julia set.

The renderer is a pure function of the pixel coordinate, the image
dimensions and the tint bias; any object exposing the same ``pixel``
method can replace ``JuliaSet`` in the block builder.
"""
from dataclasses import dataclass
from typing import Tuple

from .config import DEFAULT_PARAMS, TINT_BIAS, JuliaParams
from .errors import CoordinateOutOfRange

RGB = Tuple[int, int, int]


def to_byte(value: float) -> int:
    # Truncate toward zero, then wrap like an unsigned char cast
    return int(value) & 0xFF


@dataclass(frozen=True)
class JuliaSet:
    params: JuliaParams = DEFAULT_PARAMS

    def point(self, x: int, y: int, width: int, height: int) -> complex:
        p = self.params
        real = (p.x_max - p.x_min) * x / width + p.x_min
        imag = (p.y_max - p.y_min) * y / height + p.y_min
        return complex(real, imag)

    def count_iterations(self, z: complex) -> int:
        """Iteration budget left when |z| escapes; 0 means the point never escaped."""
        c = self.params.c
        limit = self.params.escape_radius * self.params.escape_radius
        remaining = self.params.max_iterations
        while z.real*z.real + z.imag*z.imag < limit and remaining > 0:
            z = z*z + c
            remaining -= 1
        return remaining

    def color(self, remaining: int, tint_bias: float) -> RGB:
        p = self.params
        if remaining == 0:
            return p.inside_color
        bias = remaining / p.max_iterations
        tint = tint_bias ** p.tint_exponent
        red = p.red_scale * tint * bias ** p.red_exponent
        green = p.green_scale * bias ** p.green_exponent
        blue = p.blue_offset + p.blue_scale * tint * bias ** p.blue_exponent
        return to_byte(red), to_byte(green), to_byte(blue)

    def pixel(self, x: int, y: int, width: int, height: int, tint_bias: float = TINT_BIAS) -> RGB:
        if x < 0 or x >= width or y < 0 or y >= height:
            raise CoordinateOutOfRange(x, y, width, height)
        if tint_bias < 0:
            raise ValueError(f"tint_bias must be non-negative, got {tint_bias}")
        return self.color(self.count_iterations(self.point(x, y, width, height)), tint_bias)


_DEFAULT_SET = JuliaSet()


def compute_julia_pixel(x: int, y: int, width: int, height: int,
                        tint_bias: float = TINT_BIAS, params: JuliaParams = DEFAULT_PARAMS) -> RGB:
    julia = _DEFAULT_SET if params is DEFAULT_PARAMS else JuliaSet(params)
    return julia.pixel(x, y, width, height, tint_bias)
