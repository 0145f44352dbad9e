import numpy as np
from dataclasses import dataclass
from typing import Optional

from .config import HEADER_SIZE, MAX_FILE_SIZE, TINT_BIAS
from .partition import RowRange
from .pixel import JuliaSet

BYTES_PER_PIXEL = 3


@dataclass(frozen=True)
class ImageSpec:
    width:  int
    height: int

    def __post_init__(self):
        if self.height < 1 or self.width != 2 * self.height:
            raise ValueError(f"expected width = 2 * height >= 2, got {self.width}x{self.height}")
        if HEADER_SIZE + self.pixel_data_size > MAX_FILE_SIZE:
            raise ValueError(f"a {self.width}x{self.height} bitmap exceeds the {MAX_FILE_SIZE}-byte format limit")

    @classmethod
    def from_height(cls, height: int) -> "ImageSpec":
        return cls(width=2 * height, height=height)

    @property
    def row_bytes(self) -> int:
        return self.width * BYTES_PER_PIXEL

    @property
    def padded_row_bytes(self) -> int:
        # Bitmap rows are aligned on 4 bytes
        return (self.row_bytes + 3) // 4 * 4

    @property
    def pixel_data_size(self) -> int:
        return self.padded_row_bytes * self.height

    def block_size(self, rows: RowRange) -> int:
        return len(rows) * self.padded_row_bytes


def build_block(image: ImageSpec, rows: RowRange, tint_bias: float = TINT_BIAS,
                julia: Optional[JuliaSet] = None) -> np.ndarray:
    """
    Render the rows of ``rows`` into a (len(rows), padded_row_bytes) uint8 array.

    Rows are visited top to bottom and columns left to right; each pixel
    takes 3 consecutive bytes, and the bytes between row_bytes and
    padded_row_bytes stay zero.
    """
    julia = julia or JuliaSet()
    block = np.zeros((len(rows), image.padded_row_bytes), dtype=np.uint8)

    for local_y, y in enumerate(rows):
        line = block[local_y]
        for x in range(image.width):
            line[3*x:3*x + 3] = julia.pixel(x, y, image.width, image.height, tint_bias)

    return block
