from .block import ImageSpec, build_block
from .bmp import HEADER_SIZE, bmp_header, write_header
from .errors import (CollectiveWriteError, CoordinateOutOfRange, HeaderIOError,
                     InvalidInput, JuliaError, RenderError)
from .partition import RowRange, row_range, split_rows
from .pixel import JuliaSet, compute_julia_pixel
from .render import render_local, render_serial, render_worker

__version__ = "0.1.0"
