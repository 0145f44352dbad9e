"""
Header of the uncompressed 24-bit bitmap produced by a run.

Rows are padded to a multiple of 4 bytes and the padded length is used
both for the size fields written here and for the pixel bytes appended by
the workers.
"""
import logging
import struct
from pathlib import Path

from .block import ImageSpec
from .config import HEADER_SIZE
from .errors import HeaderIOError

logger = logging.getLogger(__name__)

DIB_HEADER_SIZE = 40
PLANES = 1
BITS_PER_PIXEL = 24
COMPRESSION_NONE = 0

# id, file size, 2 reserved shorts, pixel offset, DIB size, width, height,
# planes, bits, compression, image size, x/y resolution, colors, important colors;
# 54 bytes in total
_HEADER = struct.Struct("<2sIHHIIiiHHIIiiII")


def file_size(image: ImageSpec) -> int:
    return HEADER_SIZE + image.pixel_data_size


def bmp_header(image: ImageSpec) -> bytes:
    return _HEADER.pack(
        b"BM",
        file_size(image),
        0, 0,
        HEADER_SIZE,
        DIB_HEADER_SIZE,
        image.width,
        image.height,
        PLANES,
        BITS_PER_PIXEL,
        COMPRESSION_NONE,
        image.pixel_data_size,
        0, 0,
        0, 0,
    )


def write_header(path, image: ImageSpec) -> None:
    """Create (or truncate) ``path`` and write the header; the file is closed on return."""
    try:
        header = bmp_header(image)
    except struct.error as e:
        raise HeaderIOError(f"cannot encode a {image.width}x{image.height} bitmap header: {e}") from e
    try:
        with open(path, "wb") as f:
            written = f.write(header)
    except OSError as e:
        raise HeaderIOError(f"cannot write bitmap header to {path}: {e}") from e
    if written != HEADER_SIZE:
        raise HeaderIOError(f"short header write to {path}: {written} of {HEADER_SIZE} bytes")
    logger.debug("wrote %d-byte header for %dx%d image to %s",
                 HEADER_SIZE, image.width, image.height, Path(path))
