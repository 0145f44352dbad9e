import struct
from types import SimpleNamespace

import pytest

from julia_mpi.block import ImageSpec
from julia_mpi.bmp import HEADER_SIZE, bmp_header, file_size, write_header
from julia_mpi.errors import HeaderIOError


def unpack(header):
    return struct.unpack("<2sIHHIIiiHHIIiiII", header)


def test_header_fields():
    header = bmp_header(ImageSpec.from_height(4))
    assert len(header) == HEADER_SIZE == 54
    (magic, size, r1, r2, offset, dib, width, height, planes, bits,
     compression, image_size, xres, yres, ncolors, important) = unpack(header)
    assert magic == b"BM"
    assert size == 54 + 24 * 4
    assert (r1, r2) == (0, 0)
    assert offset == 54
    assert dib == 40
    assert (width, height) == (8, 4)
    assert planes == 1
    assert bits == 24
    assert compression == 0
    assert image_size == 96
    assert (xres, yres, ncolors, important) == (0, 0, 0, 0)


def test_padded_sizes_for_odd_height():
    image = ImageSpec.from_height(3)
    fields = unpack(bmp_header(image))
    assert fields[1] == file_size(image) == 54 + 20 * 3
    assert fields[11] == 60


def test_write_header_truncates(tmp_path):
    path = tmp_path / "out.bmp"
    path.write_bytes(b"x" * 500)
    write_header(path, ImageSpec.from_height(4))
    assert path.read_bytes() == bmp_header(ImageSpec.from_height(4))


def test_write_header_failure(tmp_path):
    with pytest.raises(HeaderIOError):
        write_header(tmp_path / "missing" / "out.bmp", ImageSpec.from_height(4))


def test_unencodable_header_is_a_header_error(tmp_path):
    # Bypasses ImageSpec's own size check
    image = SimpleNamespace(width=60000, height=30000, pixel_data_size=180000 * 30000)
    with pytest.raises(HeaderIOError):
        write_header(tmp_path / "big.bmp", image)
    assert not (tmp_path / "big.bmp").exists()
