import numpy as np
import pytest

from julia_mpi.block import ImageSpec, build_block
from julia_mpi.errors import CoordinateOutOfRange
from julia_mpi.partition import RowRange, row_range
from julia_mpi.pixel import compute_julia_pixel


def test_image_spec():
    image = ImageSpec.from_height(4)
    assert (image.width, image.height) == (8, 4)
    assert image.row_bytes == 24
    assert image.padded_row_bytes == 24
    assert image.pixel_data_size == 96


def test_odd_height_rows_are_padded():
    image = ImageSpec.from_height(3)
    assert image.row_bytes == 18
    assert image.padded_row_bytes == 20
    assert image.block_size(RowRange(0, 2)) == 40


@pytest.mark.parametrize("width,height", [(8, 0), (7, 4)])
def test_invalid_image_spec(width, height):
    with pytest.raises(ValueError):
        ImageSpec(width, height)


def test_block_is_row_major_rgb():
    image = ImageSpec.from_height(4)
    block = build_block(image, RowRange(1, 3))
    assert block.dtype == np.uint8
    assert block.shape == (2, 24)
    for local_y, y in enumerate(range(1, 3)):
        for x in range(image.width):
            assert tuple(block[local_y, 3*x:3*x + 3]) == compute_julia_pixel(x, y, 8, 4, 1.0)


def test_padding_bytes_are_zero():
    image = ImageSpec.from_height(3)
    block = build_block(image, RowRange(0, 3))
    assert block.shape == (3, 20)
    assert not block[:, 18:].any()


def test_blocks_stack_into_full_image():
    image = ImageSpec.from_height(7)
    full = build_block(image, RowRange(0, 7))
    parts = [build_block(image, row_range(7, 3, rank)) for rank in range(3)]
    assert np.array_equal(np.vstack(parts), full)


def test_empty_range():
    block = build_block(ImageSpec.from_height(2), RowRange(2, 2))
    assert block.shape == (0, 12)


def test_rows_outside_image():
    with pytest.raises(CoordinateOutOfRange):
        build_block(ImageSpec.from_height(4), RowRange(3, 5))


def test_largest_height_the_format_can_describe():
    # 6 * 26754 bytes per row is already 4-aligned; the file is just under 4 GiB
    image = ImageSpec.from_height(26754)
    assert 54 + image.pixel_data_size <= 0xFFFFFFFF
    with pytest.raises(ValueError):
        ImageSpec.from_height(26755)
