import pytest

from julia_mpi.config import JuliaParams
from julia_mpi.errors import CoordinateOutOfRange
from julia_mpi.pixel import JuliaSet, compute_julia_pixel, to_byte


@pytest.mark.parametrize("x,y", [(0, 0), (7, 3)])
def test_corner_pixels(x, y):
    rgb = compute_julia_pixel(x, y, 8, 4, 1.0)
    assert len(rgb) == 3
    assert all(isinstance(v, int) and 0 <= v <= 255 for v in rgb)


def test_same_input_same_color():
    first = [compute_julia_pixel(x, y, 40, 20, 1.0) for y in range(20) for x in range(40)]
    second = [JuliaSet().pixel(x, y, 40, 20, 1.0) for y in range(20) for x in range(40)]
    assert first == second


@pytest.mark.parametrize("x,y", [(-1, 0), (8, 0), (0, -1), (0, 4)])
def test_out_of_range(x, y):
    with pytest.raises(CoordinateOutOfRange) as info:
        compute_julia_pixel(x, y, 8, 4, 1.0)
    assert info.value.width == 8 and info.value.height == 4


def test_negative_tint_rejected():
    with pytest.raises(ValueError):
        compute_julia_pixel(0, 0, 8, 4, -0.5)


def test_viewport_mapping():
    julia = JuliaSet()
    assert julia.point(0, 0, 8, 4) == complex(-1.6, -0.9)
    assert julia.point(4, 2, 8, 4) == pytest.approx(complex(0.0, 0.0))


def test_point_outside_escape_radius_keeps_full_budget():
    julia = JuliaSet()
    assert julia.count_iterations(complex(3, 0)) == 300
    # bias == 1: red -500, green -255, blue 0 after the byte cast
    assert julia.color(300, 1.0) == (12, 1, 0)


def test_bounded_orbit_gets_flat_color():
    julia = JuliaSet(JuliaParams(c_real=0.0, c_imag=0.0))
    assert julia.count_iterations(0j) == 0
    assert julia.color(0, 1.0) == (200, 100, 100)


def test_custom_params_are_used():
    params = JuliaParams(max_iterations=5)
    assert compute_julia_pixel(3, 1, 8, 4, 1.0, params) == JuliaSet(params).pixel(3, 1, 8, 4, 1.0)


def test_to_byte_truncates_and_wraps():
    assert to_byte(255.9) == 255
    assert to_byte(-250.7) == 6
    assert to_byte(256.0) == 0


def test_invalid_params():
    with pytest.raises(ValueError):
        JuliaParams(max_iterations=0)
    with pytest.raises(ValueError):
        JuliaParams(x_min=1.0, x_max=-1.0)
