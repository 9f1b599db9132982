import numpy as np
import pytest

from coralsea.ocean_tile import OceanTile

RES = 8


def _random_heights(seed=1, res=RES):
    return np.random.default_rng(seed).uniform(-1.0, 1.0, res * res)


@pytest.mark.parametrize("use_vbo", [True, False])
def test_flat_tile_normals_point_up(use_vbo):
    tile = OceanTile.from_heights(np.zeros(RES * RES), RES, 2.0, use_vbo=use_vbo)
    assert np.allclose(tile.normals, [0.0, 0.0, 1.0])


def test_constant_heights_average_and_max():
    tile = OceanTile.from_heights([2.5] * (RES * RES), RES, 1.0)
    assert tile.average_height == pytest.approx(2.5)
    assert tile.max_height == pytest.approx(2.5)
    assert tile.num_vertices == (RES + 1) ** 2


def test_vertex_heights_follow_layout_without_vbo():
    heights = _random_heights()
    tile = OceanTile.from_heights(heights, RES, 1.0)
    x, y, z = tile.vertex(1, 2)
    assert (x, y) == (0.0, 0.0)
    assert z == pytest.approx(heights[1 + 2 * RES])


def test_grid_wraps_periodically():
    tile = OceanTile.from_heights(_random_heights(), RES, 1.0)
    for i in range(RES + 1):
        assert tile.vertex(RES, i)[2] == pytest.approx(tile.vertex(0, i)[2])
        assert tile.vertex(i, RES)[2] == pytest.approx(tile.vertex(i, 0)[2])


def test_displacements_are_added():
    disp = np.random.default_rng(3).uniform(-1, 1, (RES * RES, 2))
    tile = OceanTile.from_heights(np.zeros(RES * RES), RES, 1.0, displacements=disp)
    x, y, _ = tile.vertex(3, 4)
    assert x == pytest.approx(disp[3 + 4 * RES][0])
    assert y == pytest.approx(disp[3 + 4 * RES][1])


def test_vbo_vertices_carry_grid_position():
    tile = OceanTile.from_heights(np.zeros(RES * RES), RES, 1.0, use_vbo=True)
    x, y, _ = tile.vertex(3, 2)
    assert x == pytest.approx(3.0)
    assert y == pytest.approx(-2.0)


def test_wrong_height_count_raises():
    with pytest.raises(ValueError):
        OceanTile.from_heights([0.0] * 10, RES, 1.0)


def test_normals_are_unit_length_for_random_heights():
    tile = OceanTile.from_heights(_random_heights(5), RES, 1.5, use_vbo=True)
    lengths = np.linalg.norm(tile.normals, axis=2)
    assert np.allclose(lengths, 1.0)
    assert np.all(tile.normals[..., 2] > 0)


def test_bilinear_interp_at_grid_points_and_negative():
    tile = OceanTile.from_heights(_random_heights(), RES, 2.0)
    assert tile.bilinear_interp(2.0 * 3, 2.0 * 1) == pytest.approx(tile.vertex(3, 1)[2])
    assert tile.bilinear_interp(-1.0, 1.0) == 0.0


def test_bilinear_interp_of_constant_is_constant():
    tile = OceanTile.from_heights([1.25] * (RES * RES), RES, 1.0)
    assert tile.bilinear_interp(2.3, 4.7) == pytest.approx(1.25)


def test_normal_bilinear_interp():
    tile = OceanTile.from_heights(np.zeros(RES * RES), RES, 1.0)
    assert tile.normal_bilinear_interp(-0.5, 0.0) == (0.0, 0.0, 1.0)
    assert tile.normal_bilinear_interp(1.5, 2.5) == pytest.approx((0.0, 0.0, 1.0))


def test_normal_map_of_flat_tile():
    tile = OceanTile.from_heights(np.zeros(RES * RES), RES, 1.0)
    pixels = tile.normal_map_pixels()
    assert pixels.shape == (RES, RES, 3)
    assert pixels.dtype == np.uint8
    assert np.all(pixels[..., 0] == 128)
    assert np.all(pixels[..., 1] == 128)
    assert np.all(pixels[..., 2] == 255)


def test_downsampled_constant_and_skirt():
    tile = OceanTile.from_heights([0.75] * (RES * RES), RES, 1.0)
    small = tile.downsampled(4, 2.0)
    assert small.resolution == 4
    assert np.allclose(small.vertices[..., 2], 0.75)


def test_downsampled_skirt_copies_first_row_and_column():
    small = OceanTile.from_heights(_random_heights(7), RES, 1.0).downsampled(4, 2.0)
    last = small.row_length - 1
    for i in range(small.row_length):
        assert small.vertex(i, last) == small.vertex(i, 0)
        assert small.vertex(last, i) == small.vertex(0, i)


def test_downsampled_keeps_vbo_flag():
    tile = OceanTile.from_heights(_random_heights(), RES, 1.0, use_vbo=True)
    assert tile.downsampled(2, 4.0).use_vbo is True


@pytest.mark.parametrize("resolution", [0, 3, 16])
def test_downsampled_invalid_resolution(resolution):
    tile = OceanTile.from_heights(_random_heights(), RES, 1.0)
    with pytest.raises(ValueError):
        tile.downsampled(resolution, 1.0)


def test_max_delta_flat_is_zero():
    tile = OceanTile.from_heights(np.zeros(64 * 64), 64, 1.0)
    assert tile.compute_max_delta() == 0.0
    assert tile.max_delta == 0.0


def test_max_delta_random_is_positive_and_bounded():
    heights = _random_heights(11, 64)
    tile = OceanTile.from_heights(heights, 64, 1.0)
    delta = tile.compute_max_delta()
    assert 0.0 < delta <= heights.max() - heights.min() + 1e-9