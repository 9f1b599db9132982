import random

import numpy as np
import pytest

from coralsea.silt import (
    CellEntry,
    SiltEffect,
    create_geometry,
    spot_light_image,
    spot_light_mipmaps,
)

WHITE = (1.0, 1.0, 1.0, 1.0)
BLACK = (0.0, 0.0, 0.0, 0.0)


def _always(_box):
    return True


def _never(_box):
    return False


def test_spot_image_shape_and_uniform_colour():
    image = spot_light_image(WHITE, WHITE, 8, 1.0)
    assert image.shape == (8, 8, 4)
    assert image.dtype == np.uint8
    assert np.all(image == 255)


def test_spot_image_single_pixel_is_even_mix():
    image = spot_light_image(WHITE, BLACK, 1, 1.0)
    assert image.shape == (1, 1, 4)
    assert np.all(image == 127)


def test_spot_image_is_symmetric_with_background_corners():
    image = spot_light_image(WHITE, BLACK, 16, 1.0)
    assert np.array_equal(image, image[::-1, :])
    assert np.array_equal(image, image[:, ::-1])
    assert np.all(image[0, 0] == 0)
    assert image[8, 8, 0] > image[8, 1, 0]


def test_spot_image_rejects_empty_size():
    with pytest.raises(ValueError):
        spot_light_image(WHITE, BLACK, 0, 1.0)


def test_mipmaps_halve_down_to_one():
    levels = spot_light_mipmaps(WHITE, BLACK, 32, 1.0)
    assert [level.shape[0] for level in levels] == [32, 16, 8, 4, 2, 1]


def test_create_geometry_layout():
    geometry = create_geometry(10, random.Random(3))
    assert geometry.num_particles == 10
    assert len(geometry.quad_vertices) == 40
    assert len(geometry.quad_offsets) == 40
    for index, pos in enumerate(geometry.point_vertices):
        assert geometry.quad_vertices[4 * index : 4 * index + 4] == [pos] * 4
        assert geometry.quad_vectors[4 * index : 4 * index + 4] == [geometry.point_vectors[index]] * 4
        assert all(0.0 <= c <= 1.0 for c in pos)
        assert all(-1.0 <= c <= 1.0 for c in geometry.point_vectors[index])
    assert geometry.quad_offsets[:4] == [(0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0)]
    assert set(geometry.point_offsets) == {(0.5, 0.5)}


def test_create_geometry_is_reproducible():
    first = create_geometry(5, random.Random(7))
    second = create_geometry(5, random.Random(7))
    assert first.num_particles == 5
    assert len(first.point_vertices) == 5
    assert first.point_vertices == second.point_vertices
    assert first.point_vectors == second.point_vectors


def test_create_geometry_rejects_negative():
    with pytest.raises(ValueError):
        create_geometry(-1)


def test_intensity_sets_consistent_state():
    effect = SiltEffect(num_particles=4, rng=random.Random(1))
    assert effect.near_transition == 25.0
    assert effect.fog_color == (0.6, 0.6, 0.6, 1.0)
    assert effect.uniforms["osgOcean_InversePeriod"] * effect.period == pytest.approx(1.0)
    assert effect.period == pytest.approx(effect.cell_size[2] / abs(effect.particle_speed))
    assert effect.texture is not None and len(effect.texture) == 6
    assert not effect.dirty


def test_stronger_intensity_means_closer_far_transition():
    effect = SiltEffect(num_particles=4, intensity=0.2)
    far_low = effect.far_transition
    effect.set_intensity(0.9)
    assert effect.far_transition < far_low
    assert effect.uniforms["osgOcean_ParticleSize"] == effect.particle_size


def test_advance_drifts_origin_with_wind():
    effect = SiltEffect(num_particles=4)
    effect.wind = (1.0, 0.0, -0.5)
    effect.advance(10.0)
    assert effect.origin == (0.0, 0.0, 0.0)
    effect.advance(12.0)
    assert effect.origin == pytest.approx((2.0, 0.0, -1.0))


def test_cull_zero_intensity_draws_nothing():
    effect = SiltEffect(num_particles=4, intensity=0.0)
    quads, points = effect.cull((0.0, 0.0, 0.0), _always)
    assert quads == {} and points == {}
    assert effect.number_of_particles == 0


def test_cull_outside_frustum_draws_nothing():
    effect = SiltEffect(num_particles=4)
    quads, points = effect.cull((0.0, 0.0, 0.0), _never)
    assert quads == {} and points == {}
    assert effect.number_of_particles > 0


def test_cull_splits_by_distance():
    effect = SiltEffect(num_particles=4)
    quads, points = effect.cull((1.0, 2.0, -3.0), _always)
    assert quads and points
    assert all(entry.depth < effect.near_transition for entry in quads.values())
    assert all(
        effect.near_transition <= entry.depth <= effect.far_transition for entry in points.values()
    )
    assert not set(quads) & set(points)
    for entry in list(quads.values()) + list(points.values()):
        assert 0.0 <= entry.start_time < effect.period


def test_cull_passes_valid_boxes():
    effect = SiltEffect(num_particles=4)
    boxes = []

    def record(box):
        boxes.append(box)
        return True

    quads, points = effect.cull((0.0, 0.0, 0.0), record)
    drawn = len(quads) + len(points)
    assert drawn > 0
    assert len(boxes) >= drawn
    assert all(all(a < b for a, b in zip(low, high)) for low, high in boxes)


def test_ordered_entries_farthest_first():
    effect = SiltEffect(num_particles=4)
    quads, points = effect.cull((0.0, 0.0, 0.0), _always)
    ordered = effect.ordered_entries(points)
    assert len(ordered) == len(points)
    depths = [entry.depth for _, entry in ordered]
    assert depths == sorted(depths, reverse=True)


def test_ordered_entries_small_example():
    effect = SiltEffect(num_particles=1)
    cells = {
        (0, 0, 0): CellEntry(1.0, 0.0, (0.0, 0.0, 0.0), (1.0, 1.0, -1.0)),
        (1, 0, 0): CellEntry(3.0, 0.0, (0.0, 0.0, 0.0), (1.0, 1.0, -1.0)),
        (2, 0, 0): CellEntry(2.0, 0.0, (0.0, 0.0, 0.0), (1.0, 1.0, -1.0)),
    }
    assert [cell for cell, _ in effect.ordered_entries(cells)] == [(1, 0, 0), (2, 0, 0), (0, 0, 0)]