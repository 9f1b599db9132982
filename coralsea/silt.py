"""Underwater silt particles: spot-light sprites laid out in repeating cells."""

from __future__ import annotations

import math
import random
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass

import numpy as np

Vec2 = tuple[float, float]
Vec3 = tuple[float, float, float]
Vec4 = tuple[float, float, float, float]
Cell = tuple[int, int, int]
BoundingBox = tuple[Vec3, Vec3]

DEFAULT_PARTICLES = 1024
QUAD_RENDER_BIN = 12
POINT_RENDER_BIN = 11

_I_CYCLE = 0.43
_J_CYCLE = 0.64

_QUAD_OFFSETS: tuple[Vec2, Vec2, Vec2, Vec2] = ((0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0))
_POINT_OFFSET: Vec2 = (0.5, 0.5)


def spot_light_image(
    center_colour: Sequence[float],
    background_colour: Sequence[float],
    size: int,
    power: float,
) -> np.ndarray:
    """RGBA image of a round spot fading from the centre to the background.

    Returns a ``uint8`` array of shape ``(size, size, 4)``. A one pixel image
    is an even mix of both colours.
    """
    if size <= 0:
        raise ValueError("size must be positive")
    centre = np.asarray(center_colour, dtype=float)
    background = np.asarray(background_colour, dtype=float)
    if size == 1:
        weight = np.full((1, 1), 0.5)
    else:
        mid = (size - 1) * 0.5
        div = 2.0 / size
        offsets = (np.arange(size) - mid) * div
        distance = np.sqrt(offsets[None, :] ** 2 + offsets[:, None] ** 2)
        weight = np.clip(1.0 - distance, 0.0, None) ** power
    weight = weight[..., None]
    colour = centre * weight + background * (1.0 - weight)
    return np.clip(colour * 255.0, 0.0, 255.0).astype(np.uint8)


def spot_light_mipmaps(
    center_colour: Sequence[float],
    background_colour: Sequence[float],
    size: int,
    power: float,
) -> list[np.ndarray]:
    """Spot images for every mipmap level, halving the size down to one pixel."""
    if size <= 0:
        raise ValueError("size must be positive")
    levels = []
    while size > 0:
        levels.append(spot_light_image(center_colour, background_colour, size, power))
        size >>= 1
    return levels


@dataclass(frozen=True)
class SiltGeometry:
    """Particle attributes for the quad and point renderings.

    Each quad particle has four vertices sharing one position and direction;
    the offsets give the corner of the sprite.
    """

    quad_vertices: list[Vec3]
    quad_offsets: list[Vec2]
    quad_vectors: list[Vec3]
    point_vertices: list[Vec3]
    point_offsets: list[Vec2]
    point_vectors: list[Vec3]

    @property
    def num_particles(self) -> int:
        return len(self.point_vertices)


def _uniform(rng: random.Random, low: float, high: float) -> float:
    return low + (high - low) * rng.random()


def create_geometry(num_particles: int, rng: random.Random | None = None) -> SiltGeometry:
    """Random particles in the unit cell, each with a random drift direction."""
    if num_particles < 0:
        raise ValueError("number of particles must not be negative")
    rng = rng if rng is not None else random.Random()
    quad_vertices: list[Vec3] = []
    quad_offsets: list[Vec2] = []
    quad_vectors: list[Vec3] = []
    point_vertices: list[Vec3] = []
    point_offsets: list[Vec2] = []
    point_vectors: list[Vec3] = []
    for _ in range(num_particles):
        pos = (_uniform(rng, 0.0, 1.0), _uniform(rng, 0.0, 1.0), _uniform(rng, 0.0, 1.0))
        direction = (_uniform(rng, -1.0, 1.0), _uniform(rng, -1.0, 1.0), _uniform(rng, -1.0, 1.0))
        quad_vertices.extend([pos] * 4)
        quad_offsets.extend(_QUAD_OFFSETS)
        quad_vectors.extend([direction] * 4)
        point_vertices.append(pos)
        point_offsets.append(_POINT_OFFSET)
        point_vectors.append(direction)
    return SiltGeometry(
        quad_vertices, quad_offsets, quad_vectors, point_vertices, point_offsets, point_vectors
    )


@dataclass
class CellEntry:
    """A visible cell: its distance to the eye, animation start time and placement.

    The unit particle cell is scaled by ``scale`` then translated to ``position``.
    """

    depth: float
    start_time: float
    position: Vec3
    scale: Vec3


class SiltEffect:
    """Silt particles repeated in cells around the eye.

    Near cells are drawn as quads, farther ones as points, and cells beyond
    the far transition are not drawn at all.
    """

    def __init__(
        self,
        num_particles: int = DEFAULT_PARTICLES,
        intensity: float = 0.5,
        rng: random.Random | None = None,
    ) -> None:
        self.geometry = create_geometry(num_particles, rng)
        self.origin: Vec3 = (0.0, 0.0, 0.0)
        self.texture: list[np.ndarray] | None = None
        self.uniforms: dict[str, object] = {}
        self._previous_time: float | None = None
        self.number_of_particles = 0
        self.set_intensity(intensity)

    def set_intensity(self, intensity: float) -> None:
        """Derive particle speed, size, colour, density and fog from an intensity."""
        self.wind: Vec3 = (0.0, 0.0, 0.0)
        self.particle_speed = -0.75 - 0.25 * intensity
        self.particle_size = 0.02 + 0.03 * intensity
        grey = 0.85 - 0.1 * intensity
        self.particle_color: Vec4 = (grey, grey, grey, 1.0 - intensity)
        self.maximum_particle_density = intensity * 8.2
        side = 5.0 / (0.25 + intensity)
        self.cell_size: Vec3 = (side, side, 5.0)
        self.near_transition = 25.0
        self.far_transition = 100.0 - 60.0 * math.sqrt(intensity)

        self.fog_mode = "exp"
        self.fog_density = 0.01 * intensity
        self.fog_color: Vec4 = (0.6, 0.6, 0.6, 1.0)

        self.dirty = True
        self.update()

    def update(self) -> None:
        """Recompute cell vectors, animation period and shader uniforms."""
        self.dirty = False
        length_u, length_v, length_w = self.cell_size

        self.period = abs(length_w / self.particle_speed)

        self.du: Vec3 = (length_u, 0.0, 0.0)
        self.dv: Vec3 = (0.0, length_v, 0.0)
        self.dw: Vec3 = (0.0, 0.0, length_w)
        self.inverse_du: Vec3 = (1.0 / length_u, 0.0, 0.0)
        self.inverse_dv: Vec3 = (0.0, 1.0 / length_v, 0.0)
        self.inverse_dw: Vec3 = (0.0, 0.0, 1.0 / length_w)

        if self.texture is None:
            self.texture = spot_light_mipmaps(
                (0.55, 0.55, 0.55, 0.65), (0.55, 0.55, 0.55, 0.0), 32, 1.0
            )
        self.uniforms = {
            "osgOcean_BaseTexture": 0,
            "osgOcean_InversePeriod": 1.0 / self.period,
            "osgOcean_ParticleColour": self.particle_color,
            "osgOcean_ParticleSize": self.particle_size,
        }

    def advance(self, current_time: float) -> None:
        """Drift the particle origin with the wind up to the given time."""
        if self.dirty:
            self.update()
        if self._previous_time is None:
            self._previous_time = current_time
        delta = current_time - self._previous_time
        self.origin = tuple(o + w * delta for o, w in zip(self.origin, self.wind))  # type: ignore[assignment]
        self._previous_time = current_time

    def cull(
        self,
        eye_local: Sequence[float],
        contains: Callable[[BoundingBox], bool],
    ) -> tuple[dict[Cell, CellEntry], dict[Cell, CellEntry]]:
        """Cells to draw around the eye, as ``(quad_cells, point_cells)``.

        ``contains`` tells whether a bounding box ``(min, max)`` lies in the
        view frustum. Cells are keyed ``(i, k, j)``.
        """
        if self.dirty:
            self.update()
        quads: dict[Cell, CellEntry] = {}
        points: dict[Cell, CellEntry] = {}

        cell_volume = self.cell_size[0] * self.cell_size[1] * self.cell_size[2]
        self.number_of_particles = int(self.maximum_particle_density * cell_volume)
        if self.number_of_particles == 0:
            return quads, points

        eye = tuple(float(c) for c in eye_local)
        relative = tuple(e - o for e, o in zip(eye, self.origin))
        eye_k = sum(r * w for r, w in zip(relative, self.inverse_dw))
        k_plane = tuple(r - d * eye_k for r, d in zip(relative, self.dw))
        eye_i = sum(p * u for p, u in zip(k_plane, self.inverse_du))
        eye_j = sum(p * v for p, v in zip(k_plane, self.inverse_dv))

        i_delta = self.far_transition * self.inverse_du[0]
        j_delta = self.far_transition * self.inverse_dv[1]
        k_delta = 1.0

        i_range = range(math.floor(eye_i - i_delta), math.ceil(eye_i + i_delta) + 1)
        j_range = range(math.floor(eye_j - j_delta), math.ceil(eye_j + j_delta) + 1)
        k_range = range(math.floor(eye_k - k_delta), math.ceil(eye_k + k_delta) + 1)

        for i in i_range:
            for j in j_range:
                start = i * _I_CYCLE + j * _J_CYCLE
                start_time = (start - math.floor(start)) * self.period
                for k in k_range:
                    self._build(eye, i, j, k, start_time, contains, quads, points)
        return quads, points

    def _build(
        self,
        eye: Vec3,
        i: int,
        j: int,
        k: int,
        start_time: float,
        contains: Callable[[BoundingBox], bool],
        quads: dict[Cell, CellEntry],
        points: dict[Cell, CellEntry],
    ) -> None:
        ox, oy, oz = self.origin
        position = (ox + i * self.du[0], oy + j * self.dv[1], oz + (k + 1) * self.dw[2])
        scale = (self.du[0], self.dv[1], -self.dw[2])
        box: BoundingBox = (
            (position[0], position[1], position[2] + scale[2]),
            (position[0] + scale[0], position[1] + scale[1], position[2]),
        )
        if not contains(box):
            return
        centre = tuple(p + s * 0.5 for p, s in zip(position, scale))
        distance = math.dist(centre, eye)
        if distance < self.near_transition:
            target = quads
        elif distance <= self.far_transition:
            target = points
        else:
            return
        target[(i, k, j)] = CellEntry(distance, start_time, position, scale)

    def ordered_entries(self, cells: Mapping[Cell, CellEntry]) -> list[tuple[Cell, CellEntry]]:
        """Cells in drawing order, farthest first."""
        items: Iterable[tuple[Cell, CellEntry]] = sorted(cells.items(), key=lambda item: item[1].depth)
        return list(reversed(list(items)))