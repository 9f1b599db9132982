"""Geometry of a screen aligned, textured quad."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

Vec2 = tuple[float, float]
Vec3 = tuple[float, float, float]
Vec4 = tuple[float, float, float, float]


@dataclass(frozen=True)
class ScreenAlignedQuad:
    """Four vertices drawn as one quad, with lighting and depth test off."""

    vertices: tuple[Vec3, Vec3, Vec3, Vec3]
    tex_coords: tuple[Vec2, Vec2, Vec2, Vec2]
    colour: Vec4 = (1.0, 1.0, 1.0, 1.0)
    normal: Vec3 = (0.0, -1.0, 0.0)
    lighting: bool = False
    depth_test: bool = False

    @classmethod
    def build(
        cls, corner: Sequence[float], dims: Sequence[float], texture_size: Sequence[float]
    ) -> ScreenAlignedQuad:
        """Quad with its lower-left corner at ``corner`` and size ``dims``.

        Texture coordinates span ``texture_size``, as for rectangle textures.
        """
        cx, cy, cz = (float(c) for c in corner)
        dx, dy = (float(d) for d in dims)
        tw, th = (float(t) for t in texture_size)
        vertices = (
            (cx, cy + dy, cz),
            (cx, cy, cz),
            (cx + dx, cy, cz),
            (cx + dx, cy + dy, cz),
        )
        tex_coords = ((0.0, th), (0.0, 0.0), (tw, 0.0), (tw, th))
        return cls(vertices, tex_coords)

    @classmethod
    def from_texture(
        cls,
        corner: Sequence[float],
        dims: Sequence[float],
        texture_width: int,
        texture_height: int,
    ) -> ScreenAlignedQuad:
        """Quad whose texture coordinates cover a texture of the given size."""
        return cls.build(corner, dims, (texture_width, texture_height))