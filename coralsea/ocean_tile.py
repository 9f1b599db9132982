"""A square tile of ocean surface heights with its normals."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

Vec3 = tuple[float, float, float]


class OceanTile:
    """A periodic grid of ``(resolution + 1)^2`` vertices.

    The last row and column repeat the first ones, so that tiles of the same
    resolution join seamlessly. Vertices and normals are stored as arrays of
    shape ``(row_length, row_length, 3)`` indexed ``[y, x]``.
    """

    def __init__(
        self,
        resolution: int = 0,
        spacing: float = 0.0,
        vertices: np.ndarray | None = None,
        use_vbo: bool = False,
    ) -> None:
        if resolution < 0:
            raise ValueError("resolution must not be negative")
        self.resolution = resolution
        self.row_length = resolution + 1 if resolution > 0 else 0
        self.spacing = float(spacing)
        self.use_vbo = use_vbo
        shape = (self.row_length, self.row_length, 3)
        if vertices is None:
            self.vertices = np.zeros(shape)
        else:
            self.vertices = np.asarray(vertices, dtype=float).reshape(shape)
        self.normals = np.zeros(shape)
        self.max_delta = 0.0
        self.average_height = 0.0
        self.max_height = 0.0

    @property
    def num_vertices(self) -> int:
        return self.row_length * self.row_length

    @classmethod
    def from_heights(
        cls,
        heights: Sequence[float] | np.ndarray,
        resolution: int,
        spacing: float,
        displacements: Sequence[Sequence[float]] | np.ndarray | None = None,
        use_vbo: bool = False,
    ) -> OceanTile:
        """Build a tile from ``resolution^2`` heights laid out row by row.

        Optional displacements give an (x, y) offset per height. With
        ``use_vbo`` the vertices carry their grid position; otherwise only the
        displacement is stored in x and y.
        """
        if resolution <= 0:
            raise ValueError("resolution must be positive")
        flat = np.asarray(heights, dtype=float).ravel()
        if flat.size != resolution * resolution:
            raise ValueError(f"expected {resolution * resolution} heights, got {flat.size}")

        tile = cls(resolution, spacing, use_vbo=use_vbo)
        wrap = np.arange(resolution + 1) % resolution
        grid = np.arange(resolution + 1, dtype=float)
        heights_grid = flat.reshape(resolution, resolution)

        verts = np.zeros((resolution + 1, resolution + 1, 3))
        if use_vbo:
            verts[..., 0] = grid[None, :] * tile.spacing
            verts[..., 1] = -grid[:, None] * tile.spacing
        if displacements is not None:
            disp = np.asarray(displacements, dtype=float)
            if disp.size != resolution * resolution * 2:
                raise ValueError(f"expected {resolution * resolution} displacements")
            disp = disp.reshape(resolution, resolution, 2)
            verts[..., :2] += disp[np.ix_(wrap, wrap)]
        z = heights_grid[np.ix_(wrap, wrap)]
        verts[..., 2] = z

        tile.vertices = verts
        tile.average_height = float(z.mean())
        tile.max_height = float(z.max())
        tile.compute_normals()
        return tile

    def downsampled(self, resolution: int, spacing: float) -> OceanTile:
        """A coarser tile averaging groups of four vertices of this one."""
        parent = self.resolution
        if resolution <= 0 or resolution > parent or parent % resolution:
            raise ValueError(f"resolution {resolution} does not divide {parent}")
        inc = parent // resolution
        half = inc // 2
        tile = OceanTile(resolution, spacing, use_vbo=self.use_vbo)

        coarse = np.arange(0, parent, inc)
        shifted = coarse + half
        v = self.vertices
        total = (
            v[np.ix_(coarse, coarse)]
            + v[np.ix_(coarse, shifted)]
            + v[np.ix_(shifted, coarse)]
            + v[np.ix_(shifted, shifted)]
        )
        tile.vertices[:resolution, :resolution] = total * 0.25

        last = tile.row_length - 1
        tile.vertices[last, :last] = tile.vertices[0, :last]
        tile.vertices[:last, last] = tile.vertices[:last, 0]
        tile.vertices[last, last] = tile.vertices[0, 0]

        z = tile.vertices[..., 2]
        tile.average_height = float(z.mean())
        tile.max_height = float(z.max())
        tile.compute_normals()
        return tile

    def vertex(self, x: int, y: int) -> Vec3:
        """Vertex at column ``x`` and row ``y``."""
        return tuple(float(c) for c in self.vertices[y, x])  # type: ignore[return-value]

    def normal(self, x: int, y: int) -> Vec3:
        """Unit normal at column ``x`` and row ``y``."""
        return tuple(float(c) for c in self.normals[y, x])  # type: ignore[return-value]

    def compute_normals(self) -> None:
        """Recompute normals, treating the grid as periodic."""
        row = self.row_length
        if row == 0:
            return
        sp = self.spacing
        steps = np.arange(-1, row)
        i1 = (steps + row) % row
        i2 = (steps + 1) % row
        v = self.vertices

        a = v[np.ix_(i1, i1)]
        b = v[np.ix_(i2, i1)]
        c = v[np.ix_(i1, i2)]
        d = v[np.ix_(i2, i2)]

        if self.use_vbo:
            shift = row * sp
            a[:, 0, 0] -= shift
            b[:, 0, 0] -= shift
            c[:, -1, 0] += shift
            d[:, -1, 0] += shift
            a[0, :, 1] += shift
            c[0, :, 1] += shift
            b[-1, :, 1] -= shift
            d[-1, :, 1] -= shift
        else:
            b = b + np.array([0.0, -sp, 0.0])
            c = c + np.array([sp, 0.0, 0.0])
            d = d + np.array([sp, -sp, 0.0])

        v1 = b - a
        v2 = b - c
        v3 = b - d
        n1 = np.cross(v2, v1)
        n2 = np.cross(v3, v2)

        n = row + 1
        grid = np.zeros((row + 2, row + 2, 3))
        grid[0:n, 0:n] += n1
        grid[1 : n + 1, 0:n] += n1 + n2
        grid[0:n, 1 : n + 1] += n1 + n2
        grid[1 : n + 1, 1 : n + 1] += n2

        lengths = np.linalg.norm(grid, axis=2, keepdims=True)
        grid = np.divide(grid, lengths, out=grid.copy(), where=lengths > 0)
        self.normals = grid[1 : row + 1, 1 : row + 1].copy()

    def _grid_interp(self, lx: int, hx: int, ly: int, hy: int, tx: int, ty: int) -> float:
        z = self.vertices[..., 2]
        s00 = z[ly, lx]
        s01 = z[ly, hx]
        s10 = z[hy, lx]
        s11 = z[hy, hx]
        v0 = (s01 - s00) / (hx - lx) * (tx - lx) + s00
        v1 = (s11 - s10) / (hx - lx) * (tx - lx) + s10
        return float((v1 - v0) / (hy - ly) * (ty - ly) + v0)

    def compute_max_delta(self) -> float:
        """Largest height error of coarser levels of detail; stored and returned."""
        z = self.vertices[..., 2]
        delta_max = 0.0
        step = 2
        for _level in range(1, 6):
            for i in range(self.resolution):
                pos_y = i // step * step
                for j in range(self.resolution):
                    if i % step or j % step:
                        pos_x = j // step * step
                        estimate = self._grid_interp(pos_x, pos_x + step, pos_y, pos_y + step, j, i)
                        delta_max = max(delta_max, abs(estimate - z[i, j]))
            step *= 2
        self.max_delta = delta_max
        return delta_max

    def _cell(self, x: float, y: float) -> tuple[int, int, float, float]:
        dx = x / self.spacing
        dy = y / self.spacing
        ix = int(dx)
        iy = int(dy)
        return ix, iy, dx - ix, dy - iy

    def bilinear_interp(self, x: float, y: float) -> float:
        """Height at a local position; 0 for negative coordinates."""
        if x < 0.0 or y < 0.0:
            return 0.0
        ix, iy, dx, dy = self._cell(x, y)
        z = self.vertices[..., 2]
        return float(
            z[iy, ix] * (1 - dx) * (1 - dy)
            + z[iy, ix + 1] * dx * (1 - dy)
            + z[iy + 1, ix] * (1 - dx) * dy
            + z[iy + 1, ix + 1] * dx * dy
        )

    def normal_bilinear_interp(self, x: float, y: float) -> Vec3:
        """Interpolated normal at a local position; up for negative coordinates."""
        if x < 0.0 or y < 0.0:
            return (0.0, 0.0, 1.0)
        ix, iy, dx, dy = self._cell(x, y)
        n = self.normals
        result = (
            n[iy, ix] * (1 - dx) * (1 - dy)
            + n[iy, ix + 1] * dx * (1 - dy)
            + n[iy + 1, ix] * (1 - dx) * dy
            + n[iy + 1, ix + 1] * dx * dy
        )
        return tuple(float(c) for c in result)  # type: ignore[return-value]

    def normal_map_pixels(self) -> np.ndarray:
        """RGB normal map of shape ``(resolution, resolution, 3)``, ``uint8``."""
        res = self.resolution
        normals = self.normals[:res, :res]
        return (127.0 * normals + 128.0).astype(np.uint8)