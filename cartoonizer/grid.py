"""
Rotated grid geometry for halftone screens.

A halftone screen is a square lattice of dot centres rotated by a screen
angle. ``GridPositionIterator`` enumerates the lattice points that land on a
``rows x cols`` plane after rotation about the plane origin.
"""

import math
from dataclasses import dataclass
from typing import Iterator, NamedTuple, Tuple

# Rotated coordinates this close below zero are treated as zero
_EPS = 1e-9


@dataclass(frozen=True, init=False)
class Angle:
    """Rotation value. Built from degrees, stored in radians."""

    radians_: float

    def __init__(self, degrees: float = 0.0):
        object.__setattr__(self, "radians_", math.radians(degrees))

    @classmethod
    def from_degrees(cls, degrees: float) -> "Angle":
        return cls(degrees)

    @classmethod
    def from_radians(cls, radians: float) -> "Angle":
        angle = cls.__new__(cls)
        object.__setattr__(angle, "radians_", float(radians))
        return angle

    def degrees(self) -> float:
        return math.degrees(self.radians_)

    def radians(self) -> float:
        return self.radians_


class GridPoint(NamedTuple):
    """Integer grid position: ``x`` is the row index, ``y`` the column index."""

    x: int
    y: int


class GridPositionIterator:
    """
    Lattice points of a rotated square grid that fall on a rectangular plane.

    The unrotated lattice is ``(ox + i*sx, oy + j*sy)`` for integer ``i, j``.
    Each point is rotated by ``angle`` about the origin and kept when it lands
    in ``[0, rows) x [0, cols)``. Points are yielded row-major by ``(i, j)``
    and rounded to the nearest pixel.

    Filtering is best-effort: rounding may push a point onto ``rows`` or
    ``cols``, so consumers still bounds-check before indexing.

    Every ``iter()`` call starts from scratch; instances hold no cursor.
    """

    def __init__(
        self,
        rows: int,
        cols: int,
        spacing: Tuple[float, float] = (7.0, 7.0),
        offset: Tuple[float, float] = (0.0, 0.0),
        angle: Angle = Angle.from_degrees(0.0),
    ):
        if rows < 0 or cols < 0:
            raise ValueError(f"Plane dimensions must be non-negative, got {rows}x{cols}")
        if spacing[0] <= 0 or spacing[1] <= 0:
            raise ValueError(f"Grid spacing must be positive, got {spacing}")

        self.rows = rows
        self.cols = cols
        self.spacing = (float(spacing[0]), float(spacing[1]))
        self.offset = (float(offset[0]), float(offset[1]))
        self.angle = angle

    def _index_ranges(self) -> Tuple[range, range]:
        """Lattice index ranges whose rotated points can cover the plane."""
        cos_t = math.cos(self.angle.radians())
        sin_t = math.sin(self.angle.radians())

        # Inverse-rotate the plane corners into lattice space
        corners = [(0, 0), (self.rows, 0), (0, self.cols), (self.rows, self.cols)]
        xs = [x * cos_t + y * sin_t for x, y in corners]
        ys = [-x * sin_t + y * cos_t for x, y in corners]

        sx, sy = self.spacing
        ox, oy = self.offset

        # One extra step on each side, over-generating is filtered below
        i_min = math.floor((min(xs) - ox) / sx) - 1
        i_max = math.ceil((max(xs) - ox) / sx) + 1
        j_min = math.floor((min(ys) - oy) / sy) - 1
        j_max = math.ceil((max(ys) - oy) / sy) + 1

        return range(i_min, i_max + 1), range(j_min, j_max + 1)

    def __iter__(self) -> Iterator[GridPoint]:
        cos_t = math.cos(self.angle.radians())
        sin_t = math.sin(self.angle.radians())
        sx, sy = self.spacing
        ox, oy = self.offset

        i_range, j_range = self._index_ranges()

        for i in i_range:
            px = ox + i * sx
            for j in j_range:
                py = oy + j * sy

                x = px * cos_t - py * sin_t
                y = px * sin_t + py * cos_t

                if -_EPS <= x < self.rows and -_EPS <= y < self.cols:
                    yield GridPoint(int(math.floor(x + 0.5)), int(math.floor(y + 0.5)))

    def __repr__(self):
        return (
            f"GridPositionIterator(rows={self.rows}, cols={self.cols}, "
            f"spacing={self.spacing}, offset={self.offset}, "
            f"angle={self.angle.degrees():.2f} deg)"
        )
