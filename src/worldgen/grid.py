"""Row-major grid coordinate mapping.

Every grid in the generator is stored row-major: cell ``(x, y)`` lives at flat
index ``y * width + x``. This matches numpy's default C order, so for an array
of shape ``(height, width)`` ``array.ravel()[i]`` is cell ``i``.
"""

from typing import Iterator

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, Field

from .exceptions import OutOfBoundsError

# D8 neighbour offsets: N, NE, E, SE, S, SW, W, NW (clockwise from north)
# Coordinate system: +X is East, +Y is South
D8_DX: tuple[int, ...] = (0, 1, 1, 1, 0, -1, -1, -1)
D8_DY: tuple[int, ...] = (-1, -1, 0, 1, 1, 1, 0, -1)


def index_to_point(i: int, width: int, height: int) -> tuple[int, int]:
    """Convert a flat cell index to an ``(x, y)`` coordinate.

    Args:
        i: Flat index, ``0 <= i < width * height``.
        width: Grid width.
        height: Grid height.

    Returns:
        The ``(x, y)`` coordinate of the cell.

    Raises:
        OutOfBoundsError: If the index is outside the grid.
    """
    if not 0 <= i < width * height:
        raise OutOfBoundsError(
            f"Index {i} outside {width}x{height} grid (0..{width * height - 1})"
        )
    return i % width, i // width


def point_to_index(x: int, y: int, width: int, height: int | None = None) -> int:
    """Convert an ``(x, y)`` coordinate to a flat cell index.

    Args:
        x: Column, ``0 <= x < width``.
        y: Row, ``0 <= y`` (and ``< height`` when height is given).
        width: Grid width.
        height: Grid height, used to bound ``y`` when given.

    Returns:
        The flat index ``y * width + x``.

    Raises:
        OutOfBoundsError: If the coordinate is outside the grid.
    """
    if not 0 <= x < width or y < 0 or (height is not None and y >= height):
        bounds = f"{width}x{height}" if height is not None else f"width {width}"
        raise OutOfBoundsError(f"Point ({x}, {y}) outside {bounds} grid")
    return y * width + x


def in_bounds(x: int, y: int, width: int, height: int) -> bool:
    """Whether ``(x, y)`` lies on the grid."""
    return 0 <= x < width and 0 <= y < height


def neighbors(i: int, width: int, height: int) -> Iterator[int]:
    """Yield the in-bounds 8-connected neighbours of cell ``i``."""
    x, y = index_to_point(i, width, height)
    for dx, dy in zip(D8_DX, D8_DY):
        nx, ny = x + dx, y + dy
        if 0 <= nx < width and 0 <= ny < height:
            yield ny * width + nx


def are_adjacent(a: int, b: int, width: int, height: int) -> bool:
    """Whether two distinct cells are 8-connected neighbours."""
    ax, ay = index_to_point(a, width, height)
    bx, by = index_to_point(b, width, height)
    return a != b and abs(ax - bx) <= 1 and abs(ay - by) <= 1


def boundary_mask(width: int, height: int) -> NDArray[np.bool_]:
    """Boolean mask of shape ``(height, width)`` marking the outer ring."""
    mask = np.zeros((height, width), dtype=bool)
    mask[0, :] = True
    mask[-1, :] = True
    mask[:, 0] = True
    mask[:, -1] = True
    return mask


class Dimensions(BaseModel, frozen=True):
    """Immutable grid size. Both sides are bounded to 1..255."""

    width: int = Field(gt=0, le=255)
    height: int = Field(gt=0, le=255)

    @property
    def area(self) -> int:
        """Number of cells."""
        return self.width * self.height

    @property
    def shape(self) -> tuple[int, int]:
        """Numpy array shape ``(height, width)``."""
        return self.height, self.width

    def index_to_point(self, i: int) -> tuple[int, int]:
        return index_to_point(i, self.width, self.height)

    def point_to_index(self, x: int, y: int) -> int:
        return point_to_index(x, y, self.width, self.height)

    def neighbors(self, i: int) -> Iterator[int]:
        return neighbors(i, self.width, self.height)

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"
