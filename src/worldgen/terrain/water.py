"""Water classification: open ocean versus landlocked lakes."""

from collections import deque
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from scipy import ndimage

from ..grid import D8_DX, D8_DY, boundary_mask


@dataclass
class WaterBodies:
    """Underwater cells split into open ocean and labelled landlocked bodies."""

    underwater: NDArray[np.bool_]
    open_ocean: NDArray[np.bool_]
    labels: NDArray[np.int32]  # 1..count on landlocked cells, 0 elsewhere
    count: int

    @property
    def landlocked(self) -> NDArray[np.bool_]:
        return self.underwater & ~self.open_ocean


def flood_open_ocean(
    underwater: NDArray[np.bool_],
    seeds: NDArray[np.bool_],
    open_mask: NDArray[np.bool_] | None = None,
) -> NDArray[np.bool_]:
    """Breadth-first flood through 8-connected underwater cells.

    Every underwater cell reachable from an underwater seed is marked open.
    Cells already open are not revisited, so an existing mask can be extended
    cheaply after terrain changes.

    Args:
        underwater: Boolean mask where True = at or below sea level.
        seeds: Boolean mask of cells to flood from.
        open_mask: Mask to extend in place; a new one is created if None.

    Returns:
        The open ocean mask.
    """
    height, width = underwater.shape
    if open_mask is None:
        open_mask = np.zeros((height, width), dtype=bool)

    queue: deque[tuple[int, int]] = deque()
    seed_ys, seed_xs = np.where(seeds & underwater & ~open_mask)
    for y, x in zip(seed_ys.tolist(), seed_xs.tolist()):
        open_mask[y, x] = True
        queue.append((y, x))

    while queue:
        y, x = queue.popleft()
        for dx, dy in zip(D8_DX, D8_DY):
            ny, nx = y + dy, x + dx
            if (
                0 <= ny < height
                and 0 <= nx < width
                and underwater[ny, nx]
                and not open_mask[ny, nx]
            ):
                open_mask[ny, nx] = True
                queue.append((ny, nx))

    return open_mask


def label_landlocked(
    landlocked: NDArray[np.bool_],
) -> tuple[NDArray[np.int32], int]:
    """Label 8-connected landlocked bodies.

    Returns:
        Tuple of (label array, number of bodies).
    """
    structure = ndimage.generate_binary_structure(2, 2)
    labels, count = ndimage.label(landlocked, structure=structure)
    return labels.astype(np.int32), int(count)


def classify_water(
    elevation: NDArray[np.float64],
    sea_level: float,
) -> WaterBodies:
    """Classify underwater cells as open ocean or landlocked.

    A cell is open ocean when an 8-connected chain of underwater cells links
    it to the map boundary.

    Args:
        elevation: Elevation field.
        sea_level: Threshold at or below which a cell is underwater.

    Returns:
        WaterBodies for the field.
    """
    height, width = elevation.shape
    underwater = elevation <= sea_level
    open_ocean = flood_open_ocean(underwater, boundary_mask(width, height))
    labels, count = label_landlocked(underwater & ~open_ocean)
    return WaterBodies(
        underwater=underwater,
        open_ocean=open_ocean,
        labels=labels,
        count=count,
    )
