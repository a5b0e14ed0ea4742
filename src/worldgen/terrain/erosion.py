"""Erosion: rain perturbation, drainage routing and river carving.

Landlocked lakes are drained to the open ocean along the cheapest path over
the 8-connected grid, where the cost of a step is its elevation change
normalised by the span between sea level and the highest point.
"""

import heapq
import logging
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from scipy import ndimage

from ..config import ErosionConfig, NoiseConfig
from ..grid import D8_DX, D8_DY
from .map import River, TerrainMap
from .noise import fbm_from_config
from .water import classify_water, flood_open_ocean

logger = logging.getLogger(__name__)


@dataclass
class ErosionResult:
    """Eroded terrain plus drainage statistics."""

    terrain: TerrainMap
    searches: int  # Drainage searches run, retries of blocked lakes included
    unresolved: int  # Lakes with no legal path to open ocean


def make_rain_field(
    width: int,
    height: int,
    seed: int,
    config: NoiseConfig,
) -> NDArray[np.float64]:
    """Generate the rain noise field, sampled over the unit square.

    Returns:
        2D array of shape ``(height, width)``, roughly in range [-1, 1].
    """
    u = (np.arange(width, dtype=np.float64) + 1.0) / width
    v = (np.arange(height, dtype=np.float64) + 1.0) / height
    return fbm_from_config(u, v, seed, config)


def apply_rain(
    elevation: NDArray[np.float64],
    sea_level: float,
    rain: NDArray[np.float64],
    erosion_weight: float,
) -> NDArray[np.float64]:
    """Lower every land cell by ``|rain| * erosion_weight``.

    Sea cells are untouched. A land cell lowered to sea level or below is
    simply underwater from then on.

    Returns:
        New elevation array.
    """
    result = elevation.copy()
    land = result > sea_level
    result[land] -= np.abs(rain[land]) * erosion_weight
    return result


def route_drainage(
    elevation: NDArray[np.float64],
    source_mask: NDArray[np.bool_],
    landlocked: NDArray[np.bool_],
    open_ocean: NDArray[np.bool_],
    slope_range: float,
    min_uphill_step: float,
) -> list[int] | None:
    """Find the cheapest path from a lake to the open ocean (Dijkstra).

    Every cell of the lake is a source at cost zero. Steps may enter land or
    open ocean; they may never enter a landlocked cell. Uphill steps whose
    normalised rise is below ``min_uphill_step / slope_range`` are excluded.
    Each cell is settled at most once.

    Args:
        elevation: Elevation field.
        source_mask: Cells of the lake being drained.
        landlocked: All landlocked underwater cells.
        open_ocean: Open ocean cells (search targets).
        slope_range: ``|sea_level - highest point|``, used to normalise costs.
        min_uphill_step: Minimum raw rise of an allowed uphill step.

    Returns:
        Flat indices from a lake cell to the first open ocean cell reached,
        or None if no legal path exists.
    """
    height, width = elevation.shape
    heights = elevation.reshape(-1)
    sources = source_mask.reshape(-1)
    blocked = landlocked.reshape(-1)
    targets = open_ocean.reshape(-1)
    min_rise = min_uphill_step / slope_range

    cost = np.full(heights.size, np.inf)
    previous = np.full(heights.size, -1, dtype=np.int64)
    settled = np.zeros(heights.size, dtype=bool)

    # Priority queue: (cost, flat index)
    pq: list[tuple[float, int]] = []
    for i in np.flatnonzero(sources).tolist():
        cost[i] = 0.0
        heapq.heappush(pq, (0.0, i))

    while pq:
        current, i = heapq.heappop(pq)
        if settled[i]:
            continue
        settled[i] = True

        if targets[i]:
            path = [i]
            while previous[path[-1]] >= 0:
                path.append(int(previous[path[-1]]))
            path.reverse()
            return path

        y, x = divmod(i, width)
        for dx, dy in zip(D8_DX, D8_DY):
            ny, nx = y + dy, x + dx
            if not (0 <= ny < height and 0 <= nx < width):
                continue
            j = ny * width + nx
            if settled[j] or sources[j] or blocked[j]:
                continue

            step = (heights[j] - heights[i]) / slope_range
            if 0.0 < step < min_rise:
                # Jitter climb
                continue

            candidate = current + abs(step)
            if candidate < cost[j]:
                cost[j] = candidate
                previous[j] = i
                heapq.heappush(pq, (candidate, j))

    return None


def carve_river(elevation: NDArray[np.float64], cells: list[int]) -> None:
    """Lower river cells in place so the river never rises downstream.

    Each cell ends at ``min(own height, height of the cell before it)``,
    starting from the source, so every river cell ends at or below the source.
    """
    heights = elevation.reshape(-1)
    level = heights[cells[0]]
    for i in cells[1:]:
        if heights[i] > level:
            heights[i] = level
        level = heights[i]


def erode(
    terrain: TerrainMap,
    seed: int,
    config: ErosionConfig | None = None,
) -> ErosionResult:
    """Erode a calibrated map and drain its landlocked lakes with rivers.

    Args:
        terrain: Calibrated terrain map (left unchanged).
        seed: Erosion seed, drawn from the run's master generator.
        config: Erosion parameters.

    Returns:
        ErosionResult with the new terrain map.
    """
    config = config or ErosionConfig()
    width, height = terrain.dimensions.width, terrain.dimensions.height
    sea_level = terrain.sea_level

    # Stage 1: rain
    rain = make_rain_field(width, height, seed, config.rain_noise)
    elevation = apply_rain(terrain.elevation, sea_level, rain, config.erosion_weight)
    reclassified = int(
        np.count_nonzero((elevation <= sea_level) & (terrain.elevation > sea_level))
    )
    if reclassified:
        logger.info(f"Rain pushed {reclassified} land cells below sea level")

    # Stage 2: connectivity
    bodies = classify_water(elevation, sea_level)
    underwater = bodies.underwater.copy()
    open_ocean = bodies.open_ocean.copy()
    logger.info(
        f"Water: {np.count_nonzero(open_ocean)} open ocean cells, "
        f"{bodies.count} landlocked bodies"
    )

    slope_range = abs(sea_level - float(elevation.max()))
    if slope_range == 0.0:
        slope_range = 1.0

    # Stage 3 & 4: drain each lake, lowest first. A lake whose only way out
    # runs through another lake is retried once that lake has drained.
    rivers: list[River] = []
    searches = 0

    if bodies.count > 0:
        labels = np.arange(1, bodies.count + 1)
        lowest = np.asarray(ndimage.minimum(elevation, bodies.labels, labels))
        pending = labels[np.argsort(lowest, kind="stable")].tolist()
    else:
        pending = []

    passes = 0
    while pending:
        passes += 1
        blocked: list[int] = []
        carved = False

        for label in pending:
            body = bodies.labels == label
            if open_ocean[body].any():
                # Drained through an earlier river
                continue

            searches += 1
            path = route_drainage(
                elevation,
                body,
                underwater & ~open_ocean,
                open_ocean,
                slope_range,
                config.min_uphill_step,
            )
            if path is None:
                blocked.append(label)
                continue

            carve_river(elevation, path)

            river_cells = np.zeros((height, width), dtype=bool)
            river_cells.reshape(-1)[path] = True
            underwater |= river_cells
            flood_open_ocean(underwater, river_cells, open_ocean)

            rivers.append(River(cells=tuple(path)))
            carved = True
            logger.debug(f"Lake {label} drains through a {len(path)}-cell river")

        pending = blocked
        if not carved:
            break
        if pending:
            logger.debug(f"Retrying {len(pending)} blocked lakes after pass {passes}")

    for label in pending:
        logger.warning(
            f"No drainage path for lake {label} "
            f"({int(np.count_nonzero(bodies.labels == label))} cells)"
        )
    unresolved = len(pending)

    logger.info(
        f"Carved {len(rivers)} rivers in {searches} searches over {passes} passes, "
        f"{unresolved} lakes left landlocked"
    )

    return ErosionResult(
        terrain=terrain.with_elevation(elevation, rivers=terrain.rivers + tuple(rivers)),
        searches=searches,
        unresolved=unresolved,
    )
