"""Build display frames from text and terrain."""

import math

from ..grid import Dimensions
from ..terrain.map import TerrainMap
from ..terrain.polar import PolarCap
from .packets import BLACK, MAX_FRAME_WIDTH, RGBA, WHITE, Frame, Tile

SEA_CHAR = "~"
LAND_CHAR = "^"
POLAR_CHAR = "*"
RIVER_CHAR = "="

RIVER_COLOR: RGBA = (0.35, 0.65, 1.0, 1.0)


def string_to_frame(text: str) -> Frame:
    """Lay text out in rows of at most 100 cells.

    It's the caller's job to make sure the display is large enough for the
    returned frame.
    """
    width = max(1, min(len(text), MAX_FRAME_WIDTH))
    height = max(1, math.ceil(len(text) / width))
    padded = text.ljust(width * height)
    return Frame(
        dimensions=Dimensions(width=width, height=height),
        tiles=tuple(Tile(char, WHITE, BLACK) for char in padded),
    )


def _ratio(numerator: float, denominator: float) -> float:
    if denominator == 0.0:
        return 0.0
    return min(1.0, max(0.0, numerator / denominator))


def world_to_frame(terrain: TerrainMap, polar: PolarCap | None = None) -> Frame:
    """Render a terrain snapshot.

    Sea is blue, fading with depth; land is amber, more opaque with height.
    Rivers and polar cells are drawn over both.
    """
    sea_level = terrain.sea_level
    depth_span = abs(sea_level - terrain.min_height)
    height_span = abs(terrain.max_height - sea_level)
    rivers = terrain.river_mask().reshape(-1)
    frozen = polar.mask.reshape(-1) if polar is not None else None

    tiles: list[Tile] = []
    for i, h in enumerate(terrain.elevation.reshape(-1).tolist()):
        if frozen is not None and frozen[i]:
            tiles.append(Tile(POLAR_CHAR, WHITE, BLACK))
        elif rivers[i]:
            tiles.append(Tile(RIVER_CHAR, RIVER_COLOR, BLACK))
        elif h <= sea_level:
            blue = 1.0 - _ratio(abs(sea_level - h), depth_span)
            tiles.append(Tile(SEA_CHAR, (0.0, 0.0, blue, 1.0), BLACK))
        else:
            alpha = min(1.0, 0.5 + _ratio(abs(h - sea_level), height_span))
            tiles.append(Tile(LAND_CHAR, (1.0, 0.75, 0.0, alpha), BLACK))

    return Frame(dimensions=terrain.dimensions, tiles=tuple(tiles))
