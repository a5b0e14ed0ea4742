"""Procedural terrain generation package.

This package implements noise-based heightmap synthesis, sea level
calibration, erosion with lake drainage, and polar cap placement.
"""

from .erosion import ErosionResult, erode
from .heightmap import synthesize_heightmap
from .map import River, TerrainMap
from .polar import PolarCandidate, PolarCap, PolarPolicy, WeightedPolarPolicy, place_polar_cap
from .sea_level import decide_sea_level, underwater_fraction
from .water import WaterBodies, classify_water

__all__ = [
    "ErosionResult",
    "PolarCandidate",
    "PolarCap",
    "PolarPolicy",
    "River",
    "TerrainMap",
    "WaterBodies",
    "WeightedPolarPolicy",
    "classify_water",
    "decide_sea_level",
    "erode",
    "place_polar_cap",
    "synthesize_heightmap",
    "underwater_fraction",
]
