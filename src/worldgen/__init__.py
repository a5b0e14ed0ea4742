"""Procedural world generation: terrain, sea level, erosion and polar caps."""

from .config import WorldgenConfig, load_config, resolve_seed
from .exceptions import (
    CalibrationFailure,
    CalibrationInvariantError,
    ConfigurationError,
    OutOfBoundsError,
    WorldgenError,
)
from .generation import GenerationResult, StageOutcome, World, generate_world
from .grid import Dimensions

__all__ = [
    "CalibrationFailure",
    "CalibrationInvariantError",
    "ConfigurationError",
    "Dimensions",
    "GenerationResult",
    "OutOfBoundsError",
    "StageOutcome",
    "World",
    "WorldgenConfig",
    "WorldgenError",
    "generate_world",
    "load_config",
    "resolve_seed",
]
