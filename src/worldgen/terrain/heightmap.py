"""Heightmap synthesis from seeded fractal noise."""

import logging

import numpy as np
from numpy.typing import NDArray

from ..config import NoiseConfig
from ..exceptions import ConfigurationError
from .noise import fbm_from_config

logger = logging.getLogger(__name__)


def heightmap_coordinates(
    width: int,
    height: int,
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Noise sample coordinates for each column and row.

    Column ``x`` samples ``u = (x + 1) / height * 2`` and row ``y`` samples
    ``v = (y + 1) / 100``.

    Returns:
        Tuple of (u per column, v per row).
    """
    u = (np.arange(width, dtype=np.float64) + 1.0) / height * 2.0
    v = (np.arange(height, dtype=np.float64) + 1.0) / 100.0
    return u, v


def synthesize_heightmap(
    width: int,
    height: int,
    seed: int,
    config: NoiseConfig | None = None,
) -> NDArray[np.float64]:
    """Generate the raw elevation field.

    Args:
        width: World width in tiles.
        height: World height in tiles.
        seed: Noise seed, drawn from the run's master generator.
        config: Fractal noise parameters (defaults: 10 octaves, gain 0.5,
            lacunarity 3.0, frequency 2.0).

    Returns:
        Elevation array of shape ``(height, width)``; raw samples are scaled
        by ``width * 2``.

    Raises:
        ConfigurationError: If a dimension is not positive or the noise
            parameters produce non-finite samples.
    """
    if width <= 0 or height <= 0:
        raise ConfigurationError(
            f"World dimensions must be positive, got {width}x{height}"
        )
    config = config or NoiseConfig()

    u, v = heightmap_coordinates(width, height)
    elevation = fbm_from_config(u, v, seed, config) * (width * 2.0)

    if not np.all(np.isfinite(elevation)):
        bad = int(np.count_nonzero(~np.isfinite(elevation)))
        raise ConfigurationError(
            f"Noise produced {bad} non-finite elevation samples; check noise parameters"
        )

    logger.debug(
        f"Synthesized {width}x{height} heightmap: "
        f"min {elevation.min():.3f}, max {elevation.max():.3f}"
    )
    return elevation
