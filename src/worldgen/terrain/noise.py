"""Noise generation functions for terrain generation.

Provides fractal Brownian motion over OpenSimplex noise, sampled at arbitrary
continuous coordinates rather than at tile centres.
"""

import numpy as np
from numpy.typing import NDArray
from opensimplex import OpenSimplex

from ..config import NoiseConfig


def fbm_noise_field(
    u: NDArray[np.float64],
    v: NDArray[np.float64],
    seed: int,
    octaves: int = 10,
    lacunarity: float = 3.0,
    gain: float = 0.5,
    frequency: float = 2.0,
) -> NDArray[np.float64]:
    """Generate fractal Brownian motion noise on a coordinate lattice.

    Sums multiple octaves of OpenSimplex noise at increasing frequencies
    and decreasing amplitudes for natural-looking variation.

    Args:
        u: Horizontal sample coordinates, one per column.
        v: Vertical sample coordinates, one per row.
        seed: Seed for the noise permutation table.
        octaves: Number of noise layers to sum.
        lacunarity: Frequency multiplier between octaves.
        gain: Amplitude multiplier between octaves.
        frequency: Frequency of the base (lowest) octave.

    Returns:
        2D array of shape ``(len(v), len(u))``, roughly in range [-1, 1].
    """
    generator = OpenSimplex(seed=seed)
    result = np.zeros((v.size, u.size), dtype=np.float64)

    amplitude = 1.0
    max_amplitude = 0.0

    for _ in range(octaves):
        result += amplitude * generator.noise2array(u * frequency, v * frequency)
        max_amplitude += amplitude
        frequency *= lacunarity
        amplitude *= gain

    # Normalize to roughly [-1, 1]
    result /= max_amplitude
    return result


def fbm_from_config(
    u: NDArray[np.float64],
    v: NDArray[np.float64],
    seed: int,
    config: NoiseConfig,
) -> NDArray[np.float64]:
    """Run :func:`fbm_noise_field` with parameters from a NoiseConfig."""
    return fbm_noise_field(
        u,
        v,
        seed,
        octaves=config.octaves,
        lacunarity=config.lacunarity,
        gain=config.gain,
        frequency=config.frequency,
    )
