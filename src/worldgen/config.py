"""World generation configuration models and loading."""

import os
import time
import tomllib
from pathlib import Path
from typing import Mapping

import structlog
from pydantic import BaseModel, Field, model_validator

from .grid import Dimensions

logger = structlog.get_logger()

SEED_ENV_VAR = "PS_SEED"
MAX_SEED = 2**64 - 1


class NoiseConfig(BaseModel):
    """Fractal (fBm) noise parameters for a single field."""

    octaves: int = Field(default=10, ge=1, description="Number of octaves for fBm")
    gain: float = Field(default=0.5, description="Amplitude multiplier per octave")
    lacunarity: float = Field(default=3.0, description="Frequency multiplier per octave")
    frequency: float = Field(default=2.0, description="Base sampling frequency")


class ErosionConfig(BaseModel):
    """Rain perturbation and drainage routing parameters."""

    erosion_weight: float = Field(
        default=0.05, ge=0.0, description="Scale applied to |rain noise| on land"
    )
    rain_noise: NoiseConfig = Field(
        default_factory=lambda: NoiseConfig(octaves=4, lacunarity=2.0, frequency=4.0)
    )
    min_uphill_step: float = Field(
        default=3.0,
        ge=0.0,
        description="Uphill steps rising less than this are excluded from routing",
    )


class PolarConfig(BaseModel):
    """Weights for the default polar cap acceptance policy."""

    neighbor_weight: float = Field(
        default=0.6, description="Weight of the fraction of polar neighbours"
    )
    edge_weight: float = Field(
        default=0.6, description="Weight of closeness to the map edge"
    )
    budget_weight: float = Field(
        default=0.5, description="Penalty weight of polar budget already used"
    )


class GenParams(BaseModel):
    """Parameters of a single generation run."""

    seed: int = Field(default=0, ge=0, le=MAX_SEED, description="Run seed (u64)")
    target_water: int = Field(
        default=178, ge=0, le=255, description="Water coverage scaled to 0-255"
    )
    world_size: Dimensions = Field(
        default_factory=lambda: Dimensions(width=100, height=100)
    )
    # Reserved for the port/civilization stages
    max_ports: int = Field(default=20, ge=0, le=255)
    max_civilizations: int = Field(default=4, ge=0, le=255)
    max_polar_tiles: int = Field(default=400, ge=0)
    min_polar_tiles: int = Field(default=280, ge=0)

    @model_validator(mode="after")
    def _check_polar_range(self) -> "GenParams":
        if self.min_polar_tiles > self.max_polar_tiles:
            raise ValueError(
                f"min_polar_tiles ({self.min_polar_tiles}) exceeds "
                f"max_polar_tiles ({self.max_polar_tiles})"
            )
        return self

    @property
    def water_fraction(self) -> float:
        """Target water coverage as a fraction in [0, 1]."""
        return self.target_water / 255.0


class DisplayConfig(BaseModel):
    """Worker/display channel settings."""

    registration_timeout_s: float = Field(
        default=3.0, gt=0.0, description="Wait for GUI registration acks"
    )


class WorldgenConfig(BaseModel):
    """Complete world generation configuration."""

    params: GenParams = Field(default_factory=GenParams)
    heightmap: NoiseConfig = Field(default_factory=NoiseConfig)
    erosion: ErosionConfig = Field(default_factory=ErosionConfig)
    polar: PolarConfig = Field(default_factory=PolarConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)


def load_config(config_path: Path) -> WorldgenConfig:
    """Load configuration from a TOML file.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed WorldgenConfig object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return WorldgenConfig.model_validate(data)


def resolve_seed(environ: Mapping[str, str] | None = None) -> int:
    """Pick the run seed from ``PS_SEED`` or the wall clock.

    Args:
        environ: Environment mapping, defaults to ``os.environ``.

    Returns:
        The ``PS_SEED`` value when it parses as an unsigned 64-bit integer,
        otherwise the current Unix time in seconds.
    """
    if environ is None:
        environ = os.environ

    raw = environ.get(SEED_ENV_VAR)
    if raw is not None:
        try:
            seed = int(raw.strip())
        except ValueError:
            seed = -1
        if 0 <= seed <= MAX_SEED:
            return seed
        logger.warning("seed_env_unparseable", variable=SEED_ENV_VAR, value=raw)

    return int(time.time())
