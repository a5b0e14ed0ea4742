"""Shared test fixtures for world generation tests."""

import queue
import tempfile
from pathlib import Path

import numpy as np
import pytest

from worldgen.config import GenParams, WorldgenConfig
from worldgen.grid import Dimensions
from worldgen.terrain.map import TerrainMap


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config_toml():
    """Sample world generation config as TOML string."""
    return """
[params]
seed = 99
target_water = 100
max_polar_tiles = 120
min_polar_tiles = 40

[params.world_size]
width = 40
height = 30

[heightmap]
octaves = 6

[erosion]
erosion_weight = 0.1
min_uphill_step = 2.5

[erosion.rain_noise]
octaves = 3

[polar]
budget_weight = 0.8

[display]
registration_timeout_s = 0.5
"""


@pytest.fixture
def config_file(temp_dir, sample_config_toml):
    """Create a temporary config file."""
    config_path = temp_dir / "worldgen.toml"
    config_path.write_text(sample_config_toml)
    return config_path


@pytest.fixture
def basin_elevation() -> np.ndarray:
    """5x5 grid: ocean ring at -10, land at 10, a lake at -5 in the centre.

        ~ ~ ~ ~ ~
        ~ ^ ^ ^ ~
        ~ ^ o ^ ~
        ~ ^ ^ ^ ~
        ~ ~ ~ ~ ~
    """
    elevation = np.full((5, 5), -10.0)
    elevation[1:4, 1:4] = 10.0
    elevation[2, 2] = -5.0
    return elevation


@pytest.fixture
def basin_terrain(basin_elevation: np.ndarray) -> TerrainMap:
    """The basin grid as a terrain map with sea level 0."""
    return TerrainMap.from_elevation(
        Dimensions(width=5, height=5), basin_elevation, sea_level=0.0
    )


@pytest.fixture
def small_config() -> WorldgenConfig:
    """16x16 world with a polar budget that fits the map."""
    config = WorldgenConfig(
        params=GenParams(
            seed=5,
            world_size=Dimensions(width=16, height=16),
            max_polar_tiles=80,
            min_polar_tiles=0,
        )
    )
    config.display.registration_timeout_s = 1.0
    return config


@pytest.fixture
def channels() -> tuple[queue.Queue, queue.Queue]:
    """Worker->display packet queue and display->worker tick queue."""
    return queue.Queue(), queue.Queue()
