"""Tests for heightmap synthesis."""

import numpy as np
import pytest

from worldgen.config import NoiseConfig
from worldgen.exceptions import ConfigurationError
from worldgen.terrain.heightmap import heightmap_coordinates, synthesize_heightmap


class TestHeightmapCoordinates:
    """Tests for noise sample coordinates."""

    def test_columns_scaled_by_height(self) -> None:
        """Column x samples (x + 1) / height * 2."""
        u, _ = heightmap_coordinates(4, 10)
        np.testing.assert_allclose(u, [0.2, 0.4, 0.6, 0.8])

    def test_rows_scaled_by_hundred(self) -> None:
        """Row y samples (y + 1) / 100."""
        _, v = heightmap_coordinates(4, 3)
        np.testing.assert_allclose(v, [0.01, 0.02, 0.03])


class TestSynthesizeHeightmap:
    """Tests for the elevation field."""

    def test_shape(self) -> None:
        """Output shape is (height, width)."""
        elevation = synthesize_heightmap(12, 8, seed=42)
        assert elevation.shape == (8, 12)
        assert elevation.dtype == np.float64

    def test_deterministic(self) -> None:
        """Same seed and dimensions give identical grids."""
        a = synthesize_heightmap(10, 10, seed=42)
        b = synthesize_heightmap(10, 10, seed=42)
        np.testing.assert_array_equal(a, b)

    def test_seed_changes_output(self) -> None:
        """Different seeds give different grids."""
        a = synthesize_heightmap(10, 10, seed=1)
        b = synthesize_heightmap(10, 10, seed=2)
        assert not np.array_equal(a, b)

    def test_finite(self) -> None:
        """Every cell is a finite number."""
        elevation = synthesize_heightmap(20, 15, seed=3)
        assert np.all(np.isfinite(elevation))

    def test_scaled_by_width(self) -> None:
        """Samples are normalized noise scaled by width * 2."""
        elevation = synthesize_heightmap(10, 10, seed=3)
        assert np.abs(elevation).max() <= 20.0

    def test_uses_config(self) -> None:
        """Noise parameters come from the config."""
        default = synthesize_heightmap(10, 10, seed=3)
        custom = synthesize_heightmap(10, 10, seed=3, config=NoiseConfig(octaves=2))
        assert not np.array_equal(default, custom)

    @pytest.mark.parametrize("width,height", [(0, 10), (10, 0), (-1, 5)])
    def test_invalid_dimensions(self, width: int, height: int) -> None:
        """Non-positive dimensions raise ConfigurationError."""
        with pytest.raises(ConfigurationError):
            synthesize_heightmap(width, height, seed=1)

    def test_non_finite_noise(self, monkeypatch) -> None:
        """NaN samples raise ConfigurationError."""

        def broken_noise(u, v, seed, config):
            return np.full((v.size, u.size), np.nan)

        monkeypatch.setattr(
            "worldgen.terrain.heightmap.fbm_from_config", broken_noise
        )
        with pytest.raises(ConfigurationError, match="non-finite"):
            synthesize_heightmap(5, 5, seed=1)
