"""Tests for frame builders."""

import numpy as np

from worldgen.grid import Dimensions
from worldgen.render.frames import string_to_frame, world_to_frame
from worldgen.render.packets import WHITE, Frame, Tile
from worldgen.terrain.map import River, TerrainMap
from worldgen.terrain.polar import PolarCap


class TestStringToFrame:
    """Tests for string_to_frame."""

    def test_short_text(self) -> None:
        """Short text fits on one row of its own length."""
        frame = string_to_frame("Seed: 42")
        assert frame.dimensions == Dimensions(width=8, height=1)
        assert frame.text() == "Seed: 42"
        assert all(tile.fg == WHITE for tile in frame.tiles)

    def test_wraps_at_hundred(self) -> None:
        """Text longer than 100 characters wraps and pads the last row."""
        text = "x" * 150
        frame = string_to_frame(text)
        assert frame.dimensions == Dimensions(width=100, height=2)
        assert len(frame.tiles) == 200
        assert frame.tile_at(49, 1).char == "x"
        assert frame.tile_at(50, 1).char == " "

    def test_exact_width(self) -> None:
        """Exactly 100 characters is a single full row."""
        frame = string_to_frame("y" * 100)
        assert frame.dimensions == Dimensions(width=100, height=1)

    def test_empty_text(self) -> None:
        """Empty text still yields a 1x1 blank frame."""
        frame = string_to_frame("")
        assert frame.dimensions == Dimensions(width=1, height=1)
        assert frame.tiles == (Tile(" "),)


class TestWorldToFrame:
    """Tests for world_to_frame."""

    def test_characters(self, basin_terrain) -> None:
        """Sea is '~' and land is '^'."""
        text = world_to_frame(basin_terrain).text().splitlines()
        assert text[0] == "~~~~~"
        assert text[1] == "~^^^~"
        assert text[2] == "~^~^~"

    def test_snapshot_dimensions(self, basin_terrain) -> None:
        """The frame matches the map size."""
        frame = world_to_frame(basin_terrain)
        assert isinstance(frame, Frame)
        assert frame.dimensions == basin_terrain.dimensions
        assert len(frame.tiles) == 25

    def test_depth_shading(self, basin_terrain) -> None:
        """Deeper water is darker blue; land is amber."""
        frame = world_to_frame(basin_terrain)
        deep = frame.tile_at(0, 0).fg
        shallow = frame.tile_at(2, 2).fg
        land = frame.tile_at(1, 1).fg

        assert deep == (0.0, 0.0, 0.0, 1.0)
        assert shallow[2] == 0.5
        assert land[:3] == (1.0, 0.75, 0.0)
        assert land[3] == 1.0

    def test_rivers_and_polar_drawn_over(self, basin_terrain) -> None:
        """Polar cells take precedence over rivers, rivers over terrain."""
        terrain = basin_terrain.with_elevation(
            basin_terrain.elevation, rivers=(River(cells=(12, 7, 2)),)
        )
        mask = np.zeros((5, 5), dtype=bool)
        mask[0, :] = True
        frame = world_to_frame(terrain, PolarCap(mask=mask))
        lines = frame.text().splitlines()

        assert lines[0] == "*****"
        assert lines[1] == "~^=^~"
        assert lines[2] == "~^=^~"

    def test_flat_map(self) -> None:
        """A map with no relief renders without dividing by zero."""
        terrain = TerrainMap.from_elevation(
            Dimensions(width=2, height=2), np.zeros((2, 2)), 0.0
        )
        frame = world_to_frame(terrain)
        assert frame.text() == "~~\n~~"
        assert frame.tile_at(0, 0).fg == (0.0, 0.0, 1.0, 1.0)
