"""Terrain map aggregate handed between stages and to the display."""

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from ..exceptions import ConfigurationError
from ..grid import Dimensions, are_adjacent


@dataclass(frozen=True)
class River:
    """A drainage path from a landlocked low point to open ocean."""

    cells: tuple[int, ...]  # Flat indices, source first, mouth last

    @property
    def source(self) -> int:
        return self.cells[0]

    @property
    def mouth(self) -> int:
        return self.cells[-1]

    def __len__(self) -> int:
        return len(self.cells)

    def is_connected(self, dimensions: Dimensions) -> bool:
        """Whether consecutive cells are all 8-connected neighbours."""
        return all(
            are_adjacent(a, b, dimensions.width, dimensions.height)
            for a, b in zip(self.cells, self.cells[1:])
        )


@dataclass(frozen=True, eq=False)
class TerrainMap:
    """A static map of a world and its terrain.

    The elevation array is read-only; stages that change terrain copy it and
    build a new map with :meth:`with_elevation`.
    """

    dimensions: Dimensions
    elevation: NDArray[np.float64]  # shape (height, width)
    sea_level: float
    min_height: float
    max_height: float
    rivers: tuple[River, ...] = field(default=())

    @classmethod
    def from_elevation(
        cls,
        dimensions: Dimensions,
        elevation: NDArray[np.float64],
        sea_level: float,
        rivers: tuple[River, ...] = (),
    ) -> "TerrainMap":
        """Build a map, caching extrema and freezing a private copy of the grid.

        Raises:
            ConfigurationError: If the array shape does not match dimensions.
        """
        if elevation.shape != dimensions.shape:
            raise ConfigurationError(
                f"Elevation shape {elevation.shape} does not match "
                f"{dimensions} (expected {dimensions.shape})"
            )
        frozen = np.array(elevation, dtype=np.float64, copy=True)
        frozen.flags.writeable = False
        return cls(
            dimensions=dimensions,
            elevation=frozen,
            sea_level=float(sea_level),
            min_height=float(frozen.min()),
            max_height=float(frozen.max()),
            rivers=tuple(rivers),
        )

    def with_elevation(
        self,
        elevation: NDArray[np.float64],
        rivers: tuple[River, ...] | None = None,
    ) -> "TerrainMap":
        """Return a new map at the same sea level with a replaced grid."""
        return TerrainMap.from_elevation(
            self.dimensions,
            elevation,
            self.sea_level,
            self.rivers if rivers is None else rivers,
        )

    @property
    def num_tiles(self) -> int:
        return self.dimensions.area

    def height_at(self, i: int) -> float:
        x, y = self.dimensions.index_to_point(i)
        return float(self.elevation[y, x])

    def is_underwater(self, i: int) -> bool:
        return self.height_at(i) <= self.sea_level

    def underwater_mask(self) -> NDArray[np.bool_]:
        """Boolean mask where True = at or below sea level."""
        return self.elevation <= self.sea_level

    def river_mask(self) -> NDArray[np.bool_]:
        """Boolean mask where True = cell lies on a river."""
        mask = np.zeros(self.dimensions.shape, dtype=bool)
        flat = mask.reshape(-1)
        for river in self.rivers:
            flat[list(river.cells)] = True
        return mask
