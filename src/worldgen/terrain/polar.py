"""Polar cap placement: the map edge freezes first, then ring by ring inward.

Whether an inner cell freezes is decided by a pluggable policy from the number
of frozen neighbours, closeness to the edge, how much of the polar budget is
spent, and a random roll.
"""

import logging
from dataclasses import dataclass
from typing import Protocol

import numpy as np
from numpy.typing import NDArray

from ..config import PolarConfig
from ..grid import Dimensions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PolarCandidate:
    """Everything a policy may weigh for one inner cell."""

    index: int
    ring: int  # 1 = just inside the outer ring
    polar_neighbors: int  # 0-8
    edge_closeness: float  # 1.0 at the edge, towards 0.0 at the centre
    budget_used: float  # polar tiles placed / max polar tiles
    roll: float  # uniform in [0, 1)


class PolarPolicy(Protocol):
    """Decides whether a candidate cell becomes polar."""

    def accept(self, candidate: PolarCandidate) -> bool: ...


@dataclass(frozen=True)
class WeightedPolarPolicy:
    """Linear score of neighbours, edge closeness and budget against the roll."""

    neighbor_weight: float = 0.6
    edge_weight: float = 0.6
    budget_weight: float = 0.5

    @classmethod
    def from_config(cls, config: PolarConfig) -> "WeightedPolarPolicy":
        return cls(
            neighbor_weight=config.neighbor_weight,
            edge_weight=config.edge_weight,
            budget_weight=config.budget_weight,
        )

    def score(self, candidate: PolarCandidate) -> float:
        return (
            self.neighbor_weight * candidate.polar_neighbors / 8.0
            + self.edge_weight * candidate.edge_closeness
            - self.budget_weight * candidate.budget_used
        )

    def accept(self, candidate: PolarCandidate) -> bool:
        return self.score(candidate) > candidate.roll


@dataclass(frozen=True, eq=False)
class PolarCap:
    """Read-only mask of frozen cells, shape (height, width)."""

    mask: NDArray[np.bool_]

    @property
    def count(self) -> int:
        return int(np.count_nonzero(self.mask))

    def contains(self, i: int) -> bool:
        return bool(self.mask.reshape(-1)[i])


def ring_depth(width: int, height: int) -> NDArray[np.int64]:
    """Distance of each cell from the nearest map edge (0 on the outer ring)."""
    ys, xs = np.indices((height, width))
    return np.minimum.reduce([xs, ys, width - 1 - xs, height - 1 - ys])


def place_polar_cap(
    dimensions: Dimensions,
    rng: np.random.Generator,
    policy: PolarPolicy,
    max_tiles: int,
    min_tiles: int = 0,
) -> PolarCap:
    """Mark polar cells from the edge inward.

    The outer ring freezes first; when it holds more cells than
    ``max_tiles``, a random subset of exactly ``max_tiles`` ring cells is
    frozen instead. Rings up to half of each dimension are then visited in
    order; each cell rolls once and is offered to ``policy`` until
    ``max_tiles`` cells are polar.

    Args:
        dimensions: Map dimensions.
        rng: Generator dedicated to this stage.
        policy: Acceptance policy.
        max_tiles: Polar budget; placement stops once reached.
        min_tiles: Expected minimum; falling short is logged.

    Returns:
        PolarCap for the map.
    """
    width, height = dimensions.width, dimensions.height
    depth = ring_depth(width, height)
    outer = np.flatnonzero(depth == 0)
    if outer.size > max_tiles:
        outer = rng.choice(outer, size=max_tiles, replace=False)
        logger.debug(f"Outer ring trimmed to the budget of {max_tiles} tiles")
    mask = np.zeros((height, width), dtype=bool)
    flat = mask.reshape(-1)
    flat[outer] = True
    count = int(outer.size)
    max_ring = min(width // 2, height // 2)

    for ring in range(1, max_ring):
        if count >= max_tiles:
            break
        edge_closeness = 1.0 - ring / max_ring

        for i in np.flatnonzero(depth == ring).tolist():
            if count >= max_tiles:
                break
            polar_neighbors = sum(1 for n in dimensions.neighbors(i) if flat[n])
            candidate = PolarCandidate(
                index=i,
                ring=ring,
                polar_neighbors=polar_neighbors,
                edge_closeness=edge_closeness,
                budget_used=count / max_tiles if max_tiles else 1.0,
                roll=float(rng.random()),
            )
            if policy.accept(candidate):
                flat[i] = True
                count += 1

    if count < min_tiles:
        logger.warning(f"Placed {count} polar tiles, fewer than minimum {min_tiles}")
    else:
        logger.info(f"Placed {count} polar tiles")

    mask.flags.writeable = False
    return PolarCap(mask=mask)
