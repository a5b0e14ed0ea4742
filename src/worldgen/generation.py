"""World generation orchestration.

Runs the stages in order on the worker thread, streaming snapshots to the
display through an optional RenderLink:

    heightmap -> sea level -> polar cap -> (base map) -> erosion -> (eroded map)

The civilization, port and history stages have no implementation yet and are
reported as such instead of silently succeeding.
"""

import enum
import time
from dataclasses import dataclass, field

import numpy as np
import structlog

from .config import WorldgenConfig
from .render.frames import string_to_frame, world_to_frame
from .render.link import RenderLink
from .render.packets import GUI, NewFrame, UpdateGUI
from .terrain.erosion import ErosionResult, erode
from .terrain.heightmap import synthesize_heightmap
from .terrain.map import TerrainMap
from .terrain.polar import PolarCap, PolarPolicy, WeightedPolarPolicy, place_polar_cap
from .terrain.sea_level import decide_sea_level, underwater_fraction

logger = structlog.get_logger()

TITLE_TEXT = "Generating world!"
OVERLAY_PRIORITY = 0

PENDING_STAGES = ("civilizations", "ports", "history")


class StageOutcome(enum.Enum):
    COMPLETED = "completed"
    NOT_IMPLEMENTED = "not_implemented"


@dataclass(frozen=True)
class World:
    """A generated world: terrain plus polar cap."""

    terrain: TerrainMap
    polar: PolarCap


@dataclass
class GenerationContext:
    """Master random state for one run.

    Each stage draws its own seed from the master generator, always in the
    same order, so a run is reproducible from the run seed alone.
    """

    seed: int
    rng: np.random.Generator = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.rng = np.random.default_rng(self.seed)

    def derive_seed(self) -> int:
        return int(self.rng.integers(0, 2**63))


@dataclass
class GenerationResult:
    world: World
    stages: dict[str, StageOutcome]
    erosion: ErosionResult
    seed: int
    duration_s: float = 0.0

    @property
    def pending(self) -> list[str]:
        """Stages that did not run because they are not implemented."""
        return [
            name
            for name, outcome in self.stages.items()
            if outcome is StageOutcome.NOT_IMPLEMENTED
        ]


class _Overlays:
    """Title and seed overlays, tolerant of a missing or closed display."""

    def __init__(self, link: RenderLink | None, seed: int):
        self._link = link
        self._title_id: int | None = None
        if link is None:
            return

        ids = link.register_guis(
            OVERLAY_PRIORITY,
            [
                GUI(offset=(0, 1), frame=string_to_frame(TITLE_TEXT)),
                GUI(offset=(0, -1), frame=string_to_frame(f"Seed: {seed}")),
            ],
        )
        if ids is not None:
            self._title_id = ids[0]

    def status(self, text: str) -> None:
        if self._link is None or self._title_id is None:
            return
        self._link.send(
            UpdateGUI(self._title_id, string_to_frame(f"{TITLE_TEXT} {text}"))
        )

    def show(self, world: World) -> None:
        if self._link is None:
            return
        self._link.poll()
        self._link.send(NewFrame(world_to_frame(world.terrain, world.polar)))


def generate_world(
    config: WorldgenConfig,
    link: RenderLink | None = None,
    polar_policy: PolarPolicy | None = None,
) -> GenerationResult:
    """Generate a world from configuration.

    Args:
        config: Full generation configuration; ``config.params.seed`` seeds
            the run.
        link: Channel to a display. Without one, or once the display has
            closed, generation runs silently.
        polar_policy: Polar acceptance policy; defaults to the weighted
            policy built from ``config.polar``.

    Returns:
        GenerationResult with the world and each stage's outcome.

    Raises:
        ConfigurationError: If the heightmap cannot be synthesized.
        CalibrationFailure: If the elevation grid cannot be calibrated.
        CalibrationInvariantError: If the sea level search breaks down.
    """
    params = config.params
    dimensions = params.world_size
    context = GenerationContext(params.seed)
    stages: dict[str, StageOutcome] = {}
    start = time.perf_counter()

    logger.info(
        "generation_started",
        seed=params.seed,
        size=str(dimensions),
        target_water=params.target_water,
    )

    # Seeds are drawn up front in a fixed order
    heightmap_seed = context.derive_seed()
    polar_seed = context.derive_seed()
    erosion_seed = context.derive_seed()

    elevation = synthesize_heightmap(
        dimensions.width, dimensions.height, heightmap_seed, config.heightmap
    )
    stages["heightmap"] = StageOutcome.COMPLETED

    sea_level = decide_sea_level(elevation, params.water_fraction)
    stages["sea_level"] = StageOutcome.COMPLETED
    logger.info(
        "sea_level_decided",
        sea_level=round(sea_level, 4),
        underwater=round(underwater_fraction(elevation, sea_level), 4),
    )
    terrain = TerrainMap.from_elevation(dimensions, elevation, sea_level)

    # Overlays only once the map is known to be valid
    overlays = _Overlays(link, params.seed)

    overlays.status("Freezing poles")
    policy = polar_policy or WeightedPolarPolicy.from_config(config.polar)
    polar = place_polar_cap(
        dimensions,
        np.random.default_rng(polar_seed),
        policy,
        params.max_polar_tiles,
        params.min_polar_tiles,
    )
    stages["polar"] = StageOutcome.COMPLETED
    logger.info("polar_cap_placed", tiles=polar.count)

    overlays.show(World(terrain, polar))

    overlays.status("Eroding")
    erosion = erode(terrain, erosion_seed, config.erosion)
    stages["erosion"] = StageOutcome.COMPLETED
    logger.info(
        "erosion_completed",
        rivers=len(erosion.terrain.rivers),
        searches=erosion.searches,
        unresolved=erosion.unresolved,
    )

    world = World(erosion.terrain, polar)
    overlays.show(world)

    for name in PENDING_STAGES:
        stages[name] = StageOutcome.NOT_IMPLEMENTED
        logger.info("stage_not_implemented", stage=name)

    overlays.status("Done")
    duration = time.perf_counter() - start
    logger.info("generation_finished", duration_s=round(duration, 3))

    return GenerationResult(
        world=world,
        stages=stages,
        erosion=erosion,
        seed=params.seed,
        duration_s=duration,
    )
