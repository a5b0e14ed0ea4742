"""Command-line interface for world generation."""

import argparse
import logging
import queue
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

if TYPE_CHECKING:
    from .config import WorldgenConfig
    from .generation import GenerationResult


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a procedural world map"
    )
    parser.add_argument("--width", type=int, default=None, help="World width (default: 100)")
    parser.add_argument("--height", type=int, default=None, help="World height (default: 100)")
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Run seed (default: $PS_SEED, else the current Unix time)",
    )
    parser.add_argument(
        "--target-water",
        type=int,
        default=None,
        help="Water coverage scaled to 0-255 (default: 178)",
    )
    parser.add_argument("--config", type=str, default=None, help="Path to a TOML config file")
    parser.add_argument("--no-display", action="store_true", help="Run without the display thread")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for world generation."""
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    logger = structlog.get_logger()

    # Import here to avoid slow startup for --help
    from .config import GenParams, WorldgenConfig, load_config, resolve_seed
    from .exceptions import WorldgenError
    from .generation import generate_world
    from .render.frames import world_to_frame

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            logger.error("config_not_found", path=args.config)
            return 1
        config = load_config(config_path)
        logger.info("config_loaded", path=str(config_path))
    else:
        config = WorldgenConfig()

    # Apply CLI overrides
    overrides = config.params.model_dump()
    if args.width is not None:
        overrides["world_size"]["width"] = args.width
    if args.height is not None:
        overrides["world_size"]["height"] = args.height
    if args.target_water is not None:
        overrides["target_water"] = args.target_water
    if args.seed is not None:
        overrides["seed"] = args.seed
    elif "seed" not in config.params.model_fields_set:
        overrides["seed"] = resolve_seed()
    try:
        config.params = GenParams.model_validate(overrides)
    except ValidationError as e:
        logger.error("invalid_parameters", errors=e.errors(include_url=False))
        return 2

    print(f"Generating {config.params.world_size} world with seed {config.params.seed}")

    try:
        if args.no_display:
            result = generate_world(config)
        else:
            result = _run_with_display(config)
    except WorldgenError as e:
        logger.error("generation_failed", error=str(e))
        return 1

    frame = world_to_frame(result.world.terrain, result.world.polar)
    print(frame.text())
    print()
    print(f"Rivers: {len(result.world.terrain.rivers)}")
    print(f"Polar tiles: {result.world.polar.count}")
    if result.pending:
        print(f"Not implemented: {', '.join(result.pending)}")
    return 0


def _run_with_display(config: "WorldgenConfig") -> "GenerationResult":
    """Run generation on a worker thread while the display drives the main thread."""
    from .generation import generate_world
    from .render.display import HeadlessDisplay
    from .render.link import RenderLink

    logger = structlog.get_logger()
    packets: queue.Queue = queue.Queue()
    ticks: queue.Queue = queue.Queue()
    link = RenderLink(packets, ticks, config.display.registration_timeout_s)
    display = HeadlessDisplay(packets, ticks, config.params.world_size)

    outcome: dict[str, Any] = {}

    def work() -> None:
        try:
            outcome["result"] = generate_world(config, link)
        except Exception as e:
            outcome["error"] = e

    worker = threading.Thread(target=work, name="worldgen-worker", daemon=True)
    worker.start()
    display.run_until(lambda: not worker.is_alive())
    display.close()
    worker.join()

    logger.debug("display_stopped", frames=display.frames_received)
    if "error" in outcome:
        raise outcome["error"]
    return outcome["result"]
