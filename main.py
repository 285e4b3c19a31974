"""CLI entrypoint for the wave function collapse tile generator."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from tilewfc.core.constants import DEFAULT_HEIGHT, DEFAULT_WIDTH
from tilewfc.core.exceptions import WFCError
from tilewfc.engine.generator import GenerationResult, GeneratorConfig, WFCGenerator
from tilewfc.io.catalog import load_catalog
from tilewfc.io.render import save_render
from tilewfc.utils.logger import configure_logging, get_logger
from tilewfc.utils.pretty import pretty_print_grid, print_generation_stats


LOGGER = get_logger("tilewfc.cli")


def parse_tint(value: str) -> Tuple[int, int, int]:
    """Parse ``R,G,B`` into a colour tuple."""
    parts = value.split(",")
    if len(parts) != 3:
        raise argparse.ArgumentTypeError("tint must be R,G,B")
    try:
        channels = tuple(int(p) for p in parts)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("tint channels must be integers") from exc
    if any(c < 0 or c > 255 for c in channels):
        raise argparse.ArgumentTypeError("tint channels must be within 0-255")
    return channels  # type: ignore[return-value]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a tile grid with wave function collapse",
    )
    parser.add_argument("--tileset", type=Path, required=True, help="Path to tileset.json")
    parser.add_argument("--width", type=int, default=DEFAULT_WIDTH, help="Grid width in cells")
    parser.add_argument("--height", type=int, default=DEFAULT_HEIGHT, help="Grid height in cells")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument(
        "--framerate",
        type=float,
        default=None,
        help="Print the grid after every step, paced at this many frames per second",
    )
    parser.add_argument(
        "--max-iterations",
        type=int,
        default=None,
        help="Step budget per attempt (default: width*height + 1)",
    )
    parser.add_argument("--timeout", type=float, default=None, help="Wall-clock budget per attempt in seconds")
    parser.add_argument(
        "--retry-limit",
        type=int,
        default=1,
        help="Number of fresh attempts allowed after contradictions",
    )
    parser.add_argument(
        "--random-start",
        action="store_true",
        help="Collapse one random cell before the first step",
    )
    parser.add_argument("--render", type=Path, help="Optional path to a rendered PNG")
    parser.add_argument(
        "--tiles-dir",
        type=Path,
        help="Directory holding tile images (default: the tileset's directory)",
    )
    tint = parser.add_mutually_exclusive_group()
    tint.add_argument("--tint", type=parse_tint, metavar="R,G,B", help="Multiply the render by a colour")
    tint.add_argument("--random-tint", action="store_true", help="Multiply the render by a random colour")
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument("--stats", action="store_true", help="Print the grid and tile usage to stderr")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def build_payload(result: GenerationResult) -> Dict[str, Any]:
    grid = result.grid
    return {
        "width": grid.width,
        "height": grid.height,
        "tile_size": grid.catalog.size,
        "seed": result.seed,
        "attempt_seeds": result.attempt_seeds,
        "steps": result.steps,
        "attempts": result.attempts,
        "grid": grid.to_jsonable(),
    }


def run_animated(generator: WFCGenerator, framerate: float, stream=None) -> GenerationResult:
    stream = stream or sys.stderr
    interval = 1.0 / framerate
    for number, grid in enumerate(generator.steps(), start=1):
        pretty_print_grid(grid, label=f"Frame {number}", stream=stream)
        print(file=stream)
        time.sleep(interval)
    return generator.finish()


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.INFO)
    configure_logging(level)

    if args.width < 1 or args.height < 1:
        parser.error("--width and --height must be at least 1")
    if args.retry_limit < 1:
        parser.error("--retry-limit must be at least 1")
    if args.framerate is not None and args.framerate <= 0:
        parser.error("--framerate must be positive")
    if (args.tint or args.random_tint) and not args.render:
        parser.error("--tint/--random-tint require --render")

    config = GeneratorConfig(
        width=args.width,
        height=args.height,
        seed=args.seed,
        framerate=args.framerate,
        max_iterations=args.max_iterations,
        timeout_seconds=args.timeout,
        retry_limit=args.retry_limit,
        random_start=args.random_start,
    )

    try:
        catalog = load_catalog(args.tileset)
        generator = WFCGenerator(catalog, config)
        if config.framerate:
            result = run_animated(generator, config.framerate)
        else:
            result = generator.run()
        if args.render:
            tiles_dir = args.tiles_dir or args.tileset.parent
            tint = True if args.random_tint else args.tint
            save_render(result.grid, tiles_dir, args.render, tint=tint)
        if args.stats:
            print_generation_stats(result, stream=sys.stderr)
    except WFCError as exc:
        LOGGER.error("Generation failed: %s", exc)
        return 1

    output_text = json.dumps(build_payload(result), ensure_ascii=False, indent=2)
    if args.output:
        args.output.write_text(output_text, encoding="utf-8")
    else:
        print(output_text)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
