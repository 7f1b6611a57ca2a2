#!/usr/bin/env python3
"""
WFC Tiler - generate edge-matched tile maps from the command line.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .core import (
    DEFAULT_CATALOGUE, CatalogueLoader, Contradicted, MapSaver, TilerError,
    build_compatibility_model, solve_with_retries
)
from .logging_config import get_logger, setup_logging
from .models import SolveSettings
from .utils import export_grid_to_png, format_compatibility_table, render_text


logger = get_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_UNSOLVED = 2


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate an edge-matched tile map")
    parser.add_argument("--config", help="JSON file with solve settings")
    parser.add_argument("--catalogue", help="JSON tile catalogue (default: built-in four tiles)")
    parser.add_argument("--width", type=int, help="Grid width in cells")
    parser.add_argument("--height", type=int, help="Grid height in cells")
    parser.add_argument("--policy", choices=['lowest', 'random', 'weighted'],
                        help="Tile selection policy")
    parser.add_argument("--seed", type=int, help="Base random seed (attempt n uses seed + n)")
    parser.add_argument("--attempts", type=int, help="Maximum attempts after contradictions")
    parser.add_argument("--max-steps", type=int, help="Collapse-step cap per attempt")
    parser.add_argument("--dump", action="store_true",
                        help="Print the compatibility table and exit")
    parser.add_argument("--png", help="Write the result to a PNG file")
    parser.add_argument("--save", help="Write the result to a JSON map file")
    parser.add_argument("--log-dir", help="Directory for the debug log file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> SolveSettings:
    """Settings from --config, overridden by explicit flags."""
    settings = SolveSettings.load(args.config) if args.config else SolveSettings()
    overrides = {
        'width': args.width,
        'height': args.height,
        'policy': args.policy,
        'seed': args.seed,
        'max_attempts': args.attempts,
        'max_steps': args.max_steps,
    }
    for key, value in overrides.items():
        if value is not None:
            setattr(settings, key, value)
    settings.validate()
    return settings


def run(args: argparse.Namespace) -> int:
    catalogue = CatalogueLoader.load(args.catalogue) if args.catalogue else DEFAULT_CATALOGUE
    model = build_compatibility_model(catalogue)

    if args.dump:
        print(format_compatibility_table(model))
        return EXIT_OK

    settings = build_settings(args)
    result = solve_with_retries(
        settings.width, settings.height, model,
        seed=settings.seed,
        max_attempts=settings.max_attempts,
        policy=settings.policy,
        weights=catalogue.weights(),
        max_steps=settings.max_steps
    )

    if args.save:
        MapSaver.save(args.save, result.grid, catalogue)
    if args.png and not export_grid_to_png(args.png, result.grid, catalogue):
        logger.error(f"Could not write {args.png}")
        return EXIT_ERROR

    if not result.solved:
        if isinstance(result, Contradicted):
            print(f"No tiling found after {result.attempts} attempt(s): "
                  f"contradiction at {result.cell}", file=sys.stderr)
        else:
            print(f"No tiling found after {result.attempts} attempt(s): step limit reached",
                  file=sys.stderr)
        return EXIT_UNSOLVED

    print(render_text(result.grid, catalogue))
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_dir, console_level=logging.INFO if args.verbose else logging.WARNING)

    try:
        return run(args)
    except (TilerError, OSError, ValueError) as e:
        logger.error(str(e))
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
