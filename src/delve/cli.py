from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from . import __version__
from .config import DungeonConfig, GenerationStrategy
from .dungeon.generator import generate
from .dungeon.geometry import Cell
from .errors import InvalidDungeonConfig
from .logging_config import configure_logging
from .navigation.astar import PathfindingEngine
from .navigation.grid import GridMap

logger = logging.getLogger(__name__)


def _cell(text: str) -> Cell:
    try:
        x, y = (int(part) for part in text.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected X,Y but got {text!r}")
    return Cell(x, y)


def _add_config_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", type=Path, default=None, help="YAML file overlaid on the defaults")
    p.add_argument("--width", type=int, default=None)
    p.add_argument("--height", type=int, default=None)
    p.add_argument("--seed", default=None, help="Master seed (int or string)")
    p.add_argument(
        "--strategy",
        choices=[s.value for s in GenerationStrategy],
        default=None,
        help="Layout strategy",
    )
    p.add_argument("--corridor-width", type=int, default=None)
    p.add_argument("--json", action="store_true", help="Print a JSON summary instead of the map")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="delve", description="Procedural dungeon layouts and pathfinding")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate a dungeon and print it")
    _add_config_args(gen)

    path = sub.add_parser("path", help="Generate a dungeon and find a path across it")
    _add_config_args(path)
    path.add_argument("--from", dest="start", type=_cell, default=None, help="Start cell X,Y (default: player)")
    path.add_argument("--to", dest="goal", type=_cell, default=None, help="Goal cell X,Y (default: boss)")
    path.add_argument("--four-way", action="store_true", help="Disallow diagonal moves")
    path.add_argument("--no-corner-cut", action="store_true", help="Forbid diagonals past walls")
    return parser


def build_config(args: argparse.Namespace) -> DungeonConfig:
    return DungeonConfig.load(
        args.config,
        width=args.width,
        height=args.height,
        seed=args.seed,
        strategy=args.strategy,
        corridor_width=args.corridor_width,
    )


def _cmd_generate(args: argparse.Namespace, config: DungeonConfig) -> int:
    layout = generate(config)
    if args.json:
        print(json.dumps(layout.to_dict(), indent=2, sort_keys=True))
    else:
        print("\n".join(layout.to_str_lines()))
        print(f"seed={layout.seed} rooms={len(layout.rooms)} signature={layout.signature()}")
    return 0


def _cmd_path(args: argparse.Namespace, config: DungeonConfig) -> int:
    layout = generate(config)
    grid = GridMap.from_layout(layout, diagonal=not args.four_way)
    engine = PathfindingEngine(grid, cut_corners=not args.no_corner_cut)
    start = args.start or layout.player_spawn
    goal = args.goal or layout.boss_spawn
    if start is None or goal is None:
        print("layout has no player or boss spawn; pass --from and --to", file=sys.stderr)
        return 2
    path = engine.find_path_cells(start, goal)
    if args.json:
        payload = {
            "seed": layout.seed,
            "from": [start.x, start.y],
            "to": [goal.x, goal.y],
            "found": path is not None,
            "cost": path.cost if path is not None else None,
            "cells": [[c.x, c.y] for c in path.cells] if path is not None else [],
        }
        print(json.dumps(payload, indent=2, sort_keys=True))
    else:
        print("\n".join(layout.to_str_lines(path.cells if path is not None else ())))
        if path is None:
            print(f"no path from {start.x},{start.y} to {goal.x},{goal.y}")
        else:
            print(f"path from {start.x},{start.y} to {goal.x},{goal.y}: {len(path)} steps, cost {path.cost}")
    return 0 if path is not None else 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG
    configure_logging(level)

    try:
        config = build_config(args)
    except InvalidDungeonConfig as e:
        print(e.to_human(), file=sys.stderr)
        return 2
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        return 2

    if args.command == "generate":
        return _cmd_generate(args, config)
    return _cmd_path(args, config)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
