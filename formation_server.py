"""
Entry point for the gesture-driven formation server.

Usage examples:
    python formation_server.py --mode full       # camera + debug preview window
    python formation_server.py --mode headless   # camera + renderer feed only
    python formation_server.py --photo https://example.org/a.jpg --particles 800
"""

from __future__ import annotations

import argparse


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Gesture formation server launcher")
    parser.add_argument(
        "--mode",
        choices=("full", "headless"),
        default="full",
        help="'full' opens the OpenCV debug preview, 'headless' only publishes to the renderer.",
    )
    parser.add_argument("--config", default="config.json", help="Path to the JSON config file.")
    parser.add_argument(
        "--photo",
        action="append",
        default=None,
        help="Image reference to place on the tree (repeatable). Replaces the configured photos.",
    )
    parser.add_argument("--particles", type=int, default=None, help="Ambient particle count.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for scatter layouts.")
    return parser.parse_args()


def build_overrides(args: argparse.Namespace) -> dict:
    overrides: dict = {}
    formation = {}
    if args.particles is not None:
        formation["particle_count"] = args.particles
    if args.seed is not None:
        formation["seed"] = args.seed
    if formation:
        overrides["formation"] = formation
    if args.photo:
        overrides["photos"] = list(args.photo)
    return overrides


def main() -> None:
    args = parse_args()
    from gesture_formation.main_loop import main as run_main_loop

    run_main_loop(
        config_path=args.config,
        headless=args.mode == "headless",
        overrides=build_overrides(args),
    )


if __name__ == "__main__":
    main()
