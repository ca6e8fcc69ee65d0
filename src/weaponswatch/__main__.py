"""Command-line entry point: watch a weapons file and print it on change.

Usage:
    python -m weaponswatch [PATH] [--interval SECONDS] [--project DIR] [-v]

Runs until interrupted with Ctrl+C.
"""

from __future__ import annotations

import argparse
import asyncio
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console

from weaponswatch import __version__
from weaponswatch.config import Config, load_config
from weaponswatch.config.schema import DEFAULT_WEAPONS_FILE
from weaponswatch.errors import MonitorConfigError
from weaponswatch.logging import get_logger, setup_logging
from weaponswatch.monitor import WeaponsFileMonitor, start_monitor
from weaponswatch.view import WeaponsView
from weaponswatch.weapons import Weapon

log = get_logger()

console = Console()


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="weaponswatch",
        description="Watch a weapons JSON file and show its contents whenever it changes",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "path",
        nargs="?",
        help=f"File to watch (default: config monitor.path or ./{DEFAULT_WEAPONS_FILE})",
    )
    parser.add_argument(
        "-i", "--interval",
        type=float,
        help="Seconds between polls (default: config monitor.poll_interval)",
    )
    parser.add_argument(
        "--project",
        type=Path,
        help="Project directory with a .weaponswatch/config.yaml",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=None,
        help="Increase verbosity (can be repeated, up to -vvvv)",
    )
    return parser


def apply_args(config: Config, args: argparse.Namespace) -> Config:
    """Apply command-line overrides on top of the loaded config."""
    if args.path:
        config.monitor.path = args.path
    if args.interval is not None:
        config.monitor.poll_interval = args.interval
    if args.verbose is not None:
        # Plain -v already means "info"; each extra -v goes one level deeper
        config.logging.verbose = min(args.verbose + 1, 4)
    return config


def resolve_watch_path(config: Config) -> Path:
    """Absolute path of the file to watch."""
    path = Path(config.monitor.path) if config.monitor.path else Path(DEFAULT_WEAPONS_FILE)
    return path.expanduser().resolve()


async def run(config: Config, stop: asyncio.Event | None = None) -> None:
    """Watch the configured file until ``stop`` is set (or forever)."""
    path = resolve_watch_path(config)
    view = WeaponsView(title=str(path))

    def on_weapons_updated(sender: WeaponsFileMonitor, weapons: list[Weapon]) -> None:
        view.update_weapons(weapons)
        console.print(view.render())

    monitor = start_monitor(path, config.monitor.poll_interval)
    unsubscribe = monitor.subscribe(on_weapons_updated)
    console.print(f"Watching [bold]{path}[/bold] every {config.monitor.poll_interval:g}s")

    try:
        await (stop or asyncio.Event()).wait()
    finally:
        unsubscribe()
        await monitor.aclose()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI. Returns the process exit code."""
    parser = create_parser()
    args = parser.parse_args(argv)

    project_root = str(args.project) if args.project else None
    config = apply_args(load_config(project_root=project_root), args)
    setup_logging(config.logging)

    try:
        asyncio.run(run(config))
    except MonitorConfigError as e:
        log.error("%s", e)
        console.print(f"[red]Error: {e}[/red]")
        return 2
    except KeyboardInterrupt:
        log.info("Interrupted")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
