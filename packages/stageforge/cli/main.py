"""Command-line interface for StageForge.

Drives the session coordinator from a terminal: list imported programs,
probe the renderer install, and run a program interactively.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
import sys

from rich.console import Console
from rich.table import Table

from stageforge.core.config.loader import configure_logging_from_config, load_app_config
from stageforge.core.config.models import AppConfig
from stageforge.core.events import Event, EventBus
from stageforge.core.renderer import RendererSupervisor
from stageforge.core.session import CommandResult, ProgramSessionCoordinator
from stageforge.core.utils import program_id_from_path
from stageforge.core.utils.logging import configure_logging

console = Console()
logger = logging.getLogger(__name__)

PLAY_HELP = (
    "n=next  p=prev  f=first  l=last  j <index>=jump  "
    "b=blackout  s=start  status  q=quit"
)


def _load_config(args: argparse.Namespace) -> AppConfig:
    app_config = load_app_config(Path(args.config) if args.config else None)
    if args.backend:
        production = app_config.production.model_copy(update={"backend": args.backend})
        app_config = app_config.model_copy(update={"production": production})
    if args.log_level:
        configure_logging(level=args.log_level)
    else:
        configure_logging_from_config(app_config)
    return app_config


def _report(result: CommandResult, label: str) -> bool:
    if result.success:
        console.print(f"[green]✅ {label}[/green]")
    else:
        console.print(f"[red]❌ {label} failed: {result.error}[/red]")
    return result.success


def _print_event(event: Event) -> None:
    console.print(f"[dim]{event.source.value}:{event.type.value}[/dim]")


async def list_programs_async(app_config: AppConfig) -> int:
    coordinator = ProgramSessionCoordinator.from_config(app_config)
    result = await coordinator.list_programs()
    if not result.success:
        console.print(f"[red]ERROR: {result.error}[/red]")
        return 1

    programs = result.data["programs"]
    if not programs:
        console.print(f"No programs found under {Path(app_config.data_dir) / 'programs'}")
        return 0

    table = Table(title="Programs")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Mode")
    table.add_column("Slides", justify="right")
    for program in programs:
        table.add_row(program["id"], program["name"], program["mode"], str(program["slide_count"]))
    console.print(table)
    return 0


async def check_renderer_async(app_config: AppConfig) -> int:
    renderer = RendererSupervisor(app_config.renderer)
    if await renderer.check_availability():
        console.print(f"[green]✅ LibreOffice found:[/green] {renderer.executable}")
        return 0

    console.print("[red]❌ LibreOffice not found[/red]")
    console.print("Install LibreOffice or set renderer.executable in the config file.")
    return 1


async def play_async(app_config: AppConfig, program_id: str, display: int | None) -> int:
    """Load and run one program, then read navigation commands until quit."""
    bus = EventBus()
    bus.subscribe(_print_event)
    coordinator = ProgramSessionCoordinator.from_config(app_config, events=bus)

    connected = await coordinator.connect()
    if not connected.success:
        console.print(f"[yellow]⚠️  Production not connected: {connected.error}[/yellow]")

    if not _report(await coordinator.load_program(program_id), f"Loaded {program_id}"):
        return 1
    _report(await coordinator.start(display), "Started")

    console.print(f"\n[bold]{PLAY_HELP}[/bold]")
    try:
        while True:
            line = (await asyncio.to_thread(console.input, "[bold]> [/bold]")).strip()
            if not line:
                continue
            cmd, *rest = line.split()

            if cmd == "q":
                break
            elif cmd == "n":
                _report(await coordinator.next(), "next")
            elif cmd == "p":
                _report(await coordinator.prev(), "prev")
            elif cmd == "f":
                _report(await coordinator.first(), "first")
            elif cmd == "l":
                _report(await coordinator.last(), "last")
            elif cmd == "j":
                if not rest or not rest[0].lstrip("-").isdigit():
                    console.print("[yellow]Usage: j <index>[/yellow]")
                    continue
                _report(await coordinator.jump(int(rest[0])), f"jump {rest[0]}")
            elif cmd == "b":
                _report(await coordinator.blackout(), "blackout")
            elif cmd == "s":
                _report(await coordinator.start(display), "start")
            elif cmd == "status":
                console.print((await coordinator.get_status()).to_dict())
            else:
                console.print(f"[yellow]Unknown command: {cmd}[/yellow]  {PLAY_HELP}")
    except (EOFError, KeyboardInterrupt):
        console.print()
    finally:
        await coordinator.stop()
        await coordinator.disconnect()

    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="stageforge",
        description="StageForge - live presentation control for OBS Studio",
    )
    p.add_argument("--config", default=None, help="Path to app config (default: config.json)")
    p.add_argument(
        "--backend",
        choices=["obs", "memory"],
        default=None,
        help="Override the configured production backend",
    )
    p.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override the configured log level",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("programs", help="List imported programs")
    sub.add_parser("check-renderer", help="Check whether LibreOffice is installed")

    play = sub.add_parser("play", help="Load a program and control it interactively")
    play.add_argument("program_id", help="Program id, or the path of the deck it was imported from")
    play.add_argument("--display", type=int, default=None, help="Display index for live-render")

    return p


def main() -> None:
    """Main entry point for CLI."""
    p = build_arg_parser()
    args = p.parse_args()

    try:
        app_config = _load_config(args)
    except Exception as e:
        console.print(f"[red]ERROR: Could not load config: {e}[/red]")
        sys.exit(1)

    if args.cmd == "programs":
        exit_code = asyncio.run(list_programs_async(app_config))
    elif args.cmd == "check-renderer":
        exit_code = asyncio.run(check_renderer_async(app_config))
    elif args.cmd == "play":
        program_id = program_id_from_path(args.program_id)
        exit_code = asyncio.run(play_async(app_config, program_id, args.display))
    else:
        p.error(f"Unknown command: {args.cmd}")
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
