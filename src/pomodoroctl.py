"""Command-line controller for a running pomodoro widget.

Each subcommand writes one command to the control socket of the running
instance and exits; nothing is read back.
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from control import Command, ControlError, send_command

__version__ = "0.1.0"


def _send(ctx: click.Context, command: Command) -> None:
    runtime_dir: Optional[str] = ctx.obj.get("runtime_dir") if ctx.obj else None
    try:
        send_command(command, runtime_dir=runtime_dir)
    except (ControlError, OSError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    click.echo(f"Sent: {command.value}", err=True)


@click.group()
@click.version_option(version=__version__, prog_name="pomodoroctl")
@click.option(
    "--runtime-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Runtime directory to look for the socket in (default: $XDG_RUNTIME_DIR).",
)
@click.pass_context
def cli(ctx: click.Context, runtime_dir: Optional[str]) -> None:
    """Control the pomodoro timer."""
    ctx.ensure_object(dict)
    ctx.obj["runtime_dir"] = runtime_dir


@cli.command()
@click.pass_context
def toggle(ctx: click.Context) -> None:
    """Toggle the timer between running and paused."""
    _send(ctx, Command.TOGGLE)


@cli.command()
@click.pass_context
def start(ctx: click.Context) -> None:
    """Start the timer."""
    _send(ctx, Command.START)


@cli.command()
@click.pass_context
def stop(ctx: click.Context) -> None:
    """Stop/pause the timer."""
    _send(ctx, Command.STOP)


@cli.command()
@click.pass_context
def reset(ctx: click.Context) -> None:
    """Reset the timer to the beginning."""
    _send(ctx, Command.RESET)


@cli.command()
@click.pass_context
def skip(ctx: click.Context) -> None:
    """Skip to the next phase."""
    _send(ctx, Command.SKIP)


if __name__ == "__main__":
    cli()
