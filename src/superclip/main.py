"""CLI handling for superclip.

This module provides the command-line interface for superclip, handling
argument parsing via click, logging configuration, and dispatching to the
daemon or to a protocol client action based on user-specified options.

Usage:
    superclip --daemon [--capacity N] [--interval SECONDS]
    superclip --list
    superclip --promote INDEX | --delete INDEX | --clear | --stop
    superclip --clean

Every mode accepts --socket PATH, --lock-file PATH and --verbose.
"""

import sys

import click

from superclip.constants import DEFAULT_CAPACITY, LOCK_ENV_VAR, POLL_INTERVAL, SOCKET_ENV_VAR
from superclip.main_logging import configure_logging
from superclip.main_options import MutuallyExclusiveOption

ACTIONS = ["daemon", "list_history", "promote", "delete", "clear", "stop", "clean"]


@click.command()
@click.option(
    "--daemon",
    is_flag=True,
    cls=MutuallyExclusiveOption,
    not_required_if=ACTIONS,
    help="Run the clipboard history daemon",
)
@click.option(
    "--list",
    "list_history",
    is_flag=True,
    cls=MutuallyExclusiveOption,
    not_required_if=ACTIONS,
    help="Print the current history",
)
@click.option(
    "--promote",
    type=click.IntRange(min=0),
    cls=MutuallyExclusiveOption,
    not_required_if=ACTIONS,
    metavar="INDEX",
    help="Move entry INDEX to the top and put it on the clipboard",
)
@click.option(
    "--delete",
    type=click.IntRange(min=0),
    cls=MutuallyExclusiveOption,
    not_required_if=ACTIONS,
    metavar="INDEX",
    help="Delete entry INDEX",
)
@click.option(
    "--clear",
    is_flag=True,
    cls=MutuallyExclusiveOption,
    not_required_if=ACTIONS,
    help="Delete every entry",
)
@click.option(
    "--stop",
    is_flag=True,
    cls=MutuallyExclusiveOption,
    not_required_if=ACTIONS,
    help="Stop the running daemon",
)
@click.option(
    "--clean",
    is_flag=True,
    cls=MutuallyExclusiveOption,
    not_required_if=ACTIONS,
    help="Remove socket and lock files left behind by a dead daemon",
)
@click.option(
    "--socket",
    type=click.Path(dir_okay=False),
    envvar=SOCKET_ENV_VAR,
    help="Unix domain socket path",
)
@click.option(
    "--lock-file",
    type=click.Path(dir_okay=False),
    envvar=LOCK_ENV_VAR,
    help="Single-instance lock file path",
)
@click.option(
    "--capacity",
    type=click.IntRange(min=1),
    default=DEFAULT_CAPACITY,
    show_default=True,
    help="Maximum history entries (daemon only)",
)
@click.option(
    "--interval",
    type=click.FloatRange(min=0.01),
    default=POLL_INTERVAL,
    show_default=True,
    help="Seconds between clipboard polls (daemon only)",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Enable DEBUG-level logging",
)
def main(
    daemon: bool,
    list_history: bool,
    promote: int | None,
    delete: int | None,
    clear: bool,
    stop: bool,
    clean: bool,
    socket: str | None,
    lock_file: str | None,
    capacity: int,
    interval: float,
    verbose: bool,
) -> None:
    """Clipboard history daemon and client."""
    from superclip.config import default_lock_path, default_socket_path

    selected = [daemon, list_history, promote is not None, delete is not None, clear, stop, clean]
    if not any(selected):
        raise click.UsageError(
            "One of --daemon, --list, --promote, --delete, --clear, --stop "
            "or --clean must be specified"
        )

    configure_logging(verbose, daemon=daemon)
    socket_path = socket or default_socket_path()
    lock_path = lock_file or default_lock_path()

    if daemon:
        _run_daemon(socket_path, lock_path, capacity, interval)
    elif clean:
        _run_clean(socket_path, lock_path)
    else:
        _run_client(socket_path, _build_command(list_history, promote, delete, clear))


def _build_command(list_history: bool, promote: int | None, delete: int | None, clear: bool):
    """Map the selected client option to a protocol command."""
    from superclip.messages import Clear, Delete, Promote, Snapshot, Stop

    if list_history:
        return Snapshot()
    if promote is not None:
        return Promote(promote)
    if delete is not None:
        return Delete(delete)
    if clear:
        return Clear()
    return Stop()


def _run_daemon(socket_path: str, lock_path: str, capacity: int, interval: float) -> None:
    """Run the daemon until it is stopped.

    Args:
        socket_path: Path to the Unix domain socket.
        lock_path: Path to the single-instance lock file.
        capacity: Maximum history entries.
        interval: Seconds between clipboard polls.
    """
    import asyncio

    from superclip.clipboard_x11 import X11Clipboard
    from superclip.config import DaemonConfig
    from superclip.daemon import run_daemon
    from superclip.errors import StartupError

    config = DaemonConfig(
        socket_path=socket_path,
        lock_path=lock_path,
        capacity=capacity,
        poll_interval=interval,
    )
    try:
        backend = X11Clipboard.open()
        asyncio.run(run_daemon(config, backend))
    except StartupError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _run_client(socket_path: str, command) -> None:
    """Send command to the daemon and print the response.

    Exits with status 1 if the daemon is unreachable or rejects the command.
    """
    import asyncio

    from superclip.client import send_command
    from superclip.history import format_table
    from superclip.messages import Stop
    from superclip.protocol import ProtocolError

    try:
        response = asyncio.run(send_command(socket_path, command))
    except (ProtocolError, ConnectionError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if response.snapshot is not None:
        click.echo(format_table(response.snapshot))
    if response.message is not None:
        if response.snapshot is None and not isinstance(command, Stop):
            click.echo(f"Error: {response.message}", err=True)
            sys.exit(1)
        click.echo(response.message)


def _run_clean(socket_path: str, lock_path: str) -> None:
    """Remove leftover runtime files unless a daemon is still running."""
    from superclip.daemon import clean_runtime_files
    from superclip.errors import StartupError

    try:
        removed = clean_runtime_files(socket_path, lock_path)
    except StartupError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    for path in removed:
        click.echo(f"Removed {path}")
