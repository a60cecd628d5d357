#!/usr/bin/env python3
"""Filesystem housekeeping for the daemon's Unix socket.

A socket file left behind by a crashed daemon must not stop a new daemon
from binding, while a file that still has a listener behind it must.
"""

from __future__ import annotations

import os
import socket
import stat
import sys

from superclip.errors import StartupError


def check_socket_state(socket_path: str) -> None:
    """Make sure socket_path is free to bind.

    Nothing to do when the path does not exist. An existing socket is
    probed with a connect: a refused connect means nobody is listening, so
    the leftover file is removed. Anything else is left alone.

    Args:
        socket_path: Where the daemon is about to listen.

    Raises:
        StartupError: If a live daemon answers on the path, the path is not
            a socket, or probing it fails.
    """
    if not os.path.exists(socket_path):
        return
    if not stat.S_ISSOCK(os.stat(socket_path).st_mode):
        raise StartupError(f"Cannot access socket {socket_path}: not a socket")

    probe = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        probe.connect(socket_path)
    except ConnectionRefusedError:
        os.unlink(socket_path)
        return
    except OSError as e:
        raise StartupError(f"Cannot access socket {socket_path}: {e}") from e
    finally:
        probe.close()
    raise StartupError(f"Socket already in use by active server: {socket_path}")


def print_startup_message(socket_path: str) -> None:
    """Announce the daemon's pid and socket on stderr."""
    sys.stderr.write(
        f"superclip daemon (pid {os.getpid()}) listening on {socket_path}\n"
    )


def cleanup_socket(socket_path: str) -> None:
    """Unlink socket_path; a file that is already gone is fine."""
    try:
        os.unlink(socket_path)
    except FileNotFoundError:
        pass
