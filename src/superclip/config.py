#!/usr/bin/env python3
"""Daemon configuration.

DaemonConfig groups the settings the coordinator needs. Paths default to
the user's runtime directory and can be overridden through environment
variables or command-line options.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from superclip.constants import (
    DEFAULT_CAPACITY,
    LOCK_ENV_VAR,
    LOCK_FILE_NAME,
    POLL_INTERVAL,
    SOCKET_ENV_VAR,
    SOCKET_FILE_NAME,
)


def _runtime_path(file_name: str) -> str:
    directory = os.environ.get("XDG_RUNTIME_DIR")
    if directory:
        return os.path.join(directory, file_name)
    # /tmp is shared between users, so make the name per-user.
    stem, dot, suffix = file_name.rpartition(".")
    return os.path.join("/tmp", f"{stem}-{os.getuid()}{dot}{suffix}")


def default_socket_path() -> str:
    return os.environ.get(SOCKET_ENV_VAR) or _runtime_path(SOCKET_FILE_NAME)


def default_lock_path() -> str:
    return os.environ.get(LOCK_ENV_VAR) or _runtime_path(LOCK_FILE_NAME)


@dataclass
class DaemonConfig:
    """Settings for one daemon run.

    Attributes:
        socket_path: Unix domain socket the command server listens on.
        lock_path: Lock file enforcing a single daemon instance.
        capacity: Maximum number of history entries.
        poll_interval: Seconds between clipboard samples.
    """

    socket_path: str = field(default_factory=default_socket_path)
    lock_path: str = field(default_factory=default_lock_path)
    capacity: int = DEFAULT_CAPACITY
    poll_interval: float = POLL_INTERVAL

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {self.capacity}")
        if self.poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {self.poll_interval}")
