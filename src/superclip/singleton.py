#!/usr/bin/env python3
"""Single-instance guard.

The daemon holds an exclusive flock on a well-known lock file for its
whole lifetime and writes its PID into it. The kernel drops the flock
when the owning process dies, so a lock file left behind by a crashed
daemon is simply reclaimed by the next one.
"""

from __future__ import annotations

import fcntl
import logging
import os
from typing import IO, Optional

from superclip.errors import StartupError

logger = logging.getLogger(__name__)


def is_process_alive(pid: int) -> bool:
    """Return True if a process with this PID exists."""
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # Exists, but belongs to another user.
        return True
    return True


def _parse_pid(text: str) -> Optional[int]:
    try:
        return int(text.strip())
    except ValueError:
        return None


class SingletonGuard:
    """Exclusive, PID-stamped lock file.

    Usage:
        with SingletonGuard(path):
            ...  # only one process gets here at a time
    """

    def __init__(self, lock_path: str) -> None:
        self.lock_path = lock_path
        self._file: IO[str] | None = None

    @property
    def held(self) -> bool:
        return self._file is not None

    def acquire(self) -> None:
        """Take the lock and record our PID.

        Raises:
            StartupError: If another live process holds the lock or the
                lock file cannot be opened.
        """
        try:
            lock_file = open(self.lock_path, "a+")
        except OSError as e:
            raise StartupError(f"Cannot open lock file {self.lock_path}: {e}") from e

        try:
            fcntl.flock(lock_file, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            lock_file.seek(0)
            owner = _parse_pid(lock_file.read())
            lock_file.close()
            detail = f" (pid {owner})" if owner is not None else ""
            raise StartupError(f"superclip daemon is already running{detail}") from None

        lock_file.seek(0)
        previous = _parse_pid(lock_file.read())
        if previous is not None and previous != os.getpid():
            state = "alive" if is_process_alive(previous) else "gone"
            logger.info("Reclaiming stale lock file left by pid %d (%s)", previous, state)

        lock_file.seek(0)
        lock_file.truncate()
        lock_file.write(str(os.getpid()))
        lock_file.flush()
        self._file = lock_file
        logger.debug("Acquired lock %s", self.lock_path)

    def release(self) -> None:
        """Remove the lock file and drop the lock."""
        if self._file is None:
            return
        # Unlink before unlocking.
        try:
            os.unlink(self.lock_path)
        except FileNotFoundError:
            pass
        fcntl.flock(self._file, fcntl.LOCK_UN)
        self._file.close()
        self._file = None
        logger.debug("Released lock %s", self.lock_path)

    def __enter__(self) -> SingletonGuard:
        self.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()
