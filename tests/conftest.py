#!/usr/bin/env python3
"""Pytest fixtures for superclip tests.

Provides an in-memory clipboard backend, history and echo state
instances, and temporary socket and lock paths.
"""

import asyncio
import shutil
import tempfile
import time
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from superclip.clipboard import ClipboardBackend
from superclip.config import DaemonConfig
from superclip.echo_state import EchoState
from superclip.errors import ClipboardReadError
from superclip.history import ClipboardHistory
from superclip.history_shared import SharedHistory


class FakeClipboard(ClipboardBackend):
    """In-memory clipboard standing in for X11.

    copy() simulates the user copying something. fail_reads makes the
    next N reads raise ClipboardReadError.
    """

    def __init__(self) -> None:
        self.content = None
        self.writes = []
        self.write_ok = True
        self.fail_reads = 0
        self.reads = 0
        self.started = False
        self.closed = False

    def copy(self, item) -> None:
        self.content = item

    def read(self):
        self.reads += 1
        if self.fail_reads:
            self.fail_reads -= 1
            raise ClipboardReadError("clipboard owner did not respond")
        return self.content

    def write(self, item) -> bool:
        self.writes.append(item)
        if self.write_ok:
            self.content = item
        return self.write_ok

    def start(self) -> None:
        self.started = True

    def close(self) -> None:
        self.closed = True


async def wait_until(predicate: Callable[[], bool], timeout: float = 5.0) -> None:
    """Poll predicate until it holds, failing the test after timeout."""
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            pytest.fail("Condition not reached within timeout")
        await asyncio.sleep(0.01)


@pytest.fixture
def fake_clipboard() -> FakeClipboard:
    """Create an empty in-memory clipboard."""
    return FakeClipboard()


@pytest.fixture
def history() -> ClipboardHistory:
    """Create a history with capacity 3."""
    return ClipboardHistory(capacity=3)


@pytest.fixture
def shared_history(history: ClipboardHistory) -> SharedHistory:
    """Wrap the capacity-3 history in a lock-guarded handle."""
    return SharedHistory(history)


@pytest.fixture
def echo_state() -> EchoState:
    """Create a fresh EchoState instance for testing."""
    return EchoState()


@pytest.fixture
def runtime_dir() -> Generator[Path, None, None]:
    """Provide a short temporary directory for sockets.

    Unix socket paths are limited to about 100 bytes, which pytest's
    tmp_path can exceed, so this lives directly under the system temp dir.
    """
    directory = Path(tempfile.mkdtemp(prefix="sc-"))
    yield directory
    shutil.rmtree(directory, ignore_errors=True)


@pytest.fixture
def temp_socket_path(runtime_dir: Path) -> Path:
    """Provide a temporary path for Unix domain socket testing."""
    return runtime_dir / "test.sock"


@pytest.fixture
def temp_lock_path(runtime_dir: Path) -> Path:
    """Provide a temporary path for the single-instance lock file."""
    return runtime_dir / "test.lock"


@pytest.fixture
def daemon_config(temp_socket_path: Path, temp_lock_path: Path) -> DaemonConfig:
    """Daemon settings with temporary paths and a fast poll interval."""
    return DaemonConfig(
        socket_path=str(temp_socket_path),
        lock_path=str(temp_lock_path),
        capacity=5,
        poll_interval=0.01,
    )
