#!/usr/bin/env python3
"""
Echo suppression state.

When a client promotes an entry, the daemon writes that entry to the
system clipboard. The next poll then reads the very same value back.
Without tracking, the poller would record the daemon's own write as if
the user had copied it.

EchoState tracks two hashes:
- last_written_hash: the value the daemon most recently wrote
- last_seen_hash: the value the poller sampled on its previous cycle

Critical ordering: record_written() must be called BEFORE writing to the
clipboard so the following poll recognizes the value as an echo.
"""
import threading
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class EchoState:
    """
    Track hashes for echo suppression and change detection.

    The command server records writes from its own task while the poller
    checks them, so access goes through a small lock.

    Attributes:
        last_written_hash: SHA-256 hex digest of the last value written, or None.
        last_seen_hash: SHA-256 hex digest of the last sampled value, or None.
    """

    last_written_hash: Optional[str] = None
    last_seen_hash: Optional[str] = None
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def record_written(self, hash_value: str) -> None:
        """
        Record hash of a value the daemon is about to write.

        Args:
            hash_value: SHA-256 hex digest of the written item.
        """
        with self._lock:
            self.last_written_hash = hash_value

    def clear_written(self) -> None:
        """
        Forget the recorded write, for when writing to the clipboard failed.
        """
        with self._lock:
            self.last_written_hash = None

    def record_seen(self, hash_value: Optional[str]) -> None:
        """Take hash_value as the previous sample without reporting a change."""
        with self._lock:
            self.last_seen_hash = hash_value

    def is_unchanged(self, current_hash: str) -> bool:
        """
        Record a sampled value and report whether it repeats the last sample.

        Args:
            current_hash: SHA-256 hex digest of the sampled item.

        Returns:
            True if the clipboard still holds the previously sampled value.
        """
        with self._lock:
            unchanged = current_hash == self.last_seen_hash
            self.last_seen_hash = current_hash
            return unchanged

    def consume_echo(self, current_hash: str) -> bool:
        """
        Check whether a sampled value is the daemon's own write.

        A match is consumed: the written hash is cleared so the same value
        copied again later by the user is recorded normally. A match also
        counts as the latest sample, so the next cycle sees it as unchanged.

        A sample that differs from both the write and the previous sample
        means something else took the clipboard first; the write record is
        dropped then too, or a later genuine copy of that value would be
        mistaken for the echo.

        Args:
            current_hash: SHA-256 hex digest of the sampled item.

        Returns:
            True if the value is an echo of the daemon's own write.
        """
        with self._lock:
            if current_hash != self.last_written_hash:
                if current_hash != self.last_seen_hash:
                    self.last_written_hash = None
                return False
            self.last_written_hash = None
            self.last_seen_hash = current_hash
            return True

    def clear(self) -> None:
        """Reset both hashes to their initial values."""
        with self._lock:
            self.last_written_hash = None
            self.last_seen_hash = None
