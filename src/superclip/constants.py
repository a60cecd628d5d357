#!/usr/bin/env python3
"""Daemon defaults.

These constants control history size, poll cadence and the well-known
filesystem locations shared by the daemon and its clients.
"""

# Maximum number of entries kept in the clipboard history.
DEFAULT_CAPACITY: int = 25

# Seconds the poller sleeps between clipboard samples. Also bounds how long
# the poller takes to notice a shutdown request.
POLL_INTERVAL: float = 0.5

# Timeout in seconds for a single clipboard read, so an unresponsive
# clipboard owner cannot stall the poller.
CLIPBOARD_TIMEOUT: float = 2.0

# File names inside the runtime directory.
SOCKET_FILE_NAME: str = "superclip.sock"
LOCK_FILE_NAME: str = "superclip.lock"

# Environment variables overriding the default paths.
SOCKET_ENV_VAR: str = "SUPERCLIP_SOCKET"
LOCK_ENV_VAR: str = "SUPERCLIP_LOCK"

# Acknowledgement sent in response to a Stop command.
STOP_ACKNOWLEDGEMENT: str = "Stop signal received."

# Largest clipboard item recorded, in bytes. Keeps a full history of images
# within the protocol's payload limit.
MAX_ITEM_SIZE: int = 2621440
