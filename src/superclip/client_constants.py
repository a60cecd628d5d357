#!/usr/bin/env python3
"""Constants for client connection retries.

The CLI client retries briefly when the daemon socket is not yet
accepting connections (for example right after the daemon was started).
"""

# Initial delay between connection attempts in seconds.
INITIAL_WAIT: float = 0.1

# Maximum delay between connection attempts in seconds.
MAX_WAIT: float = 1.0

# Multiplier for exponential backoff (delay = initial * multiplier^attempt).
WAIT_MULTIPLIER: float = 2.0

# Total connection attempts before giving up.
MAX_ATTEMPTS: int = 4

# Seconds to wait for the daemon to answer a request.
RESPONSE_TIMEOUT: float = 5.0
