"""Logging configuration for the superclip CLI."""
import logging

CLIENT_FORMAT = "%(levelname)s: %(message)s"
DAEMON_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool, daemon: bool = False) -> None:
    """Configure logging for a client invocation or a daemon run.

    Args:
        verbose: If True, set DEBUG level.
        daemon: If True, log lifecycle events at INFO with timestamps and
            logger names; clients only report WARNING and above.

    Errors are always printed to stderr regardless of verbosity.
    """
    if verbose:
        level = logging.DEBUG
    elif daemon:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format=DAEMON_FORMAT if daemon else CLIENT_FORMAT,
        handlers=[logging.StreamHandler()],
    )
