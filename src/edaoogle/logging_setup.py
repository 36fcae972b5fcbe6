"""Process-wide logging configuration for the CLI and the MCP server."""

from __future__ import annotations

import logging
import sys

from edaoogle.exceptions import ConfigError

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
HANDLER_NAME = "edaoogle"


def configure_logging(level: str = "INFO") -> None:
    """Install a single stderr handler on the root logger at ``level``.

    Calling it again replaces the previous handler, so repeated setup in tests
    does not duplicate output. Logs go to stderr because stdout carries the
    MCP stdio transport.
    """
    numeric = logging.getLevelName(str(level).upper())
    if not isinstance(numeric, int):
        raise ConfigError(f"Unknown log level: {level!r}")

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == HANDLER_NAME:
            root.removeHandler(existing)
    handler.set_name(HANDLER_NAME)
    root.addHandler(handler)
    root.setLevel(numeric)
