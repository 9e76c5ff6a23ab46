"""Logging configuration routed through rich on stderr."""

import logging

from rich.console import Console
from rich.logging import RichHandler

QUIET_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: str = "WARNING") -> None:
    """
    Configure the root logger.

    Output goes to stderr so stdout stays free for tool output and the MCP
    stdio transport. Unknown level names fall back to INFO.

    Parameters
    ----------
    level : str
        Logging level name (e.g. 'DEBUG', 'INFO')

    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )

    logging.basicConfig(
        level=numeric_level,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
