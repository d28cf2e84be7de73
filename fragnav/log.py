# fragnav/log.py
import logging
import sys
from typing import Optional, Union

from .config import Config

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


class ConsoleHandler(logging.StreamHandler):
    """Writes to whatever sys.stderr is at emit time (CLI runners swap it out)."""

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value):
        pass


_handler: Optional[logging.Handler] = None


def configure_logging(level: Optional[Union[int, str]] = None) -> logging.Logger:
    """
    Installs a single console handler on the `fragnav` logger.

    The level comes from the argument, else from `log_level` in config.yaml, else INFO.
    Calling it again only updates the level.
    """
    global _handler
    root = logging.getLogger("fragnav")
    if level is None:
        level = Config().get("log_level", "INFO")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    if _handler is None:
        _handler = ConsoleHandler()
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(_handler)
    root.setLevel(level)
    return root
