import logging
import time

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "crisp"


class RichConsoleHandler(RichHandler):
    def __init__(self, width=200, style=None, **kwargs):
        super().__init__(
            console=Console(color_system="256", width=width, style=style, stderr=True),
            **kwargs,
        )


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach a rich console handler to the package logger (idempotent)."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if not any(isinstance(h, RichConsoleHandler) for h in logger.handlers):
        handler = RichConsoleHandler(rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
    return logger


class ElapsedTimeLogger:
    """Context manager logging how long a block took."""

    def __init__(self, message: str, logger: logging.Logger | None = None):
        self.message = message
        self._logger = logger or logging.getLogger(LOGGER_NAME)

    def __enter__(self):
        self._logger.debug(self.message)
        self.start = time.perf_counter()
        return self

    def __exit__(self, *args):
        elapsed = time.perf_counter() - self.start
        self._logger.info("Finished %s in %.2f seconds", self.message, elapsed)
