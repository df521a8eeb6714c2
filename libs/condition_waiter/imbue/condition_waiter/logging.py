import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from typing import Final

from loguru import logger

_LOG_FORMAT: Final[str] = (
    "<level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def setup_logging(level: str = "INFO") -> None:
    """Send loguru output to stderr at the given level, replacing any existing sinks.

    The library itself never calls this; applications opt in.
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=_LOG_FORMAT)


@contextmanager
def log_span(message: str, *args: Any, **context: Any) -> Iterator[None]:
    """Log a debug message on entry and a trace message with the elapsed time on exit.

    Keyword arguments are bound with logger.contextualize, so every message logged inside
    the span (including from coroutines awaited within it) carries them as extra fields.
    A span that exits with an exception logs "[failed after ...]" and re-raises.
    """
    with logger.contextualize(**context):
        logger.debug(message, *args)
        start_time = time.monotonic()
        try:
            yield
        except BaseException as e:
            elapsed = time.monotonic() - start_time
            logger.trace(message + " [failed after {:.5f} sec: {}]", *args, elapsed, type(e).__name__)
            raise
        else:
            elapsed = time.monotonic() - start_time
            logger.trace(message + " [done in {:.5f} sec]", *args, elapsed)
