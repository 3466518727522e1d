import sys
from pathlib import Path
from typing import Optional

from loguru import logger

_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}"


def configure_logging(verbose: bool = False, log_file: Optional[str] = None):
    """Send log lines to stderr and, if configured, to a log file.

    Sinks are added with `catch=True`, so an error while writing a log line is
    reported by loguru and never interrupts the command.
    """
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING", catch=True)
    if not log_file:
        return
    try:
        Path(log_file).expanduser().parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            Path(log_file).expanduser(),
            level="DEBUG" if verbose else "INFO",
            format=_FILE_FORMAT,
            catch=True,
        )
    except OSError as e:
        logger.warning("Not writing log file {}: {}", log_file, e)
