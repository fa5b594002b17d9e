import sys
from pathlib import Path
from typing import Optional, Union
from loguru import logger
from envwarp.exceptions import ConfigurationError

# Remove default logger
logger.remove()

# Common log format for files
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

# Console format, prefixed like the rest of the container's entrypoint output
CONSOLE_FORMAT = "<cyan>[envwarp]</cyan> <level>{level: <8}</level> | <level>{message}</level>"

LOG_FILE_NAME = "envwarp.log"

_handler_ids = []


def configure_logging(level: str = "INFO", directory: Optional[Union[str, Path]] = None):
    """(Re)install the console sink and, when a directory is given, a rotating file sink.

    Everything goes to stderr so that stdout stays free for the exec'd service
    and for ``--version``.
    """
    while _handler_ids:
        logger.remove(_handler_ids.pop())

    _handler_ids.append(
        logger.add(
            sys.stderr,
            format=CONSOLE_FORMAT,
            level=level,
            colorize=None,
        )
    )

    if directory:
        logs_dir = Path(directory)
        try:
            logs_dir.mkdir(parents=True, exist_ok=True)
            _handler_ids.append(
                logger.add(
                    logs_dir / LOG_FILE_NAME,
                    rotation="100 MB",
                    retention="7 days",
                    compression="zip",
                    format=FILE_FORMAT,
                    level=level,
                    backtrace=True,
                    diagnose=False,
                )
            )
        except OSError as e:
            raise ConfigurationError(f"cannot write logs to ENVWARP_LOG_DIR '{logs_dir}': {e}") from e


configure_logging()

# Export the configured logger
__all__ = ["logger", "configure_logging"]
