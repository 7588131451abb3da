"""
Logging configuration module.

Colored console output, optional plain file output, and timed_operation()
for the start/done/failed lines around a top-level operation.
"""

import logging
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path


class Colors:
    """ANSI escape sequences for terminal colors."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    WHITE = "\033[37m"
    CYAN = "\033[36m"
    YELLOW = "\033[33m"
    BRIGHT_RED = "\033[91m"
    BG_RED = "\033[41m"


class ColoredFormatter(logging.Formatter):
    """
    Formatter that colors the level name and dims the logger name.

    The record is restored after formatting so file handlers see plain text.
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.DIM + Colors.WHITE,
        logging.INFO: Colors.CYAN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.BRIGHT_RED,
        logging.CRITICAL: Colors.BOLD + Colors.WHITE + Colors.BG_RED,
    }

    def __init__(self, fmt: str, datefmt: str | None = None, use_colors: bool = True):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_colors:
            return super().format(record)

        original_levelname = record.levelname
        original_name = record.name

        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        record.levelname = f"{color}{record.levelname:8}{Colors.RESET}"
        record.name = f"{Colors.DIM}{record.name}{Colors.RESET}"

        result = super().format(record)

        record.levelname = original_levelname
        record.name = original_name
        return result


class PlainFormatter(logging.Formatter):
    """Non-colored formatter for file output."""


def setup_logging(level: int = logging.INFO, log_file: str | None = None, use_colors: bool | None = None):
    """
    Configure application-wide logging.

    Args:
        level: Console logging level (logging.DEBUG, logging.INFO, etc.)
        log_file: Optional path to a UTF-8 log file, always at DEBUG
        use_colors: Force colors on or off; defaults to whether stderr is a tty
    """
    if use_colors is None:
        use_colors = sys.stderr.isatty()

    console_formatter = ColoredFormatter(
        fmt="[%(asctime)s] %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        use_colors=use_colors,
    )
    file_formatter = PlainFormatter(
        fmt="[%(asctime)s] %(levelname)-8s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # stderr keeps stdout clean for command output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(console_formatter)
    console_handler.setLevel(level)

    handlers: list[logging.Handler] = [console_handler]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    # Reduce noise from libraries
    logging.getLogger("googleapiclient").setLevel(logging.WARNING)
    logging.getLogger("google_auth_httplib2").setLevel(logging.WARNING)
    logging.getLogger("openpyxl").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.debug("Log level: %s", logging.getLevelName(level))
    if log_file:
        logger.debug("Log file: %s", log_file)


@contextmanager
def timed_operation(name: str, logger: logging.Logger | None = None) -> Iterator[None]:
    """
    Log '<name> start', then '<name> done (N ms)' or '<name> failed' and re-raise.

    Usage:
        with timed_operation("members sync"):
            sync_members_table(target, members)
    """
    log = logger or logging.getLogger(__name__)
    start = time.time()
    log.info("%s start", name)
    try:
        yield
    except Exception as e:
        log.error("%s failed after %d ms: %s", name, int((time.time() - start) * 1000), e)
        raise
    log.info("%s done (%d ms)", name, int((time.time() - start) * 1000))
