import logging
import logging.handlers
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import structlog

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"

MB = 1024 * 1024


def _rotating_handler(
    path: Path, level: int, max_mb: int, backups: int, fmt: str = FILE_FORMAT
) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=max_mb * MB, backupCount=backups
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def setup_logging(log_level: str = "INFO", log_to_file: bool = False, logs_dir: str = "logs") -> None:
    """Configure structlog and the stdlib root logger.

    Console output always goes to stdout. With ``log_to_file``, records
    are also written to ``app.log`` (INFO+) and ``errors.log`` (ERROR+,
    with tracebacks) under ``logs_dir``, and structlog renders JSON.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: Whether to add the rotating file handlers
        logs_dir: Directory for the log files
    """
    structlog.configure(
        processors=[
            # Learner id and other bound context
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.set_exc_info,
            (
                structlog.processors.JSONRenderer()
                if log_to_file
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, log_level.upper())
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(console)

    if not log_to_file:
        return

    directory = Path(logs_dir)
    directory.mkdir(parents=True, exist_ok=True)
    root.addHandler(_rotating_handler(directory / "app.log", logging.INFO, max_mb=10, backups=5))
    # Failed learner cycles land here with their traceback
    root.addHandler(
        _rotating_handler(
            directory / "errors.log",
            logging.ERROR,
            max_mb=5,
            backups=10,
            fmt=FILE_FORMAT + " - %(exc_info)s",
        )
    )


def get_srs_logger(name: str = None) -> structlog.BoundLogger:
    """Get a structured logger for the daily sweep.

    Args:
        name: Logger name (defaults to "srs_sweep")

    Returns:
        Structured logger; bound learner context is merged in automatically
    """
    return structlog.get_logger(name or "srs_sweep")


@contextmanager
def bind_learner_context(learner_id: int) -> Iterator[None]:
    """Bind ``learner_id`` into structlog contextvars for one learner's cycle."""
    with structlog.contextvars.bound_contextvars(learner_id=learner_id):
        yield
