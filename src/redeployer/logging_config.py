"""Logging setup: error.log, combined.log and console."""

import logging
from pathlib import Path

import structlog
from structlog.stdlib import ProcessorFormatter

ERROR_LOG_FILE = "error.log"
COMBINED_LOG_FILE = "combined.log"


def _json_formatter() -> ProcessorFormatter:
    """JSON lines with timestamp, level, logger, message, extras and exception."""
    return ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.stdlib.ExtraAdder(),
        ],
        processors=[
            ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.EventRenamer("message"),
            structlog.processors.JSONRenderer(default=str),
        ],
    )


def setup_logging(log_dir: str | Path = ".", verbose: bool = False) -> logging.Logger:
    """
    Configure the "redeployer" logger with three channels.

    error.log gets ERROR and above, combined.log gets everything (both JSON
    lines), the console gets a short human-readable line. Safe to call twice.
    """
    logger = logging.getLogger("redeployer")
    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)

    error_handler = logging.FileHandler(directory / ERROR_LOG_FILE, encoding="utf-8")
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(_json_formatter())

    combined_handler = logging.FileHandler(directory / COMBINED_LOG_FILE, encoding="utf-8")
    combined_handler.setLevel(level)
    combined_handler.setFormatter(_json_formatter())

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", datefmt="%H:%M:%S")
    )

    for handler in (error_handler, combined_handler, console_handler):
        logger.addHandler(handler)
    return logger
