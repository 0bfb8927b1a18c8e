"""Logging configuration for EngineScope.

Two rotating log files are written under the configured logs directory:
``main.log`` receives everything below the ``enginescope`` logger, and
``detection.log`` receives one line per classification call.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

MAIN_LOGGER = "enginescope"
DETECTION_LOGGER = "enginescope.detection"

MAIN_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(filename)s:%(lineno)d | %(message)s"
DETECTION_FORMAT = "%(asctime)s | DETECT | %(message)s"
CONSOLE_FORMAT = "%(levelname)s: %(message)s"

MAX_LOG_BYTES = 5 * 1024 * 1024  # 5 MB
LOG_BACKUP_COUNT = 3


def _rotating_handler(log_path: Path, format_string: str, log_level: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        log_path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(format_string))
    return handler


def _reset(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def setup_logging(
    logs_dir: Path,
    log_level: int = logging.INFO,
    console_output: bool = True,
) -> None:
    """Initialize the logging system.

    Safe to call more than once; previous handlers are closed and replaced.

    Args:
        logs_dir: Directory for log files.
        log_level: Logging level (default: INFO).
        console_output: Whether to also log to stderr. Reports go to
            stdout, so console logging never mixes with them.
    """
    logs_dir.mkdir(parents=True, exist_ok=True)

    main_logger = logging.getLogger(MAIN_LOGGER)
    main_logger.setLevel(log_level)
    _reset(main_logger)
    main_logger.addHandler(_rotating_handler(logs_dir / "main.log", MAIN_FORMAT, log_level))

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        main_logger.addHandler(console_handler)

    detection_logger = logging.getLogger(DETECTION_LOGGER)
    detection_logger.setLevel(log_level)
    detection_logger.propagate = False
    _reset(detection_logger)
    detection_logger.addHandler(
        _rotating_handler(logs_dir / "detection.log", DETECTION_FORMAT, log_level)
    )


def log_detection(
    source: str,
    engine_name: str | None,
    confidence: float,
    duration_ms: float,
) -> None:
    """Log the outcome of a classification call.

    Args:
        source: The inspected document (e.g. a file path).
        engine_name: Detected engine, or None when nothing matched.
        confidence: Confidence of the detection.
        duration_ms: Classification duration in milliseconds.
    """
    logger = logging.getLogger(DETECTION_LOGGER)
    if engine_name is None:
        logger.info(f"{source} | NO MATCH | {duration_ms:.1f}ms")
    else:
        logger.info(f"{source} | {engine_name} | {confidence:.2f} | {duration_ms:.1f}ms")
