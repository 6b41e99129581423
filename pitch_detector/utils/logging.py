"""
Logging utilities for the detectors and experiment scripts.

Detector modules log through ``get_logger(__name__)`` at DEBUG level only;
the experiment scripts attach handlers to the ``pitch_detector`` logger.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER = 'pitch_detector'
LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'


def _reset_handlers(logger: logging.Logger) -> None:
    # Close before detaching so file handles are released
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def setup_logging(
    log_file: Optional[str] = None,
    level: int = logging.INFO,
    format_string: str = None,
    name: str = PACKAGE_LOGGER,
    console_level: int = logging.WARNING
) -> logging.Logger:
    """
    Attach a console handler and, optionally, a file handler to a logger.

    Handlers from an earlier call on the same logger are closed first.

    Args:
        log_file: Path to log file (if None, only console output)
        level: Level of the logger and of the file handler
        format_string: Custom format string
        name: Logger name, the package logger by default
        console_level: Console threshold; scripts print results with rich

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    _reset_handlers(logger)

    formatter = logging.Formatter(format_string or LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """Logger for a module, e.g. ``get_logger(__name__)``."""
    return logging.getLogger(name)


class ExperimentLogger:
    """
    Run logger that writes a timestamped file per detection run.

    Uses the package logger, so detector DEBUG output lands in the same file.
    """

    def __init__(
        self,
        experiment_name: str,
        log_dir: str = 'logs',
        console_level: int = logging.WARNING
    ):
        self.experiment_name = experiment_name
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        self.log_file = self.log_dir / f'{experiment_name}_{timestamp}.log'

        self.logger = setup_logging(
            log_file=str(self.log_file),
            level=logging.DEBUG,
            console_level=console_level
        )

    def info(self, msg: str):
        self.logger.info(msg)

    def warning(self, msg: str):
        self.logger.warning(msg)

    def close(self):
        """Release the log file."""
        _reset_handlers(self.logger)

    def log_config(self, config: dict):
        """Log run configuration."""
        self.logger.info("=" * 60)
        self.logger.info(f"CONFIGURATION: {self.experiment_name}")
        self.logger.info("=" * 60)
        for key, value in config.items():
            self.logger.info(f"  {key}: {value}")
        self.logger.info("=" * 60)

    def log_detection(self, algorithm: str, signal_name: str, frequency: Optional[float],
                      expected: Optional[float] = None):
        """Log one detection outcome."""
        if frequency is None:
            self.logger.info(f"{algorithm} | {signal_name}: no pitch")
        elif expected is None:
            self.logger.info(f"{algorithm} | {signal_name}: {frequency:.3f} Hz")
        else:
            self.logger.info(
                f"{algorithm} | {signal_name}: {frequency:.3f} Hz (expected {expected:.3f} Hz)"
            )
