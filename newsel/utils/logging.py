"""Logging configuration for newsel."""

import logging
import os
from datetime import datetime
from pathlib import Path

import logfire

from newsel.utils.files import get_logs_path


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
NOISY_LOGGERS = ('urllib3', 'charset_normalizer')


def setup_local_logging(level: str = 'INFO') -> Path:
    """Send newsel's log records to a timestamped file in .newsel/logs/.

    Calling it again swaps the file handler instead of stacking a second one.
    Console output stays with rich in the CLI and the pipeline.

    Args:
        level: Level name ('DEBUG', 'INFO', ...). 'ALL' logs everything. Defaults to 'INFO'.

    Returns:
        Path of the log file.

    """
    logs_dir = get_logs_path()
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / f'newsel_{datetime.now():%Y%m%d_%H%M%S}.log'

    name = level.upper()
    numeric_level = logging.NOTSET if name == 'ALL' else logging.getLevelName(name)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    package_logger = logging.getLogger('newsel')
    package_logger.setLevel(numeric_level)
    for handler in list(package_logger.handlers):
        if getattr(handler, 'newsel_file', False):
            package_logger.removeHandler(handler)
            handler.close()

    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    file_handler.newsel_file = True  # type: ignore[attr-defined]
    package_logger.addHandler(file_handler)

    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return log_file


def setup_logfire(token: str | None = None) -> bool:
    """Configure logfire when a token is available.

    Without a token logfire stays local-only, so spans and events are still
    safe to emit but nothing is sent.

    Args:
        token: Logfire write token. Defaults to the LOGFIRE_TOKEN environment variable.

    Returns:
        True if logfire was configured to send data.

    """
    token = token or os.getenv('LOGFIRE_TOKEN')
    if not token:
        logfire.configure(send_to_logfire=False, console=False)
        return False

    logfire.configure(token=token, service_name='newsel', console=False)
    return True
