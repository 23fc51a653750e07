import logging, sys
from typing import Optional

from amlguard.domain.errors import ConfigError

FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    logger = logging.getLogger("amlguard")
    if logger.handlers:
        return logger
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ConfigError(f"unknown log level: {level}")
    fmt = logging.Formatter(FORMAT)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(fmt)
    logger.addHandler(handler)
    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"failed to open log file {log_file}: {e}") from e
        file_handler.setFormatter(fmt)
        logger.addHandler(file_handler)
    logger.setLevel(numeric_level)
    return logger
