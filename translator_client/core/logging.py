import logging
from logging import Logger
from typing import Optional, Union

from .config import LOGGER_NAME


def configure_logging(level: Optional[Union[str, int]] = None) -> Logger:
    """تهيئة مسجل موحد لعميل الترجمة."""
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        if level is not None:
            logger.setLevel(level)
        return logger

    logger.setLevel(level or logging.INFO)

    handler = logging.StreamHandler()
    formatter = logging.Formatter("[%(levelname)s] %(asctime)s | %(name)s | %(message)s")
    handler.setFormatter(formatter)

    logger.addHandler(handler)
    logger.propagate = False

    return logger
