from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import Iterator

LOGGER_NAME = "tool_servers"

DEBUG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s %(filename)s:%(lineno)d %(message)s"
PRODUCTION_FORMAT = "%(asctime)s\t%(levelname)s\t%(name)s\t%(filename)s:%(lineno)d\t%(message)s"


def init_logger(debug: bool, log_path: str, name: str = LOGGER_NAME) -> logging.Logger:
    """
    Build the process logger and return it.

    stdout carries the MCP protocol, so nothing is ever logged there:
    with no ``log_path`` only CRITICAL records reach stderr, otherwise every
    record at the configured level goes to the file.
    """
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    level = logging.DEBUG if debug else logging.INFO
    if log_path:
        handler: logging.Handler = logging.FileHandler(log_path, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
        level = logging.CRITICAL

    handler.setFormatter(logging.Formatter(DEBUG_FORMAT if debug else PRODUCTION_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False

    logger.info("Logger initialized: debug=%s log_path=%r", debug, log_path)
    return logger


def sync(logger: logging.Logger) -> None:
    """Flush and close every handler attached to ``logger``."""
    for handler in list(logger.handlers):
        handler.flush()
        handler.close()
        logger.removeHandler(handler)


@contextmanager
def logging_session(debug: bool, log_path: str, name: str = LOGGER_NAME) -> Iterator[logging.Logger]:
    logger = init_logger(debug, log_path, name=name)
    try:
        yield logger
    finally:
        sync(logger)
