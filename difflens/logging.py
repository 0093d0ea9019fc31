import logging
import sys

LOGGER_NAME = "difflens"
HANDLER_NAME = "difflens-stream"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: int = logging.INFO, stream=None) -> logging.Logger:
    """Attach a formatted stream handler to the package logger.

    Calling it again replaces the handler installed by the previous call.
    Propagation is disabled so host applications that configure the root
    logger do not print every record twice.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for existing in list(logger.handlers):
        if existing.get_name() == HANDLER_NAME:
            logger.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
