# Copyright (c) Microsoft. All rights reserved.

import logging

__all__ = ["get_logger", "setup_logging"]

_ROOT_LOGGER_NAME = "copilotstudio_console"
_LOG_FORMAT = "[%(asctime)s - %(name)s:%(lineno)d - %(levelname)s] %(message)s"


def get_logger(name: str = _ROOT_LOGGER_NAME) -> logging.Logger:
    """Get a logger under the copilotstudio_console namespace.

    Args:
        name: The name of the logger. Must start with ``copilotstudio_console``.

    Returns:
        The logger.

    Raises:
        ValueError: If the name is outside the package namespace.
    """
    if not name.startswith(_ROOT_LOGGER_NAME):
        raise ValueError(f"Logger name must start with '{_ROOT_LOGGER_NAME}'.")
    return logging.getLogger(name)


def setup_logging(level: int | str = logging.WARNING) -> None:
    """Attach a stream handler to the package logger.

    Console output for the operator is written with ``print``; this only controls
    the diagnostic log stream. Calling it more than once replaces the level but
    does not add a second handler.
    """
    logger = logging.getLogger(_ROOT_LOGGER_NAME)
    logger.setLevel(level)
    if not any(handler.get_name() == _ROOT_LOGGER_NAME for handler in logger.handlers):
        handler = logging.StreamHandler()
        handler.set_name(_ROOT_LOGGER_NAME)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(handler)
