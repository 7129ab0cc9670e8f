# Copyright (c) Microsoft. All rights reserved.

import logging

import pytest

from copilotstudio_console._logging import get_logger, setup_logging


def test_get_logger_rejects_foreign_names() -> None:
    with pytest.raises(ValueError, match="copilotstudio_console"):
        get_logger("agent_framework")


def test_setup_logging_adds_one_named_handler() -> None:
    logger = logging.getLogger("copilotstudio_console")
    before = list(logger.handlers)
    try:
        setup_logging(logging.DEBUG)
        setup_logging(logging.INFO)

        named = [handler for handler in logger.handlers if handler.get_name() == "copilotstudio_console"]
        assert len(named) == 1
        assert logger.level == logging.INFO
    finally:
        for handler in logger.handlers[:]:
            if handler not in before:
                logger.removeHandler(handler)
