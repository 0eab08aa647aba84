import logging

import pytest

from httptop import Printer

from .helpers import RecordingConsole


@pytest.fixture
def console():
    return RecordingConsole()


@pytest.fixture
def printer(console):
    return Printer(console)


@pytest.fixture
def restore_logger():
    """Undo setup_logging so later tests can still capture httptop logs."""
    logger = logging.getLogger("httptop")
    level, propagate, handlers = logger.level, logger.propagate, list(logger.handlers)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(level)
    logger.propagate = propagate
    for handler in handlers:
        logger.addHandler(handler)
