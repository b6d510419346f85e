from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_pcmwav_logger():
    yield
    logger = logging.getLogger("pcmwav")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True

