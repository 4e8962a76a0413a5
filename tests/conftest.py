from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest


@pytest.fixture(autouse=True)
def _reset_decodecheck_logger() -> Iterator[None]:
    """Drop handlers the CLI installs so they don't outlive a test's captured stderr."""
    yield
    logger = logging.getLogger("decodecheck")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
