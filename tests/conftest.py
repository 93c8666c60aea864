from __future__ import annotations

import pytest

from breakwatch.config import get_default_settings
from breakwatch.logger import logger


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def settings() -> dict:
    config = get_default_settings()
    config['notify'] = False
    config['bell'] = False
    return config


@pytest.fixture
def state_file(tmp_path):
    return tmp_path / "breakwatch.json"
