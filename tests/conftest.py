import os
import sys

import pytest
from loguru import logger

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from config.settings import get_settings

_ENV_KEYS = ("FORMAT_LOG_FILE", "FORMAT_LOG_LEVEL")


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Isolate each test from ambient env config and the settings cache."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def quiet_library():
    """Put the package back to its import-time (disabled) logging state."""
    yield
    logger.disable("formatting")


@pytest.fixture
def table_md():
    return "|Name|Age|\n|--|--:|\n|Alice|30|"
