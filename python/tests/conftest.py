"""Pytest configuration and fixtures for xsspolicy tests.

Test isolation strategy:
- Every test gets its own PolicyStore built from a profile, so mutations never
  leak between tests
- Settings cache is cleared around each test
- log_sink swaps the structlog configuration for a capturing one and restores it
- restore_logging puts back structlog and root logger state after configure_logging()
"""

import logging
from collections.abc import Generator

import pytest
import structlog

from xsspolicy.config import clear_settings_cache
from xsspolicy.policy import PolicyStore
from xsspolicy.profiles import BASIC_PROFILE, HTML5_PROFILE


@pytest.fixture
def store() -> PolicyStore:
    """Fresh store with the html5 profile."""
    return PolicyStore.from_profile(HTML5_PROFILE)


@pytest.fixture
def basic_store() -> PolicyStore:
    """Fresh store with the basic profile."""
    return PolicyStore.from_profile(BASIC_PROFILE)


@pytest.fixture(autouse=True)
def _clear_settings() -> Generator[None, None, None]:
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def log_sink() -> Generator[list[dict], None, None]:
    """Configure structlog to capture events into a list.

    Returns a list that will contain all emitted log event dicts.
    After the test, structlog is reset to normal.
    """
    events: list[dict] = []
    original_config = structlog.get_config()

    def capture_processor(logger, method_name, event_dict):
        event_dict = event_dict.copy()
        event_dict["level"] = method_name
        events.append(event_dict)
        raise structlog.DropEvent

    structlog.configure(
        processors=[capture_processor],
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    yield events

    # Restore original configuration
    structlog.configure(**original_config)


@pytest.fixture
def restore_logging() -> Generator[None, None, None]:
    """Restore structlog and root logger state after configure_logging()."""
    original_config = structlog.get_config()
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level

    yield

    structlog.configure(**original_config)
    root_logger.handlers.clear()
    root_logger.handlers.extend(handlers)
    root_logger.setLevel(level)
