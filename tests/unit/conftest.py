import logging

import pytest


@pytest.fixture(autouse=True)
def _configure_logging_for_tests() -> None:
    """Configure logging for all unit tests with the test environment tag."""
    from querybot.core.common.logging_utils import (
        configure_logging_with_environment_tagging,
    )

    configure_logging_with_environment_tagging(level=logging.DEBUG)
