import logging

import pytest


@pytest.fixture(autouse=True)
def _restore_package_logger_level():
    """Keep logger levels set by CLI invocations from leaking between tests."""
    logger = logging.getLogger("ebl_profile")
    level = logger.level
    yield
    logger.setLevel(level)
