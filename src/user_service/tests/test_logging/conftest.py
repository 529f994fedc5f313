import pytest

from user_service.config import get_settings
from user_service.core.logging.builder import setup_logging


@pytest.fixture(autouse=True)
def restore_app_logging():
    """
    Some tests install their own logging config; put the session config back afterwards.
    """
    yield
    setup_logging(get_settings())
