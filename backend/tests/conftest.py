import pytest

from app.services.interactions.config import reset_config


@pytest.fixture(autouse=True)
def default_scoring_config():
    """Every test starts from the default scoring configuration."""
    reset_config()
    yield
    reset_config()
