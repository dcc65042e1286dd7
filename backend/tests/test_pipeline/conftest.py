import pytest

from services.pipeline.registry import clear as clear_registry


@pytest.fixture(autouse=True)
def _reset_registry():
    """Clear strategy registry before and after each test."""
    clear_registry()
    yield
    clear_registry()
