import pytest
from sqlbinder.cache import clear_caches


@pytest.fixture(autouse=True)
def clear_layout_caches():
    """Clear cached layouts before and after each test to ensure test isolation."""
    clear_caches()
    yield
    clear_caches()


pytest_plugins = [
    'tests.fixtures.mocks',
    'tests.fixtures.values',
    'tests.fixtures.sqlite',
]
