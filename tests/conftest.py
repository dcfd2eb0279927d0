import pytest

from bones_reactive import reset_runtime


@pytest.fixture(autouse=True)
def fresh_runtime():
    """Give every test an empty graph on the main thread."""
    yield reset_runtime()
    reset_runtime()
