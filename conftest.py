import pytest

from library_store.library import Library
from library_store.ui_helpers import OUTPUT_MODE_ENV


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    # The CLI stores the output mode in the environment; keep tests isolated.
    monkeypatch.setenv(OUTPUT_MODE_ENV, "plain")


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def lib(data_dir):
    # Each test gets its own data directory so no state leaks between tests
    return Library(data_dir=data_dir, max_books=100, max_users=100)
