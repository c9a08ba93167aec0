import pytest

from modelex import Highlighter, registerBuiltinLanguages
from tests.utils import makeHighlighter

## Fixtures for use in tests


@pytest.fixture
def highlighter():
    """A highlighter with the bundled languages registered."""
    return registerBuiltinLanguages(Highlighter())


@pytest.fixture
def grammarHighlighter():
    """Factory for highlighters with a single ad-hoc grammar named ``test``."""
    return makeHighlighter


## Command-line options


def pytest_addoption(parser):
    # option to skip very slow tests
    parser.addoption("--fast", action="store_true", help="skip very slow tests")


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: mark test as very slow")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--fast"):
        mark = pytest.mark.skip(reason="slow test skipped by --fast")
        for item in items:
            if "slow" in item.keywords:
                item.add_marker(mark)
