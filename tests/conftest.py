import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from roomcrawl import create_app, get_game, reset_game  # noqa: E402
from roomcrawl.items.catalog import default_catalog  # noqa: E402

TEST_SEED = 424242


@pytest.fixture(scope="session")
def test_app():
    app = create_app({"TESTING": True, "ROOMCRAWL_SEED": TEST_SEED})
    return app


@pytest.fixture(autouse=True)
def _push_app_context(test_app):
    ctx = test_app.app_context()
    ctx.push()
    try:
        yield
    finally:
        ctx.pop()


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


@pytest.fixture()
def catalog():
    return default_catalog()


@pytest.fixture()
def game(test_app):
    """Fresh shared GameLogic (first level generated from TEST_SEED)."""
    reset_game()
    g = get_game()
    g.channel.drain()
    yield g
    reset_game()
