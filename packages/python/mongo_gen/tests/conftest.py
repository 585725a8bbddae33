import os
import sys
import uuid
from pathlib import Path
from unittest.mock import MagicMock

import pytest

PACKAGE_ROOT = Path(__file__).resolve().parents[1]
if str(PACKAGE_ROOT) not in sys.path:
    sys.path.insert(0, str(PACKAGE_ROOT))

from mongo_gen import MongoConnectionError, MongoGenError, close_handler, connect  # noqa: E402

MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")


@pytest.fixture
def collection():
    return MagicMock(name="collection")


@pytest.fixture
def db(collection):
    """A Database stand-in whose every collection is ``collection``."""
    fake = MagicMock(name="db")
    fake.name = "fake_db"
    fake.__getitem__.return_value = collection
    return fake


@pytest.fixture(autouse=True)
def _forget_cached_handler():
    yield
    try:
        close_handler()
    except MongoGenError:
        pass


@pytest.fixture
def live_handler():
    """Handler on a throwaway database; skips when MongoDB is not reachable."""
    db_name = f"mongo_gen_test_{uuid.uuid4().hex[:8]}"
    try:
        handler = connect(db_name, MONGO_URI, timeout=2)
    except MongoConnectionError:
        pytest.skip(f"MongoDB not reachable on {MONGO_URI}")
    try:
        yield handler
    finally:
        handler.client.drop_database(db_name)
        handler.close()
