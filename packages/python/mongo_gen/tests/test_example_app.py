import importlib.util
from pathlib import Path

import pytest

from mongo_gen import MongoConnectionError
from mongo_gen.settings import settings

APP_MAIN = Path(__file__).resolve().parents[4] / "apps" / "python" / "mongo_gen_example" / "main.py"


@pytest.fixture
def example_app():
    spec = importlib.util.spec_from_file_location("mongo_gen_example_main", APP_MAIN)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_example_app_connects_with_shared_settings(example_app, monkeypatch):
    monkeypatch.setattr(settings, "uri", "mongodb://configured.example:27017")
    monkeypatch.setattr(settings, "db_name", "configured_db")
    calls = []

    def _connect(db_name, uri):
        calls.append((db_name, uri))
        raise MongoConnectionError("unreachable")

    monkeypatch.setattr(example_app, "connect", _connect)

    assert example_app.main() == 1
    assert calls == [("configured_db", "mongodb://configured.example:27017")]
