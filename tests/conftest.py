"""Shared test fixtures for pdfmanager."""

import json

import pytest

from pdfmanager.core.config import get_paths, install_defaults
from pdfmanager.core.reporter import RecordingReporter
from pdfmanager.core.store import Store


@pytest.fixture
def library_root(tmp_path, monkeypatch):
    """Create a library with bundled defaults and point config resolution at it."""
    paths = get_paths(tmp_path)
    install_defaults(paths)

    from pdfmanager.core import config

    # Clear the lru_cache first
    config.get_library_root.cache_clear()
    monkeypatch.setattr(config, "get_library_root", lambda: tmp_path)
    monkeypatch.delenv("PDFMANAGER_HOME", raising=False)

    return tmp_path


@pytest.fixture
def paths(library_root):
    return get_paths(library_root)


@pytest.fixture
def reporter():
    return RecordingReporter()


@pytest.fixture
def store(paths, reporter):
    return Store(paths, reporter=reporter)


@pytest.fixture
def write_json_file():
    """Factory fixture writing raw JSON data to a path."""
    def _write(path, data):
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def read_json_file():
    def _read(path):
        return json.loads(path.read_text(encoding="utf-8"))

    return _read
