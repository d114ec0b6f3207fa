"""Common test fixtures."""

import os
from pathlib import Path
from typing import Callable

import pytest

from hoard.config import HoardConfig, RepositoryLayout
from hoard.services.file_service import FileService
from hoard.services.name_index import NameIndex
from hoard.services.object_store import ObjectStore
from hoard.services.repository_service import Repository


@pytest.fixture
def config_home(tmp_path, monkeypatch) -> Path:
    # Patch HOME environment variable for the duration of the test
    monkeypatch.setenv("HOME", str(tmp_path))
    # On Windows, also set USERPROFILE
    if os.name == "nt":
        monkeypatch.setenv("USERPROFILE", str(tmp_path))
    for key in list(os.environ):
        if key.startswith("HOARD_"):
            monkeypatch.delenv(key)
    return tmp_path


@pytest.fixture
def app_config(config_home) -> HoardConfig:
    """Create test app configuration."""
    return HoardConfig(log_level="DEBUG")


@pytest.fixture
def repo_root(tmp_path) -> Path:
    root = tmp_path / "hoard"
    root.mkdir()
    return root.resolve()


@pytest.fixture
def repository(repo_root, app_config) -> Repository:
    return Repository.init(repo_root, app_config)


@pytest.fixture
def layout(repository) -> RepositoryLayout:
    return repository.layout


@pytest.fixture
def file_service() -> FileService:
    return FileService()


@pytest.fixture
def object_store(layout, file_service) -> ObjectStore:
    return ObjectStore(layout.by_hash_dir, file_service)


@pytest.fixture
def name_index(layout) -> NameIndex:
    return NameIndex.load(layout.by_name_dir)


@pytest.fixture
def write_file() -> Callable[..., Path]:
    """Create a file with the given content, making parent directories."""

    def _write(path: Path, content: str = "test content") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    return _write
