"""Shared fixtures."""

import pytest

from idfcli.chain import SharedOptions


@pytest.fixture
def idf_env(monkeypatch, tmp_path):
    """A fake ESP-IDF installation exported into the environment."""
    idf = tmp_path / "esp-idf"
    idf.mkdir()
    monkeypatch.setenv("IDF_PATH", str(idf))
    for var in ("IDF_PYTHON_ENV_PATH", "ESPPORT", "ESPBAUD"):
        monkeypatch.delenv(var, raising=False)
    return idf


@pytest.fixture
def project(tmp_path):
    path = tmp_path / "hello"
    path.mkdir()
    return path


@pytest.fixture
def opts(project):
    return SharedOptions(project_dir=project)
