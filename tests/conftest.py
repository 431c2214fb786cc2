"""Shared fixtures for envwire tests."""

from pathlib import Path

import pytest

from envwire.logger import reset_loggers

TESTS_DIR = Path(__file__).parent
ENV_FILES_DIR = TESTS_DIR / "env_files"


@pytest.fixture(autouse=True)
def fresh_loggers():
    """Give every test its own loggers bound to the current stdout."""
    reset_loggers()
    yield
    reset_loggers()


@pytest.fixture
def env_files_dir() -> Path:
    return ENV_FILES_DIR


@pytest.fixture
def in_tests_dir(monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from tests/, where the default .env lives."""
    monkeypatch.chdir(TESTS_DIR)
    return TESTS_DIR


@pytest.fixture
def write_env(tmp_path: Path):
    """Write a .env file below tmp_path and return its path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
