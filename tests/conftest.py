"""
Shared pytest fixtures.
"""
import pytest


@pytest.fixture(autouse=True)
def isolated_actions_env(monkeypatch, tmp_path):
    """Keep the host's GitHub Actions variables out of every test."""
    import os

    for key in list(os.environ):
        if key.startswith("INPUT_") or key.startswith("GITHUB_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("GITHUB_OUTPUT", str(tmp_path / "github_output"))
    yield


@pytest.fixture
def output_file(tmp_path):
    """Path of the GITHUB_OUTPUT file the autouse fixture points at."""
    return tmp_path / "github_output"
