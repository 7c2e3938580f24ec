"""Shared test fixtures for the PR description agent."""

import pytest

from configs.config import Config
from configs.inputs import ActionInputs
from utils.diff_models import FileChange

from .fakes import FakeGithubClient, FixedGenerator


@pytest.fixture(autouse=True)
def no_workflow_env(monkeypatch):
    """Keep runner variables of the host from leaking into tests."""
    monkeypatch.setattr(Config, "GITHUB_EVENT_PATH", "")
    monkeypatch.setattr(Config, "GITHUB_REPOSITORY", "")
    monkeypatch.delenv("GITHUB_OUTPUT", raising=False)


@pytest.fixture
def make_inputs():
    def _make(**overrides):
        values = {"github_token": "ghs_test", "gemini_api_key": "k" * 39}
        values.update(overrides)
        return ActionInputs.build(**values)
    return _make


@pytest.fixture
def make_file():
    def _make(filename, size=0, **kwargs):
        patch = "x" * size if size else kwargs.pop("patch", None)
        return FileChange(filename=filename, patch=patch, **kwargs)
    return _make


@pytest.fixture
def github_client():
    return FakeGithubClient()


@pytest.fixture
def generator():
    return FixedGenerator()
