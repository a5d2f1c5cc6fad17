"""Shared test fixtures."""

import os
from pathlib import Path

import pytest

import prtag.settings as settings_module
from prtag.models import PullRequest
from prtag.settings import PrtagSettings


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep the CI runner's GITHUB_* variables and any local config out of the tests."""
    for name in list(os.environ):
        if name.startswith(("GITHUB_", "PRTAG_")):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(settings_module, "CONFIG_PATH", tmp_path / ".prtag.toml")
    settings_module._load_toml.cache_clear()
    yield
    settings_module._load_toml.cache_clear()


@pytest.fixture
def pr_node() -> dict:
    """A pull_request object as returned by the REST API and webhook payloads."""
    return {
        "number": 7,
        "title": "Add login page",
        "body": "Implements the login form.",
        "draft": False,
        "merged": False,
        "head": {"ref": "feature/login", "sha": "abc123"},
        "base": {"ref": "main", "sha": "def456"},
    }


@pytest.fixture
def open_pr() -> PullRequest:
    return PullRequest(
        number=7,
        title="Add login page",
        body="Implements the login form.",
        draft=False,
        merged=False,
        head_ref="feature/login",
        base_ref="main",
    )


@pytest.fixture
def merged_pr(open_pr: PullRequest) -> PullRequest:
    return open_pr.model_copy(update={"merged": True})


@pytest.fixture
def settings() -> PrtagSettings:
    return PrtagSettings(github_token="ghp_test", github_repository="acme/widgets")  # type: ignore[call-arg]
