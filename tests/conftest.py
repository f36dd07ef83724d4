"""Shared test fixtures for updvcspins."""

from __future__ import annotations

import os
import shutil
import subprocess
import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from updvcspins.config import get_config
from updvcspins.models.pins import ResolvedPin, ResolvedPins
from updvcspins.models.sources import GitSource

TAG_HASH = "1111111111111111111111111111111111111111"
COMMIT_HASH = "2222222222222222222222222222222222222222"


@pytest.fixture(autouse=True)
def _fresh_config():
    """Reload settings per test so env changes are picked up."""
    get_config.cache_clear()
    yield
    get_config.cache_clear()


# ---------------------------------------------------------------------------
# In-memory collaborators
# ---------------------------------------------------------------------------


class FakeEvaluator:
    """VariableEvaluator returning canned array contents."""

    def __init__(self, variables: dict[str, list[str]]) -> None:
        self.variables = variables
        self.calls: list[tuple[Path, str]] = []

    def evaluate(self, path: Path, variable: str) -> list[str]:
        self.calls.append((path, variable))
        return list(self.variables.get(variable, []))


class FakeRepository:
    """TagRepository backed by dicts of refs and peeled commits."""

    def __init__(
        self,
        refs: dict[str, str] | None = None,
        peeled: dict[str, str] | None = None,
    ) -> None:
        self.refs = refs or {}
        self.peeled = peeled or {}

    def resolve_reference(self, ref: str) -> str | None:
        return self.refs.get(ref)

    def peel_to_commit(self, ref: str) -> str | None:
        return self.peeled.get(ref)


@pytest.fixture
def fake_evaluator() -> Callable[..., FakeEvaluator]:
    """Factory fixture: build a FakeEvaluator from keyword arrays."""

    def _factory(vcspins: list[str] | None = None, source: list[str] | None = None) -> FakeEvaluator:
        return FakeEvaluator({"vcspins": vcspins or [], "source": source or []})

    return _factory


@pytest.fixture
def fake_repository() -> Callable[..., FakeRepository]:
    """Factory fixture: build a FakeRepository from ref and peel tables."""

    def _factory(
        refs: dict[str, str] | None = None,
        peeled: dict[str, str] | None = None,
    ) -> FakeRepository:
        return FakeRepository(refs, peeled)

    return _factory


@pytest.fixture
def resolved_pin() -> Callable[..., ResolvedPin]:
    """Factory fixture: a ResolvedPin for a git source with sensible defaults."""

    def _factory(
        url: str = "git+https://example.com/repo.git",
        tag: str = "v1",
        tag_hash: str = TAG_HASH,
        commit_hash: str = COMMIT_HASH,
        **overrides: object,
    ) -> ResolvedPin:
        source = GitSource(url=url, tag=tag, **overrides)
        return ResolvedPin(tag_hash=tag_hash, commit_hash=commit_hash, source=source)

    return _factory


@pytest.fixture
def single_pin(resolved_pin: Callable[..., ResolvedPin]) -> ResolvedPins:
    """Resolved pins with a single entry named ``repo``."""
    return ResolvedPins([("repo", resolved_pin())])


# ---------------------------------------------------------------------------
# Real git repositories
# ---------------------------------------------------------------------------


def _git_env() -> dict[str, str]:
    env = dict(os.environ)
    env.update(
        {
            "GIT_AUTHOR_NAME": "Test",
            "GIT_AUTHOR_EMAIL": "test@example.com",
            "GIT_COMMITTER_NAME": "Test",
            "GIT_COMMITTER_EMAIL": "test@example.com",
            "GIT_CONFIG_NOSYSTEM": "1",
            "HOME": env.get("HOME", "/tmp"),
        }
    )
    return env


def git(cwd: Path, *argv: str) -> str:
    """Run git in *cwd* and return its stripped stdout."""
    completed = subprocess.run(
        ["git", "-c", "commit.gpgsign=false", "-c", "tag.gpgsign=false", *argv],
        cwd=cwd,
        env=_git_env(),
        check=True,
        text=True,
        capture_output=True,
    )
    return completed.stdout.strip()


class GitRepoInfo:
    """Hashes of a test repository created by ``make_git_repo``."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.commit = git(path, "rev-parse", "HEAD")
        self.tree = git(path, "rev-parse", "HEAD^{tree}")

    def annotated_tag(self, name: str, target: str = "HEAD") -> str:
        git(self.path, "tag", "-a", name, "-m", f"release {name}", target)
        return git(self.path, "rev-parse", f"refs/tags/{name}")

    def lightweight_tag(self, name: str, target: str = "HEAD") -> str:
        git(self.path, "tag", name, target)
        return git(self.path, "rev-parse", f"refs/tags/{name}")

    def clone_bare(self, dest: Path) -> Path:
        git(dest.parent, "clone", "-q", "--mirror", str(self.path), str(dest))
        return dest


@pytest.fixture
def make_git_repo() -> Callable[[Path], GitRepoInfo]:
    """Factory fixture: initialize a git repository with one commit at a path."""
    if shutil.which("git") is None:
        pytest.skip("git not installed")

    def _factory(path: Path) -> GitRepoInfo:
        path.mkdir(parents=True, exist_ok=True)
        git(path, "init", "-q")
        (path / "README").write_text("hello\n")
        git(path, "add", "README")
        git(path, "commit", "-q", "-m", "initial")
        return GitRepoInfo(path)

    return _factory


# ---------------------------------------------------------------------------
# Manifests
# ---------------------------------------------------------------------------


@pytest.fixture
def write_pkgbuild(tmp_path: Path) -> Callable[[str], Path]:
    """Factory fixture: write dedented manifest text to ``tmp_path/PKGBUILD``."""

    def _factory(text: str, name: str = "PKGBUILD") -> Path:
        path = tmp_path / name
        path.write_text(textwrap.dedent(text).lstrip("\n"))
        return path

    return _factory
