"""Shared fixtures: isolated HOME/env and an in-memory git double."""

from __future__ import annotations

from pathlib import Path

import pytest

from vum.core.config import Config
from vum.plugins.git import GitResult
from vum.plugins.models import clone_dir_name

NOT_FOUND = "fatal: repository 'https://x/missing.git/' not found"


class FakeGit:
    """GitRemote double. Clones create real directories with a ``.git`` marker."""

    def __init__(self, unreachable=(), clone_fail=(), pulls=None):
        self.unreachable = set(unreachable)
        self.clone_fail = set(clone_fail)
        self.pulls: dict[str, GitResult] = dict(pulls or {})
        self.probed: list[str] = []
        self.cloned: list[str] = []
        self.pulled: list[Path] = []

    def probe(self, url: str) -> GitResult:
        self.probed.append(url)
        if url in self.unreachable:
            return GitResult(128, NOT_FOUND)
        return GitResult(0, "abc123\tHEAD\n")

    def clone(self, url: str, dest_dir: Path) -> GitResult:
        self.cloned.append(url)
        if url in self.clone_fail:
            return GitResult(128, f"Cloning into '{clone_dir_name(url)}'...\n{NOT_FOUND}")
        make_working_copy(dest_dir / clone_dir_name(url), url)
        return GitResult(0, f"Cloning into '{clone_dir_name(url)}'...")

    def is_tracked(self, path: Path) -> bool:
        return (path / ".git").exists()

    def fetch_url(self, path: Path) -> str | None:
        remote = path / ".git" / "remote"
        return remote.read_text() if remote.exists() else None

    def pull(self, path: Path) -> GitResult:
        self.pulled.append(path)
        return self.pulls.get(path.name, GitResult(0, "Already up to date."))


def make_working_copy(path: Path, url: str | None) -> Path:
    (path / ".git").mkdir(parents=True)
    if url is not None:
        (path / ".git" / "remote").write_text(url)
    return path


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for var in ("VUM_PLUGINS_DIR", "VUM_REPOS_FILE", "VUM_GIT_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def fake_git():
    return FakeGit()


@pytest.fixture
def config(tmp_path):
    plugins_dir = tmp_path / "bundle"
    plugins_dir.mkdir()
    return Config(
        global_dir=tmp_path / "global",
        registry_file=tmp_path / "repos",
        plugins_dir=plugins_dir,
    )
