"""Git capabilities used by the reconciliation engine.

The engine talks to git only through :class:`GitRemote`; :class:`GitCli` is the
default implementation backed by the ``git`` executable.
"""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

# Exit codes used when git never produced one
TIMEOUT_STATUS = 124
NOT_FOUND_STATUS = 127


@dataclass
class GitResult:
    """Exit status plus combined stdout/stderr of one git invocation."""

    returncode: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class GitRemote(Protocol):
    def probe(self, url: str) -> GitResult: ...
    def clone(self, url: str, dest_dir: Path) -> GitResult: ...
    def is_tracked(self, path: Path) -> bool: ...
    def fetch_url(self, path: Path) -> str | None: ...
    def pull(self, path: Path) -> GitResult: ...


def parse_fetch_url(remote_output: str) -> str | None:
    """First ``(fetch)`` URL in ``git remote -v`` output."""
    for line in remote_output.splitlines():
        parts = line.split()
        if len(parts) >= 3 and parts[2] == "(fetch)":
            return parts[1]
    return None


class GitCli:
    """Runs ``git`` as a subprocess, one blocking call at a time."""

    def __init__(self, timeout: int = 120, git: str = "git"):
        self.timeout = timeout
        self.git = git

    def _run(self, args: list[str], cwd: Path | None = None) -> GitResult:
        # never block on a credential prompt; keep messages in English for classify_pull
        env = {**os.environ, "GIT_TERMINAL_PROMPT": "0", "LC_ALL": "C", "LANGUAGE": "C"}
        try:
            # own session: a terminal Ctrl-C stops vum between items, not the running git
            result = subprocess.run(
                [self.git, *args],
                cwd=str(cwd) if cwd else None,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                env=env,
                start_new_session=True,
            )
        except subprocess.TimeoutExpired:
            return GitResult(TIMEOUT_STATUS, f"git {args[0]} timed out after {self.timeout}s")
        except FileNotFoundError:
            return GitResult(NOT_FOUND_STATUS, f"{self.git}: command not found")
        return GitResult(result.returncode, (result.stdout or "") + (result.stderr or ""))

    def probe(self, url: str) -> GitResult:
        return self._run(["ls-remote", url])

    def clone(self, url: str, dest_dir: Path) -> GitResult:
        return self._run(["clone", url], cwd=dest_dir)

    def is_tracked(self, path: Path) -> bool:
        return (path / ".git").exists()

    def fetch_url(self, path: Path) -> str | None:
        result = self._run(["remote", "-v"], cwd=path)
        if not result.ok:
            return None
        return parse_fetch_url(result.output)

    def pull(self, path: Path) -> GitResult:
        return self._run(["pull"], cwd=path)
