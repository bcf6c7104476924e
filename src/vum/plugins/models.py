"""Plugin data models: PluginSpec, InstalledPlugin, result records, Counters, errors."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

# Probe classification
REACHABLE = "reachable"
UNREACHABLE = "unreachable"
Reachability = Literal["reachable", "unreachable"]

# Per-item install outcomes
INSTALLED = "installed"
INSTALL_FAILED = "failed"
SKIPPED = "skipped"
MALFORMED = "malformed"
InstallOutcome = Literal["installed", "failed", "skipped", "malformed"]

# Per-item update outcomes
UP_TO_DATE = "up_to_date"
UPDATED = "updated"
UPDATE_FAILED = "failed"
UpdateOutcome = Literal["up_to_date", "updated", "failed"]


# ── Errors ──────────────────────────────────────────────────────────


class VumError(Exception):
    """Base class for errors raised by vum."""


class MalformedSpecError(VumError):
    """A source URL does not yield a usable plugin name."""

    def __init__(self, url: str):
        super().__init__(f"cannot derive a plugin name from {url!r}")
        self.url = url


class PluginsDirError(VumError):
    """The plugin directory itself cannot be read."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"cannot read plugin directory {path}: {reason}")
        self.path = path


class RegistryError(VumError):
    """The declared-sources file exists but cannot be read."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"cannot read repository list {path}: {reason}")
        self.path = path


class DirectoryCreateError(VumError):
    """Creating the plugin directory failed."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"cannot create directory {path}: {reason}")
        self.path = path


# ── Naming ──────────────────────────────────────────────────────────


def derive_name(url: str) -> str:
    """Canonical plugin name: last path segment, cut at the first dot, capitalized.

    ``https://host/user/Foo.Bar.git`` -> ``Foo``. Returns ``""`` when nothing is
    left; use :func:`require_name` where an empty name is an error.
    """
    segment = url.strip().rsplit("/", 1)[-1]
    segment = segment.split(".", 1)[0]
    return segment.capitalize()


def require_name(url: str) -> str:
    name = derive_name(url)
    if not name:
        raise MalformedSpecError(url)
    return name


def clone_dir_name(url: str) -> str:
    """Directory name ``git clone <url>`` creates (case kept, only ``.git`` dropped)."""
    path = url.strip().rstrip("/")
    if path.endswith("/.git"):
        path = path[: -len("/.git")]
    # scp-like sources (git@host:repo.git) may have no slash at all
    segment = re.split(r"[/:]", path)[-1]
    if segment.endswith(".git"):
        segment = segment[: -len(".git")]
    return segment


# ── Records ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class PluginSpec:
    """A declared plugin source. ``name`` is always derived from ``source_url``."""

    name: str
    source_url: str

    @classmethod
    def from_url(cls, url: str) -> PluginSpec:
        url = url.strip()
        return cls(name=derive_name(url), source_url=url)

    @property
    def is_malformed(self) -> bool:
        return not self.name

    @property
    def dir_name(self) -> str:
        return clone_dir_name(self.source_url)


@dataclass(frozen=True)
class InstalledPlugin:
    """A git-tracked subdirectory of the plugin directory."""

    directory: Path
    name: str
    source_url: str


@dataclass
class ReachabilityResult:
    spec: PluginSpec
    status: Reachability
    error: str = ""  # probe output when unreachable

    @property
    def ok(self) -> bool:
        return self.status == REACHABLE


@dataclass
class CheckReport:
    """Probe results split into reachable/unreachable, both in input order."""

    ok: list[PluginSpec] = field(default_factory=list)
    failed: list[ReachabilityResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.ok) + len(self.failed)


@dataclass
class InstallResult:
    spec: PluginSpec
    outcome: InstallOutcome
    target: Path | None = None
    output: str = ""


@dataclass
class Counters:
    """Running tallies for one install run."""

    installed_ok: int = 0
    install_failed: int = 0
    skipped_existing: int = 0
    malformed: int = 0

    def record(self, outcome: InstallOutcome) -> None:
        if outcome == INSTALLED:
            self.installed_ok += 1
        elif outcome == INSTALL_FAILED:
            self.install_failed += 1
        elif outcome == SKIPPED:
            self.skipped_existing += 1
        elif outcome == MALFORMED:
            self.malformed += 1

    @property
    def total(self) -> int:
        return self.installed_ok + self.install_failed + self.skipped_existing + self.malformed


@dataclass
class UpdateResult:
    plugin: InstalledPlugin
    outcome: UpdateOutcome
    output: str = ""


@dataclass
class ScanReport:
    """Scanner output. ``malformed`` holds tracked dirs whose remote gave no name."""

    plugins: list[InstalledPlugin] = field(default_factory=list)
    malformed: list[Path] = field(default_factory=list)
