"""Plugin loader: load_registry, scan_installed, scan_report, find_plugin."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from .models import (
    InstalledPlugin,
    PluginsDirError,
    PluginSpec,
    RegistryError,
    ScanReport,
    derive_name,
)

if TYPE_CHECKING:
    from vum.core.config import Config

    from .git import GitRemote


def load_registry(path: Path) -> list[PluginSpec]:
    """Read declared sources, one URL per line, sorted by plugin name.

    A missing file means nothing is declared. Duplicates and malformed lines
    are kept so every declared line shows up in the results.
    """
    if not path.exists():
        return []
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise RegistryError(path, e.strerror or str(e)) from e
    specs: list[PluginSpec] = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        specs.append(PluginSpec.from_url(line))
    return sorted(specs, key=lambda s: s.name)


def scan_report(config: Config, git: GitRemote) -> ScanReport:
    plugins_dir = config.plugins_dir
    if not plugins_dir.is_dir():
        raise PluginsDirError(plugins_dir, "not a directory")
    try:
        entries = sorted(plugins_dir.iterdir())
    except OSError as e:
        raise PluginsDirError(plugins_dir, e.strerror or str(e)) from e

    report = ScanReport()
    for d in entries:
        if not d.is_dir() or not git.is_tracked(d):
            continue
        url = git.fetch_url(d)
        if not url:
            continue
        name = derive_name(url)
        if not name:
            report.malformed.append(d)
            continue
        report.plugins.append(InstalledPlugin(directory=d, name=name, source_url=url))
    report.plugins.sort(key=lambda p: p.name)
    return report


def scan_installed(config: Config, git: GitRemote) -> list[InstalledPlugin]:
    """Installed plugins under ``config.plugins_dir``, sorted by name."""
    return scan_report(config, git).plugins


def find_plugin(plugins: list[InstalledPlugin], key: str) -> InstalledPlugin | None:
    """Look up by name or directory name (case-insensitive), then by 1-based position.

    A name match wins over a position, so a plugin in a directory named ``2048``
    is still reachable by name.
    """
    key = key.strip()
    lowered = key.lower()
    for p in plugins:
        if p.name.lower() == lowered or p.directory.name.lower() == lowered:
            return p
    if key.isdigit():
        idx = int(key) - 1
        return plugins[idx] if 0 <= idx < len(plugins) else None
    return None
