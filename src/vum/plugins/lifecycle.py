"""Plugin lifecycle: probe, install, update, remove.

Every batch runs in input order and keeps going past per-item failures.
Callbacks receive ``(position, total, result)`` with a 1-based position, in
input order, as soon as each item is settled.
"""

from __future__ import annotations

import re
import shutil
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING, TypeVar

from .models import (
    INSTALL_FAILED,
    INSTALLED,
    MALFORMED,
    REACHABLE,
    SKIPPED,
    UNREACHABLE,
    UP_TO_DATE,
    UPDATE_FAILED,
    UPDATED,
    CheckReport,
    Counters,
    InstalledPlugin,
    InstallResult,
    MalformedSpecError,
    PluginsDirError,
    PluginSpec,
    ReachabilityResult,
    UpdateOutcome,
    UpdateResult,
    require_name,
)

if TYPE_CHECKING:
    from vum.core.config import Config

    from .git import GitRemote

T = TypeVar("T")
Callback = Callable[[int, int, T], None]
StopCheck = Callable[[], bool]

_UP_TO_DATE_RE = re.compile(r"already up[ -]to[ -]date", re.IGNORECASE)


def _stopped(should_stop: StopCheck | None) -> bool:
    return should_stop is not None and should_stop()


# ── Reachability ────────────────────────────────────────────────────


def probe_spec(spec: PluginSpec, git: GitRemote) -> ReachabilityResult:
    try:
        require_name(spec.source_url)
    except MalformedSpecError as e:
        return ReachabilityResult(spec, UNREACHABLE, str(e))
    result = git.probe(spec.source_url)
    if result.ok:
        return ReachabilityResult(spec, REACHABLE)
    return ReachabilityResult(spec, UNREACHABLE, result.output.strip())


def check_all(
    specs: list[PluginSpec],
    git: GitRemote,
    on_result: Callback[ReachabilityResult] | None = None,
    workers: int = 1,
    should_stop: StopCheck | None = None,
) -> CheckReport:
    """Partition *specs* into reachable and unreachable, preserving order.

    With ``workers > 1`` probes run in a thread pool, but results are still
    recorded and reported strictly in input order.
    """
    report = CheckReport()
    total = len(specs)

    def _record(position: int, result: ReachabilityResult) -> None:
        if result.ok:
            report.ok.append(result.spec)
        else:
            report.failed.append(result)
        if on_result:
            on_result(position, total, result)

    if workers <= 1 or total <= 1:
        for i, spec in enumerate(specs, 1):
            if _stopped(should_stop):
                break
            _record(i, probe_spec(spec, git))
        return report

    pool = ThreadPoolExecutor(max_workers=workers)
    try:
        futures = [pool.submit(probe_spec, spec, git) for spec in specs]
        for i, future in enumerate(futures, 1):
            if _stopped(should_stop):
                break
            _record(i, future.result())
    finally:
        # queued probes are dropped on stop, abort or callback error
        pool.shutdown(wait=False, cancel_futures=True)
    return report


# ── Install ─────────────────────────────────────────────────────────


def install_spec(spec: PluginSpec, plugins_dir: Path, git: GitRemote) -> InstallResult:
    try:
        require_name(spec.source_url)
    except MalformedSpecError as e:
        return InstallResult(spec, MALFORMED, output=str(e))
    if not spec.dir_name:
        return InstallResult(spec, MALFORMED, output=str(MalformedSpecError(spec.source_url)))
    target = plugins_dir / spec.dir_name
    if target.exists():
        return InstallResult(spec, SKIPPED, target)
    result = git.clone(spec.source_url, plugins_dir)
    if not result.ok:
        # a killed clone leaves a partial checkout that would be skipped next run
        if target.exists():
            shutil.rmtree(target, ignore_errors=True)
        return InstallResult(spec, INSTALL_FAILED, target, result.output.strip())
    return InstallResult(spec, INSTALLED, target, result.output.strip())


def install_all(
    specs: list[PluginSpec],
    config: Config,
    git: GitRemote,
    on_result: Callback[InstallResult] | None = None,
    should_stop: StopCheck | None = None,
) -> Counters:
    """Clone every spec whose target directory is missing; skip the rest."""
    plugins_dir = config.plugins_dir
    if not plugins_dir.is_dir():
        raise PluginsDirError(plugins_dir, "not a directory")

    counters = Counters()
    total = len(specs)
    for i, spec in enumerate(specs, 1):
        if _stopped(should_stop):
            break
        result = install_spec(spec, plugins_dir, git)
        counters.record(result.outcome)
        if on_result:
            on_result(i, total, result)
    return counters


# ── Update ──────────────────────────────────────────────────────────


def classify_pull(returncode: int, output: str) -> UpdateOutcome:
    """Non-zero status always fails; otherwise git's own wording decides."""
    if returncode != 0:
        return UPDATE_FAILED
    if _UP_TO_DATE_RE.search(output):
        return UP_TO_DATE
    return UPDATED


def update_plugin(plugin: InstalledPlugin, git: GitRemote) -> UpdateResult:
    result = git.pull(plugin.directory)
    outcome = classify_pull(result.returncode, result.output)
    return UpdateResult(plugin, outcome, result.output.strip())


def update_all(
    plugins: list[InstalledPlugin],
    git: GitRemote,
    on_result: Callback[UpdateResult] | None = None,
    should_stop: StopCheck | None = None,
) -> list[UpdateResult]:
    results: list[UpdateResult] = []
    total = len(plugins)
    for i, plugin in enumerate(plugins, 1):
        if _stopped(should_stop):
            break
        result = update_plugin(plugin, git)
        results.append(result)
        if on_result:
            on_result(i, total, result)
    return results


# ── Remove ──────────────────────────────────────────────────────────


def remove_plugin(plugin: InstalledPlugin) -> bool:
    """Delete the plugin's working copy. Returns False if it was already gone."""
    if not plugin.directory.exists():
        return False
    shutil.rmtree(plugin.directory)
    return True
