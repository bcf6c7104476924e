"""CLI entry point: probe, install, list, update and remove git-hosted vim plugins."""

from __future__ import annotations

import signal
import sys
from contextlib import contextmanager
from pathlib import Path

import click
from rich.console import Console
from rich.text import Text

from .core.config import Config, ensure_plugins_dir, load_config, save_setting
from .core.utils import short_path
from .plugins import (
    GitCli,
    InstalledPlugin,
    VumError,
    check_all,
    find_plugin,
    install_all,
    load_registry,
    remove_plugin,
    scan_report,
    update_all,
)
from .plugins.models import UPDATE_FAILED
from .tui import ProgressPrinter, ask, confirm
from .tui.report import (
    check_summary,
    install_summary,
    installed_line,
    update_summary,
)

console = Console()


# ── Helpers ─────────────────────────────────────────────────────────


def _fail(e: Exception) -> None:
    console.print(f"error: {e}", style="bold")
    sys.exit(1)


def _git(config: Config) -> GitCli:
    return GitCli(timeout=config.git_timeout)


class _StopFlag:
    """Set by Ctrl-C; batches stop before the next item."""

    def __init__(self):
        self.stopped = False

    def __call__(self) -> bool:
        return self.stopped


@contextmanager
def _interruptible():
    flag = _StopFlag()

    def _on_sigint(signum, frame):
        if flag.stopped:
            raise KeyboardInterrupt
        flag.stopped = True
        console.print("\nstopping after the current item (Ctrl-C again to abort)", style="dim")

    try:
        old_handler = signal.getsignal(signal.SIGINT)
        signal.signal(signal.SIGINT, _on_sigint)
    except ValueError:
        # not in the main thread; run without graceful stop
        old_handler = None
    try:
        yield flag
    finally:
        if old_handler is not None:
            signal.signal(signal.SIGINT, old_handler)
    if flag.stopped:
        console.print("interrupted", style="dim")


def _load_specs(config: Config):
    try:
        specs = load_registry(config.registry_file)
    except VumError as e:
        _fail(e)
    if not specs:
        console.print(f"no plugins declared in {short_path(config.registry_file)}", style="dim")
        console.print("add one repository URL per line to declare a plugin", style="dim")
    return specs


def _scan(config: Config) -> list[InstalledPlugin]:
    try:
        report = scan_report(config, _git(config))
    except VumError as e:
        _fail(e)
    for d in report.malformed:
        console.print(
            f"  [yellow]warning: cannot derive a plugin name for {short_path(d)}[/yellow]"
        )
    return report.plugins


def _select(plugins: list[InstalledPlugin], keys: tuple[str, ...]) -> list[InstalledPlugin]:
    selected: list[InstalledPlugin] = []
    for key in keys:
        p = find_plugin(plugins, key)
        if p is None:
            console.print(f"plugin [bold]{key}[/bold] not found", style="dim")
        elif p not in selected:
            selected.append(p)
    return selected


# ── Commands ────────────────────────────────────────────────────────


@click.group()
@click.option(
    "--plugins-dir",
    "-d",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Plugin directory (default ~/.vim/bundle)",
)
@click.option(
    "--repos-file",
    "-r",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Declared repositories, one URL per line (default ~/.vum_repos)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show git output for failed items")
@click.pass_context
def cli(ctx: click.Context, plugins_dir: Path | None, repos_file: Path | None, verbose: bool):
    """vum: vim plugin manager for git-hosted plugins."""
    ctx.obj = load_config(plugins_dir=plugins_dir, registry_file=repos_file, verbose=verbose)


@cli.command()
@click.option("--workers", "-j", type=int, default=None, help="Parallel probes")
@click.pass_obj
def check(config: Config, workers: int | None):
    """Probe every declared repository."""
    specs = _load_specs(config)
    if not specs:
        return
    printer = ProgressPrinter(console, config.verbose)
    printer.begin((s.name, s.source_url) for s in specs)
    with _interruptible() as stop:
        report = check_all(
            specs,
            _git(config),
            on_result=printer.probe,
            workers=workers or config.probe_workers,
            should_stop=stop,
        )
    console.print()
    for line in check_summary(report, len(specs)):
        console.print(line)
    if report.failed:
        sys.exit(1)


@cli.command()
@click.option("--no-check", is_flag=True, help="Clone without probing first")
@click.option("--yes", "-y", is_flag=True, help="Do not ask before downloading")
@click.option("--workers", "-j", type=int, default=None, help="Parallel probes")
@click.pass_obj
def install(config: Config, no_check: bool, yes: bool, workers: int | None):
    """Clone declared plugins that are not installed yet."""
    specs = _load_specs(config)
    if not specs:
        return
    try:
        ensure_plugins_dir(config)
    except VumError as e:
        _fail(e)

    git = _git(config)
    printer = ProgressPrinter(console, config.verbose)
    targets = specs
    with _interruptible() as stop:
        if not no_check:
            console.print("vum is now checking for repository existence")
            printer.begin((s.name, s.source_url) for s in specs)
            report = check_all(
                specs,
                git,
                on_result=printer.probe,
                workers=workers or config.probe_workers,
                should_stop=stop,
            )
            console.print()
            for line in check_summary(report, len(specs)):
                console.print(line)
            if stop() or not report.ok:
                return
            if not yes and not confirm():
                console.print("aborted", style="dim")
                return
            targets = report.ok

        console.print("Plugins download starts")
        printer.begin((s.name, s.source_url) for s in targets)
        try:
            counters = install_all(
                targets, config, git, on_result=printer.install, should_stop=stop
            )
        except VumError as e:
            _fail(e)

    console.print()
    console.print(install_summary(counters))
    if counters.total and counters.installed_ok + counters.skipped_existing == 0:
        sys.exit(1)


@cli.command(name="list")
@click.pass_obj
def list_cmd(config: Config):
    """List git-tracked plugins in the plugin directory."""
    plugins = _scan(config)
    if not plugins:
        console.print(f"no plugins installed in {short_path(config.plugins_dir)}", style="dim")
        console.print("use `vum install` to clone the declared ones", style="dim")
        return
    for i, p in enumerate(plugins, 1):
        console.print(installed_line(i, p))


@cli.command()
@click.argument("plugins", nargs=-1)
@click.option("--all", "update_every", is_flag=True, help="Update every installed plugin")
@click.pass_obj
def update(config: Config, plugins: tuple[str, ...], update_every: bool):
    """Pull updates for installed plugins (by name, directory or list number)."""
    installed = _scan(config)
    if not installed:
        console.print(f"no plugins installed in {short_path(config.plugins_dir)}", style="dim")
        return

    if update_every:
        selected = installed
    else:
        keys = plugins
        if not keys:
            for i, p in enumerate(installed, 1):
                console.print(installed_line(i, p))
            raw = ask("Plugin number(s) to update (comma-separated, 'a' for all): ")
            if raw.lower() in ("a", "all"):
                keys = tuple(str(i) for i in range(1, len(installed) + 1))
            else:
                keys = tuple(k for k in raw.replace(",", " ").split() if k)
        selected = _select(installed, keys)
    if not selected:
        console.print("nothing to update", style="dim")
        return

    printer = ProgressPrinter(console, config.verbose)
    printer.begin((p.name, p.source_url) for p in selected)
    with _interruptible() as stop:
        results = update_all(selected, _git(config), on_result=printer.update, should_stop=stop)
    console.print()
    console.print(update_summary(results))
    if results and all(r.outcome == UPDATE_FAILED for r in results):
        sys.exit(1)


@cli.command()
@click.argument("plugin")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_obj
def remove(config: Config, plugin: str, yes: bool):
    """Delete an installed plugin's working copy."""
    target = find_plugin(_scan(config), plugin)
    if target is None:
        console.print(f"plugin [bold]{plugin}[/bold] not found", style="dim")
        sys.exit(1)
    if not yes and not confirm(f"Remove {target.name} ({short_path(target.directory)}) [y/n] ? "):
        console.print("aborted", style="dim")
        return
    try:
        removed = remove_plugin(target)
    except OSError as e:
        _fail(e)
    if removed:
        console.print(f"removed [bold]{target.name}[/bold]")


@cli.command(name="config")
@click.option(
    "--set-plugins-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Persist a new plugin directory",
)
@click.option("--create", is_flag=True, help="Create the plugin directory if missing")
@click.pass_obj
def config_cmd(config: Config, set_plugins_dir: Path | None, create: bool):
    """Show or change settings."""
    if set_plugins_dir is not None:
        path = save_setting(config, "pluginsDir", set_plugins_dir.expanduser().resolve())
        console.print(f"saved plugin directory to {short_path(path)}")
    if create:
        try:
            ensure_plugins_dir(config)
        except VumError as e:
            _fail(e)
        console.print(f"created {short_path(config.plugins_dir)}")

    exists = "" if config.plugins_dir.is_dir() else " [dim](missing)[/dim]"
    console.print(f"  [bold]plugins dir[/bold]  {short_path(config.plugins_dir)}{exists}")
    console.print(f"  [bold]repos file[/bold]   {short_path(config.registry_file)}")
    console.print(f"  [bold]settings[/bold]     {short_path(config.settings_path)}")
    console.print(Text(f"  git timeout  {config.git_timeout}s", style="dim"))


def main():
    cli()


if __name__ == "__main__":
    main()
