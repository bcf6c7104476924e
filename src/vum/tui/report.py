"""Rich rendering of probe/install/update progress and summaries.

Lines look like::

    Fugitive(https://github.com/tpope/vim-fugitive.git) ........ [   OK   ]
    (2/5) Downloading Surround from https://... ................ [ FAILED ]
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from rich.console import Console
from rich.text import Text

from ..core.utils import dot_leader, short_path, truncate_lines
from ..plugins.models import (
    INSTALL_FAILED,
    INSTALLED,
    MALFORMED,
    SKIPPED,
    UP_TO_DATE,
    UPDATED,
)

if TYPE_CHECKING:
    from ..plugins.models import (
        CheckReport,
        Counters,
        InstalledPlugin,
        InstallResult,
        ReachabilityResult,
        UpdateResult,
    )

console = Console()

# label, style
_OK = ("OK", "bold green")
_FAILED = ("FAILED", "bold red")
_SKIPPED = ("SKIPPED", "bold yellow")
_CURRENT = ("CURRENT", "bold cyan")

_INSTALL_STATUS = {
    INSTALLED: _OK,
    INSTALL_FAILED: _FAILED,
    SKIPPED: _SKIPPED,
    MALFORMED: _FAILED,
}
_UPDATE_STATUS = {
    UPDATED: _OK,
    UP_TO_DATE: _CURRENT,
}


def column_width(pairs: Iterable[tuple[str, str]]) -> int:
    """Longest ``name + url`` among *pairs*, plus room for the dot leader."""
    return max((len(a) + len(b) for a, b in pairs), default=0) + 4


def _status(label: str, style: str) -> Text:
    return Text.assemble(" [", (f"{label:^8}", style), "]")


def _counter(position: int, total: int) -> str:
    return f"({position}/{total}) "


def probe_line(result: ReachabilityResult, width: int) -> Text:
    spec = result.spec
    label, style = _OK if result.ok else _FAILED
    name_style = "bold green" if result.ok else "bold red"
    used = len(spec.name) + len(spec.source_url)
    return Text.assemble(
        (spec.name, name_style),
        f"({spec.source_url}) ",
        dot_leader(width, used),
        _status(label, style),
    )


def install_line(position: int, total: int, result: InstallResult, width: int) -> Text:
    spec = result.spec
    label, style = _INSTALL_STATUS.get(result.outcome, _FAILED)
    name_style = "bold red" if style == "bold red" else "bold green"
    counter = _counter(position, total)
    used = len(spec.name) + len(spec.source_url) + len(str(position))
    return Text.assemble(
        counter,
        "Downloading ",
        (spec.name or "?", name_style),
        f" from {spec.source_url} ",
        dot_leader(width, used),
        _status(label, style),
    )


def update_line(position: int, total: int, result: UpdateResult, width: int) -> Text:
    plugin = result.plugin
    label, style = _UPDATE_STATUS.get(result.outcome, _FAILED)
    name_style = "bold red" if style == "bold red" else "bold green"
    used = len(plugin.name) + len(plugin.source_url) + len(str(position))
    return Text.assemble(
        _counter(position, total),
        "Updating ",
        (plugin.name, name_style),
        f" from {plugin.source_url} ",
        dot_leader(width, used),
        _status(label, style),
    )


def check_summary(report: CheckReport, declared: int) -> list[Text]:
    lines: list[Text] = []
    if report.ok:
        lines.append(
            Text.assemble(
                (f"{len(report.ok)}/{declared}", "bold green"),
                " repositories seem to be good enough for downloading",
            )
        )
    if report.failed:
        lines.append(
            Text.assemble(
                (f"{len(report.failed)}/{declared}", "bold red"),
                " repositories were found to have some troubles"
                " and vum will not use those repositories for downloading",
            )
        )
    return lines


def install_summary(counters: Counters) -> Text:
    text = Text.assemble(
        (str(counters.installed_ok), "bold green"),
        " installed, ",
        (str(counters.install_failed), "bold red" if counters.install_failed else ""),
        " failed, ",
        (str(counters.skipped_existing), "bold yellow" if counters.skipped_existing else ""),
        " already present",
    )
    if counters.malformed:
        text.append(f", {counters.malformed} malformed", style="bold red")
    return text


def update_summary(results: list[UpdateResult]) -> Text:
    updated = sum(1 for r in results if r.outcome == UPDATED)
    current = sum(1 for r in results if r.outcome == UP_TO_DATE)
    failed = len(results) - updated - current
    return Text.assemble(
        (str(updated), "bold green"),
        " updated, ",
        (str(current), "bold cyan"),
        " up to date, ",
        (str(failed), "bold red" if failed else ""),
        " failed",
    )


def installed_line(position: int, plugin: InstalledPlugin) -> Text:
    return Text.assemble(
        f"  {position:>3}. ",
        (plugin.name, "bold"),
        "  ",
        (plugin.source_url, "dim"),
        "  ",
        short_path(plugin.directory),
    )


class ProgressPrinter:
    """Callbacks for the lifecycle batches that print one line per item."""

    def __init__(self, out: Console | None = None, verbose: bool = False):
        self.console = out or console
        self.verbose = verbose
        self.width = 0

    def begin(self, pairs: Iterable[tuple[str, str]]) -> None:
        self.width = column_width(pairs)

    def _detail(self, failed: bool, output: str) -> None:
        if failed and self.verbose and output:
            self.console.print(Text(truncate_lines(output), style="dim"))

    def probe(self, position: int, total: int, result: ReachabilityResult) -> None:
        self.console.print(probe_line(result, self.width))
        self._detail(not result.ok, result.error)

    def install(self, position: int, total: int, result: InstallResult) -> None:
        self.console.print(install_line(position, total, result, self.width))
        if result.outcome == MALFORMED:
            self.console.print(Text(f"  {result.output}", style="dim"))
        else:
            self._detail(result.outcome == INSTALL_FAILED, result.output)

    def update(self, position: int, total: int, result: UpdateResult) -> None:
        self.console.print(update_line(position, total, result, self.width))
        self._detail(result.outcome not in (UPDATED, UP_TO_DATE), result.output)
