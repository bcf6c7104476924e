"""Plugins: declared sources, git capabilities, reconciliation lifecycle."""

from .git import GitCli, GitRemote, GitResult
from .lifecycle import (
    check_all,
    classify_pull,
    install_all,
    remove_plugin,
    update_all,
    update_plugin,
)
from .loader import find_plugin, load_registry, scan_installed, scan_report
from .models import (
    CheckReport,
    Counters,
    DirectoryCreateError,
    InstalledPlugin,
    InstallResult,
    MalformedSpecError,
    PluginsDirError,
    PluginSpec,
    ReachabilityResult,
    RegistryError,
    ScanReport,
    UpdateResult,
    VumError,
    clone_dir_name,
    derive_name,
    require_name,
)

__all__ = [
    "CheckReport",
    "Counters",
    "DirectoryCreateError",
    "GitCli",
    "GitRemote",
    "GitResult",
    "InstallResult",
    "InstalledPlugin",
    "MalformedSpecError",
    "PluginSpec",
    "PluginsDirError",
    "ReachabilityResult",
    "RegistryError",
    "ScanReport",
    "UpdateResult",
    "VumError",
    "check_all",
    "classify_pull",
    "clone_dir_name",
    "derive_name",
    "find_plugin",
    "install_all",
    "load_registry",
    "remove_plugin",
    "require_name",
    "scan_installed",
    "scan_report",
    "update_all",
    "update_plugin",
]
