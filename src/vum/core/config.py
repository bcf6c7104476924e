"""Configuration: env, settings.json, paths."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from vum.plugins.models import DirectoryCreateError

# Keys accepted in settings.json, mapped to Config attributes.
SETTINGS_KEYS = {
    "pluginsDir": "plugins_dir",
    "reposFile": "registry_file",
    "gitTimeout": "git_timeout",
    "probeWorkers": "probe_workers",
}


@dataclass
class Config:
    global_dir: Path = field(default_factory=lambda: Path.home() / ".vum")
    registry_file: Path = field(default_factory=lambda: Path.home() / ".vum_repos")
    plugins_dir: Path = field(default_factory=lambda: Path.home() / ".vim" / "bundle")
    git_timeout: int = 120
    probe_workers: int = 1
    verbose: bool = False

    @property
    def settings_path(self) -> Path:
        return self.global_dir / "settings.json"


def _read_settings(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def _apply_settings(config: Config, path: Path) -> None:
    """Apply a single settings.json file to config."""
    data = _read_settings(path)
    if "pluginsDir" in data:
        config.plugins_dir = Path(data["pluginsDir"]).expanduser()
    if "reposFile" in data:
        config.registry_file = Path(data["reposFile"]).expanduser()
    if isinstance(data.get("gitTimeout"), int):
        config.git_timeout = data["gitTimeout"]
    if isinstance(data.get("probeWorkers"), int):
        config.probe_workers = max(1, data["probeWorkers"])


def save_setting(config: Config, key: str, value) -> Path:
    """Persist one setting to the user settings file and apply it to *config*."""
    if key not in SETTINGS_KEYS:
        raise KeyError(key)
    path = config.settings_path
    data = _read_settings(path)
    data[key] = str(value) if isinstance(value, Path) else value
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n")
    _apply_settings(config, path)
    return path


def ensure_plugins_dir(config: Config) -> Path:
    """Create the plugin directory (and parents) if needed."""
    path = config.plugins_dir
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryCreateError(path, e.strerror or str(e)) from e
    return path


def load_config(
    plugins_dir: str | Path | None = None,
    registry_file: str | Path | None = None,
    verbose: bool = False,
    global_dir: Path | None = None,
) -> Config:
    """Load config with priority: CLI args > env > .env > settings.json > defaults."""
    load_dotenv()

    config = Config() if global_dir is None else Config(global_dir=global_dir)
    config.verbose = verbose

    _apply_settings(config, config.settings_path)

    if env_dir := os.getenv("VUM_PLUGINS_DIR"):
        config.plugins_dir = Path(env_dir).expanduser()
    if env_repos := os.getenv("VUM_REPOS_FILE"):
        config.registry_file = Path(env_repos).expanduser()
    if env_timeout := os.getenv("VUM_GIT_TIMEOUT"):
        if env_timeout.isdigit():
            config.git_timeout = int(env_timeout)

    if plugins_dir:
        config.plugins_dir = Path(plugins_dir).expanduser()
    if registry_file:
        config.registry_file = Path(registry_file).expanduser()

    return config
