"""Tests for config: defaults, settings.json, env overrides, plugin directory creation."""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from vum.core.config import Config, _apply_settings, ensure_plugins_dir, load_config, save_setting
from vum.plugins.models import DirectoryCreateError


class TestConfigDefaults:
    def test_default_plugins_dir(self):
        c = Config()
        assert c.plugins_dir == Path.home() / ".vim" / "bundle"

    def test_default_registry_file(self):
        assert Config().registry_file == Path.home() / ".vum_repos"

    def test_default_timeout(self):
        assert Config().git_timeout == 120

    def test_settings_path(self, tmp_path):
        assert Config(global_dir=tmp_path).settings_path == tmp_path / "settings.json"


class TestApplySettings:
    def test_missing_file_is_noop(self, tmp_path):
        c = Config(global_dir=tmp_path)
        before = c.plugins_dir
        _apply_settings(c, tmp_path / "settings.json")
        assert c.plugins_dir == before

    def test_reads_keys(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(
            json.dumps(
                {
                    "pluginsDir": str(tmp_path / "pack"),
                    "reposFile": str(tmp_path / "repos"),
                    "gitTimeout": 10,
                    "probeWorkers": 4,
                }
            )
        )
        c = Config()
        _apply_settings(c, path)
        assert c.plugins_dir == tmp_path / "pack"
        assert c.registry_file == tmp_path / "repos"
        assert c.git_timeout == 10
        assert c.probe_workers == 4

    def test_invalid_json_ignored(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("not json")
        c = Config()
        _apply_settings(c, path)
        assert c.git_timeout == 120

    def test_expands_user(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"pluginsDir": "~/plugins"}))
        c = Config()
        _apply_settings(c, path)
        assert c.plugins_dir == Path.home() / "plugins"


class TestLoadConfig:
    def test_settings_file(self, tmp_path):
        (tmp_path / "settings.json").write_text(json.dumps({"pluginsDir": str(tmp_path / "p")}))
        config = load_config(global_dir=tmp_path)
        assert config.plugins_dir == tmp_path / "p"

    def test_env_beats_settings(self, tmp_path):
        (tmp_path / "settings.json").write_text(json.dumps({"pluginsDir": "/from/settings"}))
        with patch.dict(os.environ, {"VUM_PLUGINS_DIR": "/from/env"}, clear=False):
            config = load_config(global_dir=tmp_path)
        assert config.plugins_dir == Path("/from/env")

    def test_cli_beats_env(self, tmp_path):
        with patch.dict(os.environ, {"VUM_PLUGINS_DIR": "/from/env"}, clear=False):
            config = load_config(plugins_dir="/from/cli", global_dir=tmp_path)
        assert config.plugins_dir == Path("/from/cli")

    def test_repos_file_env(self, tmp_path):
        with patch.dict(os.environ, {"VUM_REPOS_FILE": "/tmp/repos"}, clear=False):
            config = load_config(global_dir=tmp_path)
        assert config.registry_file == Path("/tmp/repos")

    def test_timeout_env(self, tmp_path):
        with patch.dict(os.environ, {"VUM_GIT_TIMEOUT": "15"}, clear=False):
            assert load_config(global_dir=tmp_path).git_timeout == 15

    def test_bad_timeout_env_ignored(self, tmp_path):
        with patch.dict(os.environ, {"VUM_GIT_TIMEOUT": "soon"}, clear=False):
            assert load_config(global_dir=tmp_path).git_timeout == 120

    def test_verbose(self, tmp_path):
        assert load_config(verbose=True, global_dir=tmp_path).verbose is True


class TestSaveSetting:
    def test_persists_and_applies(self, tmp_path):
        c = Config(global_dir=tmp_path / "g")
        path = save_setting(c, "pluginsDir", tmp_path / "pack")
        assert json.loads(path.read_text()) == {"pluginsDir": str(tmp_path / "pack")}
        assert c.plugins_dir == tmp_path / "pack"

    def test_keeps_other_keys(self, tmp_path):
        c = Config(global_dir=tmp_path)
        (tmp_path / "settings.json").write_text(json.dumps({"gitTimeout": 5}))
        save_setting(c, "pluginsDir", "/x")
        data = json.loads((tmp_path / "settings.json").read_text())
        assert data == {"gitTimeout": 5, "pluginsDir": "/x"}

    def test_unknown_key(self, tmp_path):
        with pytest.raises(KeyError):
            save_setting(Config(global_dir=tmp_path), "color", "red")


class TestEnsurePluginsDir:
    def test_creates_parents(self, tmp_path):
        c = Config(plugins_dir=tmp_path / "a" / "b" / "bundle")
        assert ensure_plugins_dir(c).is_dir()

    def test_existing_ok(self, tmp_path):
        c = Config(plugins_dir=tmp_path)
        assert ensure_plugins_dir(c) == tmp_path

    def test_failure_carries_path(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("")
        c = Config(plugins_dir=blocker / "bundle")
        with pytest.raises(DirectoryCreateError) as exc:
            ensure_plugins_dir(c)
        assert exc.value.path == blocker / "bundle"
        assert str(blocker / "bundle") in str(exc.value)
