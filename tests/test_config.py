"""
Tests for configuration management
"""

import json
from pathlib import Path
from typing import Any

import pytest

from mcp_sync.config import (
    AppSettings,
    ConfigError,
    McpApps,
    McpServer,
    MultiAppConfig,
    get_config_dir,
    get_config_json_path,
)
from tests.test_template import TestTemplate


class TestConfiguration(TestTemplate):
    """Test configuration system using test template"""

    def test_config_dir_from_env(self):
        assert get_config_dir() == self.config_dir
        assert get_config_json_path() == self.config_dir / "config.json"

    def test_config_dir_default(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.delenv("MCP_SYNC_CONFIG_DIR")
        monkeypatch.setenv("HOME", str(tmp_path))
        assert get_config_dir() == tmp_path / ".mcp-sync"

    def test_missing_config_is_empty(self):
        config = MultiAppConfig.load()
        assert config.mcp.servers is None
        assert config.mcp.antigravity.servers == {}
        assert not get_config_json_path().exists()

    def test_config_save_and_load(self):
        """Test saving and loading configuration"""
        config = MultiAppConfig(extra={"providers": {"a": 1}})
        config.mcp.antigravity.servers = {"fs": {"enabled": True, "server": {"command": "npx"}}}
        config.unified_servers["web"] = McpServer(
            id="web",
            name="Web",
            server={"type": "http", "url": "https://x/mcp"},
            apps=McpApps(gemini=True, antigravity=True),
            homepage="https://x",
            tags=["net"],
        )
        config.save()

        loaded = MultiAppConfig.load()
        assert loaded.extra == {"providers": {"a": 1}}
        assert loaded.mcp.antigravity.servers == config.mcp.antigravity.servers
        assert loaded.unified_servers["web"] == config.unified_servers["web"]

        raw = json.loads(get_config_json_path().read_text())
        assert "description" not in raw["mcp"]["servers"]["web"]
        assert raw["mcp"]["servers"]["web"]["homepage"] == "https://x"

    def test_malformed_config(self):
        self.config_dir.mkdir()
        get_config_json_path().write_text("{oops")
        with pytest.raises(ConfigError) as exc_info:
            MultiAppConfig.load()
        assert exc_info.value.config_path == get_config_json_path()

    @pytest.mark.parametrize("mcp", [[], 0, "", False, "servers"])
    def test_mcp_section_must_be_object(self, mcp: Any):
        self.config_dir.mkdir()
        get_config_json_path().write_text(json.dumps({"mcp": mcp}))
        with pytest.raises(ConfigError):
            MultiAppConfig.load()

    @pytest.mark.parametrize(
        "mcp",
        [
            {"antigravity": []},
            {"antigravity": {"servers": ["fs"]}},
            {"servers": ["fs"]},
            {"servers": {"fs": "npx"}},
            {"servers": {"fs": {"apps": ["antigravity"]}}},
            {"servers": {"fs": {"server": "npx"}}},
            {"servers": {"fs": {"tags": 5}}},
        ],
    )
    def test_badly_shaped_entries_raise_config_error(self, mcp: dict[str, Any]):
        self.config_dir.mkdir()
        get_config_json_path().write_text(json.dumps({"mcp": mcp}))
        with pytest.raises(ConfigError) as exc_info:
            MultiAppConfig.load()
        assert exc_info.value.config_path == get_config_json_path()

    def test_null_app_nodes_are_empty(self):
        self.config_dir.mkdir()
        get_config_json_path().write_text(
            json.dumps({"mcp": {"claude": None, "antigravity": {"servers": None}, "servers": None}})
        )
        config = MultiAppConfig.load()
        assert config.mcp.claude.servers == {}
        assert config.mcp.antigravity.servers == {}
        assert config.mcp.servers is None

    def test_unified_entry_defaults(self):
        server = McpServer.from_dict("fs", {"server": {"command": "npx"}})
        assert server.id == "fs"
        assert server.name == "fs"
        assert server.apps == McpApps()
        assert server.tags == []

    def test_null_name_falls_back_to_id(self):
        server = McpServer.from_dict("fs", {"name": None, "server": {"command": "npx"}})
        assert server.name == "fs"
        assert server.id == "fs"

    def test_apps_only(self):
        assert McpApps.only("antigravity") == McpApps(antigravity=True)
        assert McpApps.only("codex").is_enabled_for("codex")
        apps = McpApps(claude=True)
        apps.enable("antigravity")
        assert apps == McpApps(claude=True, antigravity=True)
        with pytest.raises(ValueError):
            McpApps.only("notepad")


class TestAppSettings(TestTemplate):
    def test_defaults_when_missing(self):
        settings = AppSettings.load()
        assert settings.antigravity_config_dir is None
        assert settings.log_level == "INFO"

    def test_save_and_load(self, tmp_path: Path):
        AppSettings(antigravity_config_dir=tmp_path / "ag", log_level="DEBUG").save()
        settings = AppSettings.load()
        assert settings.antigravity_config_dir == tmp_path / "ag"
        assert settings.log_level == "DEBUG"

    def test_expands_user(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.setenv("HOME", str(tmp_path))
        self.config_dir.mkdir()
        (self.config_dir / "settings.json").write_text(
            json.dumps({"antigravity_config_dir": "~/ag", "log_level": "warning"})
        )
        settings = AppSettings.load()
        assert settings.antigravity_config_dir == tmp_path / "ag"
        assert settings.log_level == "WARNING"
