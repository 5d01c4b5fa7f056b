"""
Configuration management for mcp-sync

JSON-based central config shared by several MCP client applications, plus the
small settings file that controls where those applications live on disk.
"""

import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger as log

from .jsonio import SyncError, read_json_file, write_json_file

APP_IDS: tuple[str, ...] = ("claude", "codex", "gemini", "opencode", "antigravity")


class ConfigError(Exception):
    """Exception raised for configuration-related errors"""

    def __init__(self, message: str, config_path: Path | None = None):
        self.message = message
        self.config_path = config_path
        super().__init__(self.message)


def get_config_dir() -> Path:
    """Directory holding config.json and settings.json.

    MCP_SYNC_CONFIG_DIR wins when set; otherwise ~/.mcp-sync.
    """
    env_dir = os.environ.get("MCP_SYNC_CONFIG_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    return Path.home() / ".mcp-sync"


def get_config_json_path() -> Path:
    return get_config_dir() / "config.json"


def get_settings_json_path() -> Path:
    return get_config_dir() / "settings.json"


def _load_object(path: Path) -> dict[str, Any]:
    try:
        data = read_json_file(path)
    except SyncError as e:
        raise ConfigError(e.message, path) from e
    if not isinstance(data, dict):
        raise ConfigError(f"Expected top-level JSON object at {path}", path)
    return data


@dataclass
class AppSettings:
    """Process-wide settings"""

    antigravity_config_dir: Path | None = None
    log_level: str = "INFO"

    @classmethod
    def load(cls, settings_path: Path | None = None) -> "AppSettings":
        if settings_path is None:
            settings_path = get_settings_json_path()
        if not settings_path.exists():
            log.debug(f"Settings file not found at {settings_path}, using defaults")
            return cls()

        data = _load_object(settings_path)
        override = data.get("antigravity_config_dir")
        return cls(
            antigravity_config_dir=Path(override).expanduser() if override else None,
            log_level=str(data.get("log_level", "INFO")).upper(),
        )

    def save(self, settings_path: Path | None = None) -> None:
        if settings_path is None:
            settings_path = get_settings_json_path()
        data: dict[str, Any] = {"log_level": self.log_level}
        if self.antigravity_config_dir is not None:
            data["antigravity_config_dir"] = str(self.antigravity_config_dir)
        try:
            write_json_file(settings_path, data)
        except SyncError as e:
            raise ConfigError(e.message, settings_path) from e


@dataclass
class McpApps:
    """Which applications a unified server is enabled for"""

    claude: bool = False
    codex: bool = False
    gemini: bool = False
    opencode: bool = False
    antigravity: bool = False

    @classmethod
    def only(cls, app: str) -> "McpApps":
        if app not in APP_IDS:
            raise ValueError(f"Unknown application: {app}")
        return cls(**{app: True})

    @classmethod
    def from_dict(cls, data: Any) -> "McpApps":
        if not isinstance(data, dict):
            raise ValueError("'apps' must be a JSON object")
        return cls(**{app: bool(data.get(app, False)) for app in APP_IDS})

    def is_enabled_for(self, app: str) -> bool:
        return bool(getattr(self, app))

    def enable(self, app: str) -> None:
        if app not in APP_IDS:
            raise ValueError(f"Unknown application: {app}")
        setattr(self, app, True)


@dataclass
class McpServer:
    """Unified MCP server entry"""

    id: str
    name: str
    server: dict[str, Any]
    apps: McpApps = field(default_factory=McpApps)
    description: str | None = None
    homepage: str | None = None
    docs: str | None = None
    tags: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, server_id: str, data: Any) -> "McpServer":
        """Build an entry from its JSON form; raises ValueError on a bad shape."""
        if not isinstance(data, dict):
            raise ValueError(f"server '{server_id}' must be a JSON object")
        server = data.get("server", {})
        if not isinstance(server, dict):
            raise ValueError(f"server '{server_id}': 'server' must be a JSON object")
        apps = data.get("apps", {})
        if not isinstance(apps, dict):
            raise ValueError(f"server '{server_id}': 'apps' must be a JSON object")
        tags = data.get("tags", [])
        if tags is None:
            tags = []
        if not isinstance(tags, list):
            raise ValueError(f"server '{server_id}': 'tags' must be a list")
        return cls(
            id=str(data.get("id") or server_id),
            name=str(data.get("name") or server_id),
            server=dict(server),
            apps=McpApps.from_dict(apps),
            description=data.get("description"),
            homepage=data.get("homepage"),
            docs=data.get("docs"),
            tags=[str(t) for t in tags],
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        # Optional metadata is omitted rather than written as null
        for key in ("description", "homepage", "docs"):
            if data[key] is None:
                del data[key]
        return data


@dataclass
class McpConfig:
    """Per-application server entries, keyed by id.

    Entries stay raw JSON objects ({"server": {...}, "enabled": bool, ...}) because
    their shape is owned by the editor that writes them.
    """

    servers: dict[str, Any] = field(default_factory=dict)


@dataclass
class McpRoot:
    claude: McpConfig = field(default_factory=McpConfig)
    codex: McpConfig = field(default_factory=McpConfig)
    gemini: McpConfig = field(default_factory=McpConfig)
    opencode: McpConfig = field(default_factory=McpConfig)
    antigravity: McpConfig = field(default_factory=McpConfig)
    servers: dict[str, McpServer] | None = None

    def app(self, app: str) -> McpConfig:
        if app not in APP_IDS:
            raise ValueError(f"Unknown application: {app}")
        return getattr(self, app)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "McpRoot":
        """Build the mcp section from JSON; raises ValueError on a bad shape."""
        apps: dict[str, McpConfig] = {}
        for app in APP_IDS:
            node = data.get(app)
            if node is None:
                node = {}
            if not isinstance(node, dict):
                raise ValueError(f"'mcp.{app}' must be a JSON object")
            servers = node.get("servers", {})
            if servers is None:
                servers = {}
            if not isinstance(servers, dict):
                raise ValueError(f"'mcp.{app}.servers' must be a JSON object")
            apps[app] = McpConfig(servers=dict(servers))

        unified: dict[str, McpServer] | None = None
        unified_raw = data.get("servers")
        if unified_raw is not None:
            if not isinstance(unified_raw, dict):
                raise ValueError("'mcp.servers' must be a JSON object")
            unified = {
                str(sid): McpServer.from_dict(str(sid), entry) for sid, entry in unified_raw.items()
            }
        return cls(servers=unified, **apps)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {app: {"servers": self.app(app).servers} for app in APP_IDS}
        if self.servers is not None:
            data["servers"] = {sid: s.to_dict() for sid, s in self.servers.items()}
        return data


@dataclass
class MultiAppConfig:
    """Central configuration root"""

    mcp: McpRoot = field(default_factory=McpRoot)
    # Top-level fields owned by other parts of the application, kept verbatim
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def load(cls, config_path: Path | None = None) -> "MultiAppConfig":
        """Load configuration from JSON file"""
        if config_path is None:
            config_path = get_config_json_path()

        if not config_path.exists():
            log.debug(f"Config file not found at {config_path}, starting from empty config")
            return cls()

        data = _load_object(config_path)
        mcp_data = data.get("mcp")
        if mcp_data is None:
            mcp_data = {}
        if not isinstance(mcp_data, dict):
            raise ConfigError(f"'mcp' must be a JSON object in {config_path}", config_path)
        try:
            mcp = McpRoot.from_dict(mcp_data)
        except ValueError as e:
            raise ConfigError(f"Invalid config at {config_path}: {e}", config_path) from e

        extra = {k: v for k, v in data.items() if k != "mcp"}
        return cls(mcp=mcp, extra=extra)

    def save(self, config_path: Path | None = None) -> None:
        """Save configuration to JSON file"""
        if config_path is None:
            config_path = get_config_json_path()

        data: dict[str, Any] = dict(self.extra)
        data["mcp"] = self.mcp.to_dict()
        try:
            write_json_file(config_path, data)
        except SyncError as e:
            raise ConfigError(e.message, config_path) from e

        log.info(f"Configuration saved to {config_path}")

    @property
    def unified_servers(self) -> dict[str, McpServer]:
        """The unified mapping, created on first access"""
        if self.mcp.servers is None:
            self.mcp.servers = {}
        return self.mcp.servers
