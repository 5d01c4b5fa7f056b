"""Keep Antigravity's mcp_config.json in step with the central config.

Export (central -> Antigravity) replaces the file's `mcpServers` wholesale: once
the app is detected, that section belongs to us. Import (Antigravity -> central)
only ever adds entries or flips the antigravity flag on, because the unified
mapping is shared with every other application.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger as log

from .config import McpApps, McpConfig, McpServer, MultiAppConfig
from .jsonio import SyncError, read_json_file, write_json_file
from .paths import AntigravityPaths
from .validation import McpValidationError, extract_server_spec, validate_server_spec

APP_ID = "antigravity"


@dataclass
class SkippedEntry:
    server_id: str
    reason: str


@dataclass
class CollectResult:
    servers: dict[str, Any] = field(default_factory=dict)
    skipped: list[SkippedEntry] = field(default_factory=list)


@dataclass
class ImportResult:
    changed: int = 0
    skipped: list[SkippedEntry] = field(default_factory=list)


class McpServersStore:
    """Read/write the `mcpServers` section of an external MCP JSON file."""

    def __init__(self, path: Path):
        self.path = path

    def read_servers_map(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}

        data = read_json_file(self.path)
        if not isinstance(data, dict):
            return {}
        servers = data.get("mcpServers")
        if not isinstance(servers, dict):
            return {}
        return {str(k): v for k, v in servers.items()}

    def write_servers_map(self, servers: dict[str, Any]) -> None:
        root: dict[str, Any] = {}
        if self.path.exists():
            # Best-effort re-read so unrelated top-level fields survive. A corrupt
            # target must not block persisting new servers, so fall back to an
            # empty document here (and only here).
            try:
                existing = read_json_file(self.path)
            except SyncError as e:
                log.debug("Ignoring unreadable {} before write: {}", self.path, e)
            else:
                if isinstance(existing, dict):
                    root = existing

        root["mcpServers"] = dict(servers)
        write_json_file(self.path, root)


def collect_enabled_servers(app_config: McpConfig) -> CollectResult:
    """Return the servers explicitly marked `enabled: true`, keyed by id."""
    result = CollectResult()
    for server_id, entry in app_config.servers.items():
        enabled = entry.get("enabled") if isinstance(entry, dict) else None
        if enabled is not True:
            continue
        try:
            result.servers[server_id] = extract_server_spec(entry)
        except McpValidationError as e:
            result.skipped.append(SkippedEntry(server_id, e.message))
    return result


def merge_external_servers(config: MultiAppConfig, external: dict[str, Any]) -> ImportResult:
    """Fold external servers into the unified mapping; never removes entries."""
    result = ImportResult()
    if not external:
        return result

    servers = config.unified_servers
    for server_id, spec in external.items():
        try:
            validate_server_spec(spec)
        except McpValidationError as e:
            result.skipped.append(SkippedEntry(server_id, e.message))
            continue

        existing = servers.get(server_id)
        if existing is not None:
            if not existing.apps.is_enabled_for(APP_ID):
                existing.apps.enable(APP_ID)
                result.changed += 1
            continue

        servers[server_id] = McpServer(
            id=server_id,
            name=server_id,
            server=copy.deepcopy(spec),
            apps=McpApps.only(APP_ID),
        )
        result.changed += 1
    return result


def _log_skipped(action: str, skipped: list[SkippedEntry]) -> None:
    for entry in skipped:
        log.warning(
            "Skipping invalid MCP server '{}' during {}: {}", entry.server_id, action, entry.reason
        )


class AntigravitySync:
    def __init__(self, paths: AntigravityPaths | None = None):
        self.paths = paths or AntigravityPaths()
        self.store = McpServersStore(self.paths.mcp_config_path())

    def _should_sync(self) -> bool:
        if self.paths.is_installed():
            return True
        log.debug("Antigravity directory {} not found; skipping sync", self.paths.config_dir())
        return False

    def read_servers(self) -> dict[str, Any]:
        return self.store.read_servers_map()

    def sync_enabled(self, config: MultiAppConfig) -> bool:
        """Overwrite Antigravity's mcpServers with the enabled central entries."""
        if not self._should_sync():
            return False
        collected = collect_enabled_servers(config.mcp.antigravity)
        _log_skipped("export", collected.skipped)
        self.store.write_servers_map(collected.servers)
        log.info("Synced {} MCP server(s) to {}", len(collected.servers), self.store.path)
        return True

    def import_servers(self, config: MultiAppConfig) -> int:
        """Merge Antigravity's servers into `config`; returns how many entries changed."""
        result = merge_external_servers(config, self.store.read_servers_map())
        _log_skipped("import", result.skipped)
        if result.changed:
            log.info("Imported {} MCP server(s) from {}", result.changed, self.store.path)
        return result.changed

    def sync_single(self, server_id: str, spec: dict[str, Any]) -> bool:
        if not self._should_sync():
            return False
        current = self.store.read_servers_map()
        current[server_id] = copy.deepcopy(spec)
        self.store.write_servers_map(current)
        log.info("Synced MCP server '{}' to {}", server_id, self.store.path)
        return True

    def remove(self, server_id: str) -> bool:
        if not self._should_sync():
            return False
        current = self.store.read_servers_map()
        if server_id in current:
            del current[server_id]
            log.info("Removed MCP server '{}' from {}", server_id, self.store.path)
        else:
            log.debug("MCP server '{}' not present in {}", server_id, self.store.path)
        self.store.write_servers_map(current)
        return True
