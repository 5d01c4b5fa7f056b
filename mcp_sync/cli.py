"""
CLI entrypoint for mcp-sync.

Provides the `mcp-sync` executable when installed via pip/uvx/pipx.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Any

from loguru import logger as log

from .antigravity import AntigravitySync
from .config import AppSettings, ConfigError, MultiAppConfig, get_config_json_path
from .jsonio import SyncError
from .paths import AntigravityPaths
from .validation import McpValidationError, validate_server_spec


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="mcp-sync",
        description="Sync MCP servers between the central config and Antigravity",
    )
    p.add_argument(
        "--config-dir",
        type=Path,
        help="Directory containing config.json and settings.json (default: MCP_SYNC_CONFIG_DIR or ~/.mcp-sync)",
    )
    p.add_argument(
        "--antigravity-dir",
        type=Path,
        help="Override the Antigravity config directory (default: settings.json or ~/.gemini/antigravity)",
    )
    p.add_argument("--log-level", help="Log level (default: settings.json or INFO)")

    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("export", help="Write enabled Antigravity servers to mcp_config.json")

    p_import = sub.add_parser("import", help="Import servers from mcp_config.json into config.json")
    p_import.add_argument(
        "--dry-run", action="store_true", help="Show changes without writing to config.json"
    )

    p_add = sub.add_parser("add", help="Add or replace a single server in mcp_config.json")
    p_add.add_argument("id")
    target = p_add.add_mutually_exclusive_group(required=True)
    target.add_argument("--command", dest="server_command")
    target.add_argument("--url")
    p_add.add_argument("--type", choices=["http", "sse"], help="Remote server type (default: http)")
    p_add.add_argument("--arg", action="append", default=[], dest="server_args")
    p_add.add_argument("--env", action="append", default=[], help="KEY=VALUE")

    p_remove = sub.add_parser("remove", help="Remove a server from mcp_config.json")
    p_remove.add_argument("id")

    sub.add_parser("list", help="List servers in mcp_config.json")
    return p


def _configure_logging(level: str) -> None:
    log.remove()
    try:
        log.add(sys.stderr, level=level.upper())
    except ValueError as e:
        log.add(sys.stderr, level="INFO")
        raise ConfigError(f"Invalid log level {level!r}: {e}") from e


def _parse_env(pairs: list[str]) -> dict[str, str]:
    env: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise McpValidationError(f"invalid --env value {pair!r}, expected KEY=VALUE")
        env[key] = value
    return env


def _build_spec(args: Any) -> dict[str, Any]:
    if args.url is not None:
        return {"type": args.type or "http", "url": args.url}
    spec: dict[str, Any] = {"command": args.server_command, "args": list(args.server_args)}
    env = _parse_env(args.env)
    if env:
        spec["env"] = env
    return spec


def _run(args: Any, sync: AntigravitySync) -> int:
    if args.command == "export":
        config = MultiAppConfig.load()
        if not sync.sync_enabled(config):
            log.info("Antigravity not detected at {}; nothing written", sync.paths.config_dir())
        return 0

    if args.command == "import":
        config = MultiAppConfig.load()
        changed = sync.import_servers(config)
        if changed == 0:
            log.info("No changes to import")
            return 0
        if args.dry_run:
            log.info("Dry-run enabled; not writing {} change(s)", changed)
            return 0
        config.save()
        return 0

    if args.command == "add":
        spec = _build_spec(args)
        validate_server_spec(spec)
        if not sync.sync_single(args.id, spec):
            log.warning("Antigravity not detected at {}; nothing written", sync.paths.config_dir())
        return 0

    if args.command == "remove":
        if not sync.remove(args.id):
            log.warning("Antigravity not detected at {}; nothing written", sync.paths.config_dir())
        return 0

    if args.command == "list":
        for server_id in sorted(sync.read_servers()):
            print(server_id)
        return 0

    log.error("Unsupported command: {}", args.command)
    return 2


def run_cli(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.command == "add":
        if args.server_command is not None and args.type is not None:
            parser.error("--type only applies to --url servers")
        if args.url is not None and (args.server_args or args.env):
            parser.error("--arg and --env only apply to --command servers")

    # Resolve config dir and expose via env for the rest of the app
    if args.config_dir is not None:
        os.environ["MCP_SYNC_CONFIG_DIR"] = str(Path(args.config_dir).expanduser().resolve())

    try:
        settings = AppSettings.load()
        _configure_logging(args.log_level or settings.log_level)
        log.debug("Using config file: {}", get_config_json_path())

        paths = AntigravityPaths.from_settings(settings)
        if args.antigravity_dir is not None:
            paths = AntigravityPaths(override_dir=Path(args.antigravity_dir).expanduser())
        return _run(args, AntigravitySync(paths))
    except (ConfigError, SyncError, McpValidationError) as e:
        log.error(str(e))
        return 1


def main() -> int:
    return run_cli()


if __name__ == "__main__":
    raise SystemExit(main())
