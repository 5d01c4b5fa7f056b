"""Shape checks for MCP server connection specs.

Only field presence and types are checked; nothing is resolved or executed.
"""

from __future__ import annotations

import copy
from typing import Any

SERVER_TYPES = ("stdio", "http", "sse")


class McpValidationError(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def validate_server_spec(spec: Any) -> None:
    if not isinstance(spec, dict):
        raise McpValidationError("server spec must be a JSON object")

    server_type = spec.get("type", "stdio")
    if server_type not in SERVER_TYPES:
        raise McpValidationError(
            f"unsupported server type {server_type!r} (expected one of {', '.join(SERVER_TYPES)})"
        )

    if server_type == "stdio":
        if not _non_empty_str(spec.get("command")):
            raise McpValidationError("stdio server requires a non-empty 'command'")
    elif not _non_empty_str(spec.get("url")):
        raise McpValidationError(f"{server_type} server requires a non-empty 'url'")


def extract_server_spec(entry: Any) -> dict[str, Any]:
    """Pull the connection spec out of an app entry ({"server": {...}, "enabled": ...})."""
    if not isinstance(entry, dict):
        raise McpValidationError("server entry must be a JSON object")
    server = entry.get("server")
    if server is None:
        raise McpValidationError("server entry is missing the 'server' field")
    if not isinstance(server, dict):
        raise McpValidationError("'server' field must be a JSON object")
    validate_server_spec(server)
    return copy.deepcopy(server)
