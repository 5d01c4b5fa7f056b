"""mcp-sync: keep MCP server definitions in step between a central config and client apps.

Submodules:
- config: central multi-app config and settings
- paths: Antigravity config location
- validation: server spec shape checks
- antigravity: import/export reconciliation against mcp_config.json
- cli: command-line entrypoint
"""

__all__ = [
    "antigravity",
    "cli",
    "config",
    "jsonio",
    "paths",
    "validation",
]
