from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import AppSettings

ANTIGRAVITY_MCP_FILENAME = "mcp_config.json"


@dataclass(frozen=True)
class AntigravityPaths:
    """Locate the Antigravity config directory and its MCP file.

    - default: ~/.gemini/antigravity/mcp_config.json
    - override_dir replaces the directory wholesale (the filename is kept)
    """

    override_dir: Path | None = None
    home: Path | None = None

    @classmethod
    def from_settings(cls, settings: AppSettings) -> AntigravityPaths:
        return cls(override_dir=settings.antigravity_config_dir)

    def config_dir(self) -> Path:
        if self.override_dir is not None:
            return self.override_dir
        home = self.home if self.home is not None else Path.home()
        return home / ".gemini" / "antigravity"

    def mcp_config_path(self) -> Path:
        return self.config_dir() / ANTIGRAVITY_MCP_FILENAME

    def is_installed(self) -> bool:
        # A missing directory is the only "not installed" signal we trust
        return self.config_dir().exists()
