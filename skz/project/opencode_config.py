from pathlib import Path
from typing import Any

from skz.constants import OPENCODE_CONFIG_FILENAME, OPENCODE_CONFIG_SCHEMA_URL
from skz.project.json_file import JsonObjectFile


class OpenCodeConfigRepository(JsonObjectFile):
    """Project-level ``opencode.json``."""

    def __init__(self, root: Path) -> None:
        super().__init__(root / OPENCODE_CONFIG_FILENAME)

    def add_mcp_servers(self, servers: dict[str, dict[str, Any]]) -> list[str]:
        """Add servers not yet configured. Existing entries are never replaced."""
        payload = self.load()
        if not payload:
            payload = {"$schema": OPENCODE_CONFIG_SCHEMA_URL, "mcp": {}}
        mcp = payload.get("mcp")
        if not isinstance(mcp, dict):
            mcp = {}

        added: list[str] = []
        for name, server in servers.items():
            if name in mcp:
                continue
            mcp[name] = dict(server)
            added.append(name)

        if added:
            payload["mcp"] = mcp
            self.save(payload)
        return added
