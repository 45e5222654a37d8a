from pathlib import Path
from typing import Any

from skz.constants import PACKAGE_JSON_FILENAME
from skz.project.json_file import JsonObjectFile

BUN_TYPES_PACKAGE = "@types/bun"


class PackageJsonRepository(JsonObjectFile):
    def __init__(self, root: Path) -> None:
        super().__init__(root / PACKAGE_JSON_FILENAME)

    def add_dev_dependencies(self, dependencies: dict[str, str]) -> list[str]:
        """Add missing devDependencies; return the added ``name@version`` specs."""
        if not dependencies:
            return []
        payload = self.load()
        dev = payload.get("devDependencies")
        if not isinstance(dev, dict):
            dev = {}

        added: list[str] = []
        for name, version in dependencies.items():
            if name in dev:
                continue
            dev[name] = version
            added.append(f"{name}@{version}")

        if added:
            payload["devDependencies"] = dev
            self.save(payload)
        return added

    def ensure_module_project(self, project_name: str) -> bool:
        """Make sure package.json is an ES module with Bun types. Returns True if written."""
        payload: dict[str, Any] = self.load()
        changed = not self.exists()
        if not payload:
            payload = {"name": project_name, "private": True}

        if payload.get("type") != "module":
            payload["type"] = "module"
            changed = True

        dev = payload.get("devDependencies")
        if not isinstance(dev, dict):
            dev = {}
        if BUN_TYPES_PACKAGE not in dev:
            dev[BUN_TYPES_PACKAGE] = "latest"
            payload["devDependencies"] = dev
            changed = True

        if changed:
            self.save(payload)
        return changed
