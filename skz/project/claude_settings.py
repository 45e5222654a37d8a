from pathlib import Path

from skz.constants import CLAUDE_DIRNAME, CLAUDE_SETTINGS_FILENAME, CLAUDE_SKILLS_DIRNAME
from skz.project.json_file import JsonObjectFile


def skill_permission_pattern(skill_name: str) -> str:
    return f"Bash(bun {CLAUDE_DIRNAME}/{CLAUDE_SKILLS_DIRNAME}/{skill_name}/*.ts:*)"


class ClaudeSettingsRepository(JsonObjectFile):
    """``.claude/settings.json`` permission lists."""

    def __init__(self, root: Path) -> None:
        super().__init__(root / CLAUDE_DIRNAME / CLAUDE_SETTINGS_FILENAME)

    def add_skill_permissions(self, skill_names: list[str]) -> None:
        """Read-only skills (``-read``) are allowed, everything else asks first."""
        payload = self.load()
        permissions = payload.get("permissions")
        if not isinstance(permissions, dict):
            permissions = {}

        allow = list(permissions.get("allow") or [])
        ask = list(permissions.get("ask") or [])

        for name in skill_names:
            pattern = skill_permission_pattern(name)
            if name.endswith("-read"):
                if pattern not in allow:
                    allow.append(pattern)
                ask = [item for item in ask if item != pattern]
            else:
                if pattern not in ask:
                    ask.append(pattern)
                if name.endswith("-write"):
                    allow = [item for item in allow if item != pattern]

        permissions["allow"] = allow
        permissions["ask"] = ask
        for key in ("allow", "ask"):
            if not permissions[key]:
                del permissions[key]

        payload["permissions"] = permissions
        self.save(payload)
