from __future__ import annotations

from pathlib import Path
from typing import Optional

from skz.agents.models import AgentDocument, AgentLocation, Permission
from skz.agents.parser import parse_agent, serialize_agent
from skz.constants import OPENCODE_AGENTS_DIRNAME, OPENCODE_DIRNAME
from skz.errors import AgentNotFoundError


def global_agents_dir() -> Path:
    return Path.home() / ".config" / "opencode" / OPENCODE_AGENTS_DIRNAME


class AgentRepository:
    """Installed OpenCode agents in the project or the user's global config."""

    def __init__(self, root: Path, location: AgentLocation = AgentLocation.PROJECT) -> None:
        self.root = root
        self.location = location

    @property
    def agents_dir(self) -> Path:
        if self.location == AgentLocation.GLOBAL:
            return global_agents_dir()
        return self.root / OPENCODE_DIRNAME / OPENCODE_AGENTS_DIRNAME

    def list(self) -> list[AgentDocument]:
        if not self.agents_dir.is_dir():
            return []
        return [
            parse_agent(path, self.location)
            for path in sorted(self.agents_dir.glob("*.md"))
            if path.is_file()
        ]

    def find(self, name: str) -> Optional[AgentDocument]:
        path = self.agents_dir / f"{name}.md"
        if not path.is_file():
            return None
        return parse_agent(path, self.location)

    def get(self, name: str) -> AgentDocument:
        agent = self.find(name)
        if agent is None:
            raise AgentNotFoundError(name, self.location.value)
        return agent

    def update_skill_permissions(
        self, name: str, changes: dict[str, Permission]
    ) -> AgentDocument:
        agent = self.get(name)
        updated = agent.with_skill_changes(changes)
        updated.path.write_text(serialize_agent(updated), encoding="utf-8")
        return updated
