"""Parse and serialize agent markdown with YAML frontmatter."""

from __future__ import annotations

from pathlib import Path

from skz.agents.models import AgentDocument, AgentLocation
from skz.frontmatter import join_frontmatter, split_frontmatter


def parse_agent(path: Path, location: AgentLocation) -> AgentDocument:
    text = path.read_text(encoding="utf-8")
    frontmatter, body = split_frontmatter(text, path)
    return AgentDocument(
        name=path.stem,
        path=path,
        location=location,
        frontmatter=frontmatter,
        body=body,
    )


def serialize_agent(agent: AgentDocument) -> str:
    return join_frontmatter(agent.frontmatter, agent.body)
