"""Installed agent models and skill permission rules."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from skz.matching import glob_to_regex


class Permission(str, Enum):
    ALLOW = "allow"
    DENY = "deny"
    ASK = "ask"


class AgentLocation(str, Enum):
    PROJECT = "project"
    GLOBAL = "global"


@dataclass(frozen=True)
class SkillPermissions:
    """Skill name or glob pattern -> permission.

    An exact rule beats any wildcard rule; with no matching rule a skill is
    allowed.
    """

    rules: dict[str, Permission] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, raw: Any) -> "SkillPermissions":
        if not isinstance(raw, dict):
            return cls()
        rules: dict[str, Permission] = {}
        for pattern, value in raw.items():
            try:
                rules[str(pattern)] = Permission(str(value))
            except ValueError:
                continue
        return cls(rules=rules)

    def explicit(self, skill_name: str) -> Optional[Permission]:
        return self.rules.get(skill_name)

    def wildcard_rules(self) -> dict[str, Permission]:
        return {pattern: perm for pattern, perm in self.rules.items() if "*" in pattern}

    def resolve(self, skill_name: str) -> Permission:
        exact = self.rules.get(skill_name)
        if exact is not None:
            return exact
        for pattern, permission in self.wildcard_rules().items():
            if glob_to_regex(pattern).match(skill_name):
                return permission
        return Permission.ALLOW

    def is_enabled(self, skill_name: str) -> bool:
        return self.resolve(skill_name) != Permission.DENY


@dataclass(frozen=True)
class AgentDocument:
    name: str
    path: Path
    location: AgentLocation
    frontmatter: dict[str, Any]
    body: str

    @property
    def description(self) -> str:
        return str(self.frontmatter.get("description", "") or "")

    @property
    def mode(self) -> str:
        return str(self.frontmatter.get("mode", "") or "all")

    @property
    def skill_permissions(self) -> SkillPermissions:
        permission = self.frontmatter.get("permission")
        if not isinstance(permission, dict):
            return SkillPermissions()
        return SkillPermissions.from_raw(permission.get("skill"))

    def with_skill_changes(self, changes: dict[str, Permission]) -> "AgentDocument":
        """Merge ``changes`` into the raw ``permission.skill`` map.

        Entries this tool does not understand are written back untouched.
        """
        frontmatter = dict(self.frontmatter)
        permission = frontmatter.get("permission")
        permission = dict(permission) if isinstance(permission, dict) else {}
        skill = permission.get("skill")
        skill = dict(skill) if isinstance(skill, dict) else {}
        skill.update({pattern: value.value for pattern, value in changes.items()})
        permission["skill"] = skill
        frontmatter["permission"] = permission
        return replace(self, frontmatter=frontmatter)
