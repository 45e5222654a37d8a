"""Expand ``requires`` edges into a dependency-first install order."""

from __future__ import annotations

from dataclasses import dataclass, field

from skz.registry.models import RegistrySkill


@dataclass(frozen=True)
class MissingDependency:
    skill: str
    requires: str

    def describe(self) -> str:
        return f"Required skill '{self.requires}' (needed by '{self.skill}') not found in registries"


@dataclass
class ResolvedSkills:
    skills: list[RegistrySkill] = field(default_factory=list)
    missing: list[MissingDependency] = field(default_factory=list)

    @property
    def names(self) -> list[str]:
        return [skill.name for skill in self.skills]


def resolve_dependencies(
    requested: list[RegistrySkill], available: list[RegistrySkill]
) -> ResolvedSkills:
    """Depth-first expansion guarded by a seen-set keyed by skill name.

    A name is marked seen before its requirements are visited, so a cycle
    (A requires B, B requires A) resolves in first-encountered order instead
    of raising.
    """
    by_name: dict[str, RegistrySkill] = {}
    for skill in available:
        by_name.setdefault(skill.name, skill)

    resolved = ResolvedSkills()
    seen: set[str] = set()

    def visit(skill: RegistrySkill) -> None:
        if skill.name in seen:
            return
        seen.add(skill.name)
        for name in skill.requires:
            dependency = by_name.get(name)
            if dependency is None:
                resolved.missing.append(MissingDependency(skill=skill.name, requires=name))
                continue
            visit(dependency)
        resolved.skills.append(skill)

    for skill in requested:
        visit(skill)
    return resolved
