"""Select registry skills by exact name, domain tag, or ``*`` glob."""

from __future__ import annotations

import re
from typing import Iterable, Optional, Protocol, TypeVar

from skz.constants import DEFAULT_DOMAIN
from skz.errors import NameNotFoundError
from skz.registry.models import RegistrySkill

_REGEX_SPECIAL = re.compile(r"[.+?^${}()|\[\]\\]")


class _Named(Protocol):
    name: str


NamedT = TypeVar("NamedT", bound=_Named)


def glob_to_regex(pattern: str) -> re.Pattern[str]:
    escaped = _REGEX_SPECIAL.sub(lambda m: "\\" + m.group(0), pattern)
    return re.compile("^" + escaped.replace("*", ".*") + "$")


def find_by_name(items: Iterable[NamedT], name: str) -> Optional[NamedT]:
    for item in items:
        if item.name == name:
            return item
    return None


def skill_domain(skill: RegistrySkill) -> str:
    return skill.domain or DEFAULT_DOMAIN


def collect_domains(skills: Iterable[RegistrySkill]) -> list[str]:
    seen: dict[str, None] = {}
    for skill in skills:
        seen.setdefault(skill_domain(skill), None)
    return list(seen)


def sort_domains(domains: Iterable[str]) -> list[str]:
    return sorted(domains, key=lambda item: (item == DEFAULT_DOMAIN, item))


def group_by_domain(
    skills: Iterable[RegistrySkill],
) -> list[tuple[str, list[RegistrySkill]]]:
    grouped: dict[str, list[RegistrySkill]] = {}
    for skill in skills:
        grouped.setdefault(skill_domain(skill), []).append(skill)
    return [(domain, grouped[domain]) for domain in sort_domains(grouped)]


def match_skills(
    pattern: str, all_skills: list[RegistrySkill], domains: list[str]
) -> list[RegistrySkill]:
    # Domain wins over glob and exact name, even when a skill shares the name.
    if pattern in domains:
        return [skill for skill in all_skills if skill_domain(skill) == pattern]

    if "*" in pattern:
        regex = glob_to_regex(pattern)
        return [skill for skill in all_skills if regex.match(skill.name)]

    skill = find_by_name(all_skills, pattern)
    return [skill] if skill is not None else []


def select_skills(
    patterns: Iterable[str], all_skills: list[RegistrySkill]
) -> list[RegistrySkill]:
    """Expand every pattern, keeping request order and dropping repeats.

    Raises ``NameNotFoundError`` for the first pattern that matches nothing.
    """
    domains = collect_domains(all_skills)
    selected: dict[str, RegistrySkill] = {}
    for pattern in patterns:
        matches = match_skills(pattern, all_skills, domains)
        if not matches:
            raise NameNotFoundError(
                "skill", pattern, [skill.name for skill in all_skills]
            )
        for skill in matches:
            selected.setdefault(skill.name, skill)
    return list(selected.values())
