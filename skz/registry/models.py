"""Registry document models (registry.json v2)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from skz.constants import DEFAULT_DOMAIN


@dataclass(frozen=True)
class SetupPrompt:
    name: str
    type: str
    message: str
    default: Any = None
    choices: list[dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class SkillSetup:
    env: list[str] = field(default_factory=list)
    instructions: str = ""
    prompts: list[SetupPrompt] = field(default_factory=list)
    config_file: str = ""

    def is_empty(self) -> bool:
        return not (self.env or self.instructions or self.prompts)


@dataclass(frozen=True)
class SkillFiles:
    skill: list[str] = field(default_factory=list)
    commands: dict[str, list[str]] = field(default_factory=dict)
    agents: list[str] = field(default_factory=list)
    entry: dict[str, str] = field(default_factory=dict)
    static: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RegistrySkill:
    name: str
    description: str
    version: str
    files: SkillFiles
    domain: str = DEFAULT_DOMAIN
    requires: list[str] = field(default_factory=list)
    utils: list[str] = field(default_factory=list)
    dependencies: dict[str, str] = field(default_factory=dict)
    setup: SkillSetup | None = None
    registry_url: str = ""
    registry_name: str = ""
    base_path: str | None = None


@dataclass(frozen=True)
class RegistryAgent:
    name: str
    description: str
    version: str
    files: list[str] = field(default_factory=list)
    mcp: dict[str, dict[str, Any]] = field(default_factory=dict)
    skills: list[str] = field(default_factory=list)
    demo: Any = None
    registry_url: str = ""
    registry_name: str = ""
    base_path: str | None = None


@dataclass(frozen=True)
class Registry:
    url: str
    name: str
    version: str
    skills: list[RegistrySkill]
    agents: list[RegistryAgent]
    utils: list[str] = field(default_factory=list)
    base_path: str | None = None


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if isinstance(item, str)]


def _normalize_choices(raw: Any) -> list[dict[str, Any]]:
    choices: list[dict[str, Any]] = []
    if not isinstance(raw, list):
        return choices
    for choice in raw:
        if isinstance(choice, str):
            choices.append({"value": choice})
        elif isinstance(choice, dict) and "value" in choice:
            choices.append(dict(choice))
    return choices


def _parse_setup(raw: Any) -> SkillSetup | None:
    if not isinstance(raw, dict):
        return None
    prompts = [
        SetupPrompt(
            name=str(item["name"]),
            type=str(item.get("type", "input")),
            message=str(item.get("message", item["name"])),
            default=item.get("default"),
            choices=_normalize_choices(item.get("choices")),
        )
        for item in raw.get("prompts", []) or []
        if isinstance(item, dict) and "name" in item
    ]
    return SkillSetup(
        env=_str_list(raw.get("env")),
        instructions=str(raw.get("instructions", "") or ""),
        prompts=prompts,
        config_file=str(raw.get("configFile", "") or ""),
    )


def _parse_files(raw: Any) -> SkillFiles:
    if not isinstance(raw, dict):
        return SkillFiles()
    commands_raw = raw.get("commands") or {}
    entry_raw = raw.get("entry") or {}
    return SkillFiles(
        skill=_str_list(raw.get("skill")),
        commands={
            str(name): _str_list(files)
            for name, files in commands_raw.items()
            if isinstance(files, list)
        },
        agents=_str_list(raw.get("agents")),
        entry={str(k): str(v) for k, v in entry_raw.items() if isinstance(v, str)},
        static=_str_list(raw.get("static")),
    )


def parse_registry(url: str, payload: dict[str, Any]) -> Registry:
    """Build a ``Registry`` from an already-validated registry.json payload."""
    name = str(payload.get("name", url))
    base_path = payload.get("basePath") or None

    skills = [
        RegistrySkill(
            name=str(item["name"]),
            description=str(item.get("description", "")),
            version=str(item.get("version", "")),
            domain=str(item.get("domain") or DEFAULT_DOMAIN),
            requires=_str_list(item.get("requires")),
            utils=_str_list(item.get("utils")),
            dependencies={
                str(k): str(v) for k, v in (item.get("dependencies") or {}).items()
            },
            setup=_parse_setup(item.get("setup")),
            files=_parse_files(item.get("files")),
            registry_url=url,
            registry_name=name,
            base_path=base_path,
        )
        for item in payload.get("skills", []) or []
    ]

    agents = [
        RegistryAgent(
            name=str(item["name"]),
            description=str(item.get("description", "")),
            version=str(item.get("version", "")),
            files=_str_list(item.get("files")),
            mcp={
                str(k): dict(v)
                for k, v in (item.get("mcp") or {}).items()
                if isinstance(v, dict)
            },
            skills=_str_list(item.get("skills")),
            demo=item.get("demo"),
            registry_url=url,
            registry_name=name,
            base_path=base_path,
        )
        for item in payload.get("agents", []) or []
    ]

    return Registry(
        url=url,
        name=name,
        version=str(payload["version"]),
        skills=skills,
        agents=agents,
        utils=_str_list(payload.get("utils")),
        base_path=base_path,
    )
