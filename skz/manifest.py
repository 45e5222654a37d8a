"""Turn a registry entry's file manifest into concrete files to install."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Callable, Optional

from skz.constants import AGENT_DESCRIPTOR, SKILL_DESCRIPTOR
from skz.errors import RegistryError, RequiredFileMissingError
from skz.models import FileDestination, FileToInstall, InstallTarget, SkillFileSet
from skz.registry.client import RegistryClient
from skz.registry.models import RegistryAgent, RegistrySkill
from skz.transforms import (
    rewrite_imports_for_layout,
    transform_for_claude,
    transform_for_opencode,
)

Transform = Callable[[str], str]


def _identity(content: str) -> str:
    return content


def entry_output_name(output_name: str, source_path: str) -> str:
    if PurePosixPath(output_name).suffix:
        return output_name
    return f"{output_name}{PurePosixPath(source_path).suffix}"


def command_output_path(command: str, file_name: str, file_count: int) -> str:
    if file_count == 1:
        return f"{command}{PurePosixPath(file_name).suffix or '.md'}"
    return f"{command}/{file_name}"


class ManifestResolver:
    """Fetches every file declared by a skill or agent manifest.

    Only the core descriptor is required. Any other file that fails to fetch is
    recorded as a warning on the returned ``SkillFileSet`` and skipped.
    """

    def __init__(self, client: RegistryClient) -> None:
        self.client = client

    def fetch_skill_files(self, skill: RegistrySkill, is_legacy: bool = False) -> SkillFileSet:
        return self._fetch_skill(
            skill,
            core=_identity,
            entry=lambda content: rewrite_imports_for_layout(content, is_legacy),
            command=transform_for_opencode,
            agent=_identity,
        )

    def fetch_claude_skill_files(self, skill: RegistrySkill) -> SkillFileSet:
        return self._fetch_skill(
            skill,
            core=transform_for_claude,
            entry=transform_for_claude,
            command=transform_for_claude,
            agent=transform_for_claude,
        )

    def fetch_for_target(
        self, skill: RegistrySkill, target: InstallTarget, is_legacy: bool = False
    ) -> SkillFileSet:
        if target == InstallTarget.CLAUDE:
            return self.fetch_claude_skill_files(skill)
        return self.fetch_skill_files(skill, is_legacy=is_legacy)

    def fetch_agent_files(self, agent: RegistryAgent, target: InstallTarget) -> SkillFileSet:
        transform = transform_for_claude if target == InstallTarget.CLAUDE else _identity
        files: list[FileToInstall] = []
        warnings: list[str] = []

        names = list(agent.files) or [AGENT_DESCRIPTOR]
        if AGENT_DESCRIPTOR not in names:
            names.insert(0, AGENT_DESCRIPTOR)

        for file_name in names:
            path = f"agents/{agent.name}/{file_name}"
            required = file_name == AGENT_DESCRIPTOR
            content = self._fetch(agent.registry_url, path, agent.base_path, agent.name, warnings, required)
            if content is None:
                continue
            if required:
                files.append(
                    FileToInstall(
                        relative_path=f"{agent.name}.md",
                        content=transform(content),
                        destination=FileDestination.AGENT,
                    )
                )
            else:
                files.append(
                    FileToInstall(
                        relative_path=f"{agent.name}/{file_name}",
                        content=transform(content),
                        destination=FileDestination.AGENT,
                    )
                )
        return SkillFileSet(files=files, warnings=warnings)

    def _fetch_skill(
        self,
        skill: RegistrySkill,
        core: Transform,
        entry: Transform,
        command: Transform,
        agent: Transform,
    ) -> SkillFileSet:
        files: list[FileToInstall] = []
        warnings: list[str] = []
        manifest = skill.files
        prefix = f"skills/{skill.name}"

        core_files = list(manifest.skill)
        if SKILL_DESCRIPTOR not in core_files:
            core_files.insert(0, SKILL_DESCRIPTOR)
        for file_name in core_files:
            content = self._fetch(
                skill.registry_url,
                f"{prefix}/{file_name}",
                skill.base_path,
                skill.name,
                warnings,
                required=file_name == SKILL_DESCRIPTOR,
            )
            if content is not None:
                files.append(FileToInstall(file_name, core(content)))

        for output_name, source_path in manifest.entry.items():
            content = self._fetch(skill.registry_url, source_path, skill.base_path, skill.name, warnings)
            if content is not None:
                files.append(
                    FileToInstall(entry_output_name(output_name, source_path), entry(content))
                )

        for command_name, command_files in manifest.commands.items():
            for file_name in command_files:
                content = self._fetch(
                    skill.registry_url,
                    f"{prefix}/command/{command_name}/{file_name}",
                    skill.base_path,
                    skill.name,
                    warnings,
                )
                if content is not None:
                    files.append(
                        FileToInstall(
                            command_output_path(command_name, file_name, len(command_files)),
                            command(content),
                            FileDestination.COMMAND,
                        )
                    )

        for file_name in manifest.agents:
            content = self._fetch(
                skill.registry_url,
                f"{prefix}/agent/{file_name}",
                skill.base_path,
                skill.name,
                warnings,
            )
            if content is not None:
                files.append(
                    FileToInstall(
                        PurePosixPath(file_name).name,
                        agent(content),
                        FileDestination.AGENT,
                    )
                )

        for file_name in manifest.static:
            content = self._fetch(
                skill.registry_url,
                f"{prefix}/{file_name}",
                skill.base_path,
                skill.name,
                warnings,
            )
            if content is not None:
                files.append(FileToInstall(file_name, content))

        return SkillFileSet(files=files, warnings=warnings)

    def _fetch(
        self,
        registry_url: str,
        path: str,
        base_path: Optional[str],
        owner: str,
        warnings: list[str],
        required: bool = False,
    ) -> Optional[str]:
        try:
            return self.client.fetch_file(registry_url, path, base_path)
        except RegistryError as exc:
            if required:
                raise RequiredFileMissingError(owner, path, exc) from exc
            warnings.append(f"Skipped {path}: {exc}")
            return None
