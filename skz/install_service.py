"""Install registry skills into a project."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from skz.config import ConfigStore, FoundConfig, layout_for, resolve_target
from skz.errors import SkzError
from skz.installer import SkillInstaller
from skz.layout import ProjectLayout
from skz.manifest import ManifestResolver
from skz.matching import select_skills
from skz.models import BatchResult, InstallTarget
from skz.project.claude_settings import ClaudeSettingsRepository
from skz.project.package_json import PackageJsonRepository
from skz.prompts import Prompter
from skz.registry.client import RegistryClient, all_skills, util_file_name
from skz.registry.models import Registry, RegistrySkill
from skz.resolver import MissingDependency, resolve_dependencies
from skz.setup_prompts import UnknownPromptTypeError, run_setup_prompts, write_setup_config


class OutcomeStatus(str, Enum):
    INSTALLED = "installed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class SkillOutcome:
    name: str
    status: OutcomeStatus
    files: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    detail: str = ""
    setup_env: list[str] = field(default_factory=list)
    setup_instructions: str = ""
    setup_config: Optional[Path] = None


@dataclass
class InstallReport:
    layout: ProjectLayout
    outcomes: list[SkillOutcome] = field(default_factory=list)
    missing: list[MissingDependency] = field(default_factory=list)
    added_utils: list[str] = field(default_factory=list)
    added_dependencies: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    permissions_configured: bool = False

    def _with_status(self, status: OutcomeStatus) -> list[SkillOutcome]:
        return [item for item in self.outcomes if item.status == status]

    @property
    def installed(self) -> list[SkillOutcome]:
        return self._with_status(OutcomeStatus.INSTALLED)

    @property
    def skipped(self) -> list[SkillOutcome]:
        return self._with_status(OutcomeStatus.SKIPPED)

    @property
    def failed(self) -> list[SkillOutcome]:
        return self._with_status(OutcomeStatus.FAILED)


@dataclass(frozen=True)
class InstallContext:
    found: FoundConfig
    target: InstallTarget
    layout: ProjectLayout
    registries: BatchResult[Registry]

    @property
    def skills(self) -> list[RegistrySkill]:
        return all_skills(self.registries)


class InstallService:
    def __init__(
        self,
        root: Path,
        prompter: Prompter,
        client: Optional[RegistryClient] = None,
    ) -> None:
        self.root = root
        self.prompter = prompter
        self.client = client or RegistryClient()
        self.store = ConfigStore(root)
        self.manifests = ManifestResolver(self.client)

    def load_context(self, found: Optional[FoundConfig] = None) -> InstallContext:
        found = found or self.store.require()
        target = resolve_target(found, self.store, self.prompter)
        return InstallContext(
            found=found,
            target=target,
            layout=layout_for(found, target, self.root),
            registries=self.client.fetch_all(found.config.registries),
        )

    @staticmethod
    def select(context: InstallContext, patterns: list[str]) -> list[RegistrySkill]:
        return select_skills(patterns, context.skills)

    def install(
        self,
        context: InstallContext,
        requested: list[RegistrySkill],
        skip_installed: bool = False,
    ) -> InstallReport:
        """Install ``requested`` plus their ``requires`` closure, one skill at a time.

        A failing skill is recorded and the rest continue. With ``skip_installed``
        skills already on disk are left alone instead of offered for overwrite.
        """
        installer = SkillInstaller(context.layout)
        package_json = PackageJsonRepository(self.root)
        resolved = resolve_dependencies(requested, context.skills)
        report = InstallReport(layout=context.layout, missing=resolved.missing)

        if context.layout.is_claude:
            context.layout.skills_dir.mkdir(parents=True, exist_ok=True)

        for skill in resolved.skills:
            if installer.skill_exists(skill.name):
                if skip_installed:
                    report.outcomes.append(
                        SkillOutcome(skill.name, OutcomeStatus.SKIPPED, detail="already installed")
                    )
                    continue
                if not self.prompter.confirm(
                    f"Skill '{skill.name}' already exists. Overwrite?", default=False
                ):
                    report.outcomes.append(SkillOutcome(skill.name, OutcomeStatus.SKIPPED))
                    continue

            try:
                outcome = self._install_one(context, installer, package_json, skill, report)
            except (SkzError, OSError) as exc:
                outcome = SkillOutcome(skill.name, OutcomeStatus.FAILED, detail=str(exc))
            report.outcomes.append(outcome)

        installed_names = [item.name for item in report.installed]
        if context.layout.is_claude and installed_names:
            try:
                ClaudeSettingsRepository(self.root).add_skill_permissions(installed_names)
                report.permissions_configured = True
            except (SkzError, OSError) as exc:
                report.warnings.append(f"Could not update skill permissions: {exc}")
        return report

    def _install_one(
        self,
        context: InstallContext,
        installer: SkillInstaller,
        package_json: PackageJsonRepository,
        skill: RegistrySkill,
        report: InstallReport,
    ) -> SkillOutcome:
        if context.layout.shares_utils:
            self._install_utils(installer, skill, report)

        if skill.dependencies:
            report.added_dependencies.extend(
                package_json.add_dev_dependencies(skill.dependencies)
            )

        file_set = self.manifests.fetch_for_target(
            skill, context.target, is_legacy=context.found.is_legacy
        )
        written = installer.install(skill.name, file_set.files)
        outcome = SkillOutcome(
            skill.name,
            OutcomeStatus.INSTALLED,
            files=written,
            warnings=list(file_set.warnings),
        )
        self._run_setup(context.layout, skill, outcome)
        return outcome

    def _install_utils(
        self, installer: SkillInstaller, skill: RegistrySkill, report: InstallReport
    ) -> None:
        for util_name in skill.utils:
            if installer.util_exists(util_name):
                continue
            file_name = util_file_name(util_name)
            try:
                content = self.client.fetch_util(skill.registry_url, util_name, skill.base_path)
            except SkzError as exc:
                report.warnings.append(f"Could not fetch util {file_name}: {exc}")
                continue
            installer.install_util(util_name, content)
            report.added_utils.append(file_name)

    def _run_setup(
        self, layout: ProjectLayout, skill: RegistrySkill, outcome: SkillOutcome
    ) -> None:
        setup = skill.setup
        if setup is None or setup.is_empty():
            return
        outcome.setup_env = list(setup.env)
        outcome.setup_instructions = setup.instructions
        if not setup.prompts:
            return
        try:
            answers = run_setup_prompts(setup.prompts, self.prompter)
        except UnknownPromptTypeError as exc:
            outcome.warnings.append(f"Setup skipped: {exc}")
            return
        if setup.config_file:
            outcome.setup_config = write_setup_config(
                layout.skill_dir(skill.name) / setup.config_file, answers
            )
