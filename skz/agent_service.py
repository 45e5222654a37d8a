"""Install prebuilt agents and the skills they need."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from skz.config import ConfigStore, FoundConfig
from skz.errors import NameNotFoundError, SkzError
from skz.init_service import InitService
from skz.install_service import InstallContext, InstallReport, InstallService, OutcomeStatus
from skz.installer import SkillInstaller
from skz.matching import find_by_name
from skz.models import InstallTarget
from skz.project.opencode_config import OpenCodeConfigRepository
from skz.prompts import Prompter
from skz.registry.client import RegistryClient, all_agents
from skz.registry.models import RegistryAgent


@dataclass
class AgentOutcome:
    name: str
    status: OutcomeStatus
    files: list[Path] = field(default_factory=list)
    added_mcp: list[str] = field(default_factory=list)
    skills: Optional[InstallReport] = None
    warnings: list[str] = field(default_factory=list)
    detail: str = ""


@dataclass
class AgentInstallReport:
    initialized: bool = False
    outcomes: list[AgentOutcome] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    def count(self, status: OutcomeStatus) -> int:
        return sum(1 for item in self.outcomes if item.status == status)

    @property
    def added_mcp(self) -> list[str]:
        return [name for item in self.outcomes for name in item.added_mcp]

    @property
    def added_skills(self) -> list[str]:
        return [
            skill.name
            for item in self.outcomes
            if item.skills is not None
            for skill in item.skills.installed
        ]

    @property
    def added_dependencies(self) -> list[str]:
        return [
            dep
            for item in self.outcomes
            if item.skills is not None
            for dep in item.skills.added_dependencies
        ]


def select_agents(names: list[str], agents: list[RegistryAgent]) -> list[RegistryAgent]:
    selected: list[RegistryAgent] = []
    for name in names:
        agent = find_by_name(agents, name)
        if agent is None:
            raise NameNotFoundError("agent", name, [item.name for item in agents])
        if agent not in selected:
            selected.append(agent)
    return selected


class AgentInstallService:
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
        self.skills = InstallService(root, prompter, self.client)

    def ensure_config(self) -> tuple[FoundConfig, bool]:
        found = self.store.find()
        if found is not None:
            return found, False
        InitService(self.root, self.prompter, self.client).run(
            InstallTarget.OPENCODE, confirm_overwrite=False
        )
        return self.store.require(), True

    def load_context(self) -> tuple[InstallContext, bool]:
        found, initialized = self.ensure_config()
        return self.skills.load_context(found), initialized

    @staticmethod
    def agents(context: InstallContext) -> list[RegistryAgent]:
        return all_agents(context.registries)

    def install(
        self, context: InstallContext, agents: list[RegistryAgent]
    ) -> AgentInstallReport:
        report = AgentInstallReport()
        installer = SkillInstaller(context.layout)

        for agent in agents:
            if installer.agent_exists(agent.name) and not self.prompter.confirm(
                f"Agent '{agent.name}' already exists. Overwrite?", default=False
            ):
                report.outcomes.append(AgentOutcome(agent.name, OutcomeStatus.SKIPPED))
                continue
            try:
                report.outcomes.append(self._install_one(context, installer, agent))
            except (SkzError, OSError) as exc:
                report.outcomes.append(
                    AgentOutcome(agent.name, OutcomeStatus.FAILED, detail=str(exc))
                )
        return report

    def _install_one(
        self, context: InstallContext, installer: SkillInstaller, agent: RegistryAgent
    ) -> AgentOutcome:
        outcome = AgentOutcome(agent.name, OutcomeStatus.INSTALLED)

        if agent.mcp:
            if context.layout.is_claude:
                outcome.warnings.append(
                    "MCP servers are only merged into opencode.json; "
                    f"configure {', '.join(agent.mcp)} for Claude manually."
                )
            else:
                outcome.added_mcp = OpenCodeConfigRepository(self.root).add_mcp_servers(agent.mcp)

        if agent.skills:
            required = []
            for name in agent.skills:
                skill = find_by_name(context.skills, name)
                if skill is None:
                    outcome.warnings.append(
                        f"Required skill '{name}' not found in registries"
                    )
                    continue
                required.append(skill)
            outcome.skills = self.skills.install(context, required, skip_installed=True)

        file_set = self.skills.manifests.fetch_agent_files(agent, context.target)
        outcome.warnings.extend(file_set.warnings)
        outcome.files = installer.install_agent(file_set.files)
        return outcome
