from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from skz.agent_service import AgentInstallReport
from skz.agents.models import AgentDocument, AgentLocation, Permission
from skz.init_service import InitResult
from skz.install_service import InstallReport, OutcomeStatus, SkillOutcome
from skz.matching import group_by_domain
from skz.migrate_service import MigrationPlan, MigrationResult, MigrationState
from skz.models import BatchFailure, InstallTarget
from skz.registry.models import RegistryAgent, RegistrySkill
from skz.skills.models import InstalledSkill
from skz.tui.enums import OUTCOME_STYLE, UIStyle
from skz.tui.sections import UISection
from skz.tui.tables import AgentTable, SkillTable, permission_markup
from skz.utils import compact_home_path, relative_display


def _bullets(items: list[str]) -> str:
    return "\n".join(f"- {escape(item)}" for item in items)


class SkzConsoleUI:
    def __init__(
        self,
        console: Optional[Console] = None,
        root: Optional[Path] = None,
    ) -> None:
        self.console = console or Console()
        self.root = root or Path.cwd()

    def _label(self, path: Path) -> str:
        return relative_display(path, self.root)

    def _line(self, text: str, style: Optional[str] = None) -> None:
        self.console.print(text, style=style, markup=False, highlight=False)

    def render_fetching(self, kind: str) -> None:
        self._line(f"Fetching {kind} from registries...", style=UIStyle.DIM.value)

    def render_registry_failures(self, failures: list[BatchFailure]) -> None:
        if not failures:
            return
        self.console.print(
            UISection.note(
                "registry errors",
                _bullets([f"Failed to fetch registry {item.describe()}" for item in failures]),
                style=UIStyle.YELLOW.value,
            )
        )

    def render_init(self, result: InitResult) -> None:
        if result.aborted:
            self._line("Aborted.")
            return
        for path in result.created:
            suffix = "/" if path.is_dir() else ""
            self._line(f"Created {self._label(path)}{suffix}")
        if result.package_json is not None:
            verb = "Created" if result.package_json_created else "Updated"
            self._line(f"{verb} {self._label(result.package_json)}")
        if result.warnings:
            self.console.print(
                UISection.note("warnings", _bullets(result.warnings), style=UIStyle.YELLOW.value)
            )
        target = "Claude Code" if result.target == InstallTarget.CLAUDE else "OpenCode"
        self.console.print(
            UISection.note(
                "next",
                f"Initialized for {target}. Run `bun install` to install dependencies.\n"
                "- skz list        List available skills\n"
                "- skz add <name>  Add a skill to your project",
                style=UIStyle.DIM.value,
            )
        )

    def render_skill_list(self, skills: list[RegistrySkill]) -> None:
        if not skills:
            self._line("No skills found in configured registries.")
            return
        for domain, members in group_by_domain(skills):
            self.console.print(
                UISection.wrap(
                    domain.upper(),
                    SkillTable.registry_table(members),
                    style=UIStyle.CYAN.value,
                )
            )
        self._line(f"{len(skills)} skill(s) available")
        self._line("Use `skz add <name>` to install a skill, or `skz add <domain>` for a group.")

    def _render_outcome(self, outcome: SkillOutcome, report: InstallReport) -> None:
        style = OUTCOME_STYLE[outcome.status]
        if outcome.status == OutcomeStatus.INSTALLED:
            where = ""
            if report.layout.is_claude:
                where = f" to {self._label(report.layout.skills_dir)}/"
            self._line(f"  Installed {outcome.name}{where} ({len(outcome.files)} files)", style=style)
        elif outcome.status == OutcomeStatus.SKIPPED:
            detail = f" ({outcome.detail})" if outcome.detail else ""
            self._line(f"  Skipped {outcome.name}{detail}", style=style)
        else:
            self._line(f"  Failed to install {outcome.name}: {outcome.detail}", style=style)

        for warning in outcome.warnings:
            self._line(f"    Warning: {warning}", style=UIStyle.YELLOW.value)

        if outcome.setup_env or outcome.setup_instructions:
            body: list[str] = []
            if outcome.setup_env:
                body.append("Required environment variables:")
                body.extend(f"  {escape(name)}" for name in outcome.setup_env)
            if outcome.setup_instructions:
                body.append(escape(outcome.setup_instructions))
            self.console.print(
                UISection.note(f"setup: {outcome.name}", "\n".join(body), style=UIStyle.MAGENTA.value)
            )
        if outcome.setup_config is not None:
            self._line(f"    Wrote {self._label(outcome.setup_config)}")

    def render_install_report(self, report: InstallReport, summary: bool = True) -> None:
        for outcome in report.outcomes:
            self._render_outcome(outcome, report)

        notes = [item.describe() for item in report.missing] + report.warnings
        if notes:
            self.console.print(
                UISection.note("warnings", _bullets(notes), style=UIStyle.YELLOW.value)
            )
        if report.permissions_configured:
            self._line("Permissions configured in .claude/settings.json")
        if not summary:
            return

        self._line(
            f"Done! {len(report.installed)} installed, {len(report.skipped)} skipped, "
            f"{len(report.failed)} failed."
        )
        if report.added_utils:
            self._line(f"Added utils: {', '.join(report.added_utils)}")
        self._render_dependencies(report.added_dependencies)

    def _render_dependencies(self, dependencies: list[str]) -> None:
        if dependencies:
            self._line(f"Added dependencies: {', '.join(dependencies)}")
            self._line("Run `bun install` to install dependencies.")

    def render_registry_agents(self, agents: list[RegistryAgent]) -> None:
        if not agents:
            self._line("No agents found in configured registries.")
            return
        self.console.print(
            UISection.wrap("agents", AgentTable.registry_table(agents), style=UIStyle.BLUE.value)
        )
        self._line(f"{len(agents)} agent(s) available")
        self._line("Use `skz agents add <name>` to install an agent.")

    def render_agent_report(self, report: AgentInstallReport) -> None:
        if report.initialized:
            self._line("Initialized .opencode/skz.json")
        for outcome in report.outcomes:
            style = OUTCOME_STYLE[outcome.status]
            if outcome.status == OutcomeStatus.INSTALLED:
                self._line(f"  Installed {outcome.name}", style=style)
            elif outcome.status == OutcomeStatus.SKIPPED:
                self._line(f"  Skipped {outcome.name}", style=style)
            else:
                self._line(f"  Failed to install {outcome.name}: {outcome.detail}", style=style)
            if outcome.skills is not None:
                self.render_install_report(outcome.skills, summary=False)
            for warning in outcome.warnings:
                self._line(f"    Warning: {warning}", style=UIStyle.YELLOW.value)

        self._line(
            f"Done! {report.count(OutcomeStatus.INSTALLED)} installed, "
            f"{report.count(OutcomeStatus.SKIPPED)} skipped, "
            f"{report.count(OutcomeStatus.FAILED)} failed."
        )
        if report.added_mcp:
            self._line(f"Added MCP servers to opencode.json: {', '.join(report.added_mcp)}")
        if report.added_skills:
            self._line(f"Installed required skills: {', '.join(report.added_skills)}")
        self._render_dependencies(report.added_dependencies)

    def render_no_agents(self, location: AgentLocation, agents_dir: Path) -> None:
        hint = f"Create an agent in {compact_home_path(agents_dir)}/"
        if location == AgentLocation.PROJECT:
            hint += " or use `skz agents add`.\nOr use --global to list global agents."
        self.console.print(
            UISection.note(
                "agents",
                f"No {location.value} agents found.\n{hint}",
                style=UIStyle.YELLOW.value,
            )
        )

    def render_agent(self, agent: AgentDocument, skills: list[InstalledSkill]) -> None:
        self.console.print(
            UISection.wrap(
                f"agent: {agent.name}",
                AgentTable.summary_block(agent),
                style=UIStyle.BLUE.value,
            )
        )
        if not skills and not agent.skill_permissions.wildcard_rules():
            self.console.print(
                UISection.note("skill permissions", "(no skills installed)", style=UIStyle.DIM.value)
            )
            return
        self.console.print(
            UISection.wrap(
                "skill permissions",
                AgentTable.permissions_table(agent, skills),
                style=UIStyle.CYAN.value,
            )
        )

    def render_installed_agents(
        self, agents: list[AgentDocument], skills: list[InstalledSkill]
    ) -> None:
        location = agents[0].location.value if agents else ""
        self._line(f"{len(agents)} {location} agent(s) installed:")
        for agent in agents:
            self.render_agent(agent, skills)

    def render_permission_change(
        self, agent: str, skill: str, permission: Permission, verb: Optional[str] = None
    ) -> None:
        if verb is not None:
            self._line(f"{verb} '{skill}' for agent '{agent}'.")
            return
        self.console.print(
            f"Set '{escape(skill)}' to '{permission_markup(permission)}' for agent '{escape(agent)}'.",
            highlight=False,
        )

    def render_migration_plan(self, plan: MigrationPlan) -> None:
        if plan.state == MigrationState.NOT_NEEDED:
            self._line(f"Already using new config location ({self._label(plan.new_config)}).")
            self._line("No migration needed.")
        elif plan.state == MigrationState.CONFLICT:
            self.console.print(
                UISection.note(
                    "conflict",
                    "Both new and legacy configs exist!\n"
                    f"  New:    {self._label(plan.new_config)}\n"
                    f"  Legacy: {self._label(plan.legacy_config)}\n"
                    "Please resolve this manually by removing one of them.",
                    style=UIStyle.YELLOW.value,
                )
            )
        elif plan.state == MigrationState.NO_CONFIG:
            self._line("No skz.json found. Run `skz init` to initialize.")
        else:
            utils = self._label(plan.legacy_utils) if plan.legacy_utils else "-"
            new_utils = self._label(plan.new_utils) if plan.new_utils else "-"
            self.console.print(
                UISection.note(
                    "migration",
                    "Found legacy configuration:\n"
                    f"  Config: {self._label(plan.legacy_config)}\n"
                    f"  Utils:  {utils}/\n"
                    "Will migrate to:\n"
                    f"  Config: {self._label(plan.new_config)}\n"
                    f"  Utils:  {new_utils}/",
                    style=UIStyle.BLUE.value,
                )
            )

    def render_migration_result(self, result: MigrationResult) -> None:
        if result.copied_utils:
            self._line(f"Copied {len(result.copied_utils)} util file(s)")
        if result.created_config is not None:
            self._line(f"Created {self._label(result.created_config)}")
        for path in result.removed:
            self._line(f"Removed {self._label(path)}")
        if result.rewritten:
            self._line(f"Updated imports in {len(result.rewritten)} skill file(s)")
        self._line("Migration complete!")
