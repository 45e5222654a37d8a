import functools
import sys
from pathlib import Path
from typing import Callable

import click
from rich.console import Console

from skz import __version__
from skz.agent_service import AgentInstallService, select_agents
from skz.agents.models import AgentLocation, Permission
from skz.agents.repository import AgentRepository
from skz.config import ConfigStore
from skz.constants import OPENCODE_DIRNAME, OPENCODE_SKILLS_DIRNAME, VERSION_PREFIX
from skz.errors import SkzError
from skz.init_service import InitService
from skz.install_service import InstallService, OutcomeStatus
from skz.migrate_service import MigrateService, MigrationState
from skz.prompts import prompter_for
from skz.registry.client import RegistryClient, all_agents, all_skills
from skz.skills.parser import list_installed_skills
from skz.tui import SkzConsoleUI
from skz.tui.selector import PickerItem, SelectorApp, agent_items, skill_items


PERMISSION_VALUES = [permission.value for permission in Permission]


def _root() -> Path:
    return Path.cwd()


def _ui(root: Path) -> SkzConsoleUI:
    return SkzConsoleUI(Console(), root=root)


def _reports_errors(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SkzError as exc:
            raise click.ClickException(str(exc)) from exc

    return wrapper


_yes_option = click.option(
    "--yes", "-y", is_flag=True, help="Skip confirmation prompts and use defaults."
)
_global_option = click.option(
    "--global",
    "-g",
    "use_global",
    is_flag=True,
    help="Use global agents (~/.config/opencode/agent/).",
)


def _location(use_global: bool) -> AgentLocation:
    return AgentLocation.GLOBAL if use_global else AgentLocation.PROJECT


def _is_interactive() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def _pick(items: list[PickerItem], kind: str, usage: str) -> list[str]:
    if not _is_interactive():
        raise click.UsageError(f"No {kind} specified. Usage: {usage}")
    return SelectorApp(items, kind=kind).run() or []


def _project_skills(root: Path):
    return list_installed_skills(root / OPENCODE_DIRNAME / OPENCODE_SKILLS_DIRNAME)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(
    __version__, "-v", "--version", message=f"{VERSION_PREFIX}%(version)s"
)
def cli() -> None:
    """Install agent skills and agents from registries."""


@cli.command(help="Initialize skz in the current project.")
@click.option("--claude", is_flag=True, help="Set up for Claude Code (.claude/).")
@_yes_option
@_reports_errors
def init(claude: bool, yes: bool) -> None:
    root = _root()
    service = InitService(root, prompter_for(yes))
    result = service.run(service.detect_target(claude))
    _ui(root).render_init(result)


@cli.command("list", help="List skills available from configured registries.")
@_reports_errors
def list_skills() -> None:
    root = _root()
    ui = _ui(root)
    found = ConfigStore(root).require()

    ui.render_fetching("skills")
    registries = RegistryClient().fetch_all(found.config.registries)
    ui.render_registry_failures(registries.failed)
    if registries.failed and not registries.succeeded:
        raise click.ClickException("Could not fetch any configured registry.")
    ui.render_skill_list(all_skills(registries))


@cli.command(help="Add skills by name, domain, or glob pattern.")
@click.argument("patterns", nargs=-1)
@_yes_option
@_reports_errors
def add(patterns: tuple[str, ...], yes: bool) -> None:
    root = _root()
    ui = _ui(root)
    service = InstallService(root, prompter_for(yes))

    ui.render_fetching("skills")
    context = service.load_context()
    ui.render_registry_failures(context.registries.failed)
    if not context.skills:
        ui.render_skill_list([])
        return

    if patterns:
        requested = service.select(context, list(patterns))
    else:
        names = _pick(skill_items(context.skills), "skills", "skz add <name|domain|pattern>...")
        if not names:
            click.echo("No skills selected.")
            return
        requested = [skill for skill in context.skills if skill.name in names]

    report = service.install(context, requested)
    ui.render_install_report(report)
    if report.failed:
        raise click.exceptions.Exit(1)


def _install_agents(names: tuple[str, ...], yes: bool) -> None:
    root = _root()
    ui = _ui(root)
    service = AgentInstallService(root, prompter_for(yes))

    ui.render_fetching("agents")
    context, initialized = service.load_context()
    ui.render_registry_failures(context.registries.failed)
    available = service.agents(context)
    if not available:
        ui.render_registry_agents([])
        return

    if names:
        selected = select_agents(list(names), available)
    else:
        picked = _pick(agent_items(available), "agents", "skz agent <name>...")
        if not picked:
            click.echo("No agents selected.")
            return
        selected = [agent for agent in available if agent.name in picked]

    report = service.install(context, selected)
    report.initialized = initialized
    ui.render_agent_report(report)
    if report.count(OutcomeStatus.FAILED):
        raise click.exceptions.Exit(1)


@cli.command(help="Add prebuilt agents (with their MCP servers and skills).")
@click.argument("names", nargs=-1)
@_yes_option
@_reports_errors
def agent(names: tuple[str, ...], yes: bool) -> None:
    _install_agents(names, yes)


@cli.group(help="Manage agents and their skill permissions.")
def agents() -> None:
    pass


@agents.command("list", help="List agents available from registries.")
@_reports_errors
def agents_list() -> None:
    root = _root()
    ui = _ui(root)
    found = ConfigStore(root).require()
    ui.render_fetching("agents")
    registries = RegistryClient().fetch_all(found.config.registries)
    ui.render_registry_failures(registries.failed)
    ui.render_registry_agents(all_agents(registries))


@agents.command("add", help="Add prebuilt agents from registries.")
@click.argument("names", nargs=-1)
@_yes_option
@_reports_errors
def agents_add(names: tuple[str, ...], yes: bool) -> None:
    _install_agents(names, yes)


@agents.command("installed", help="List installed agents and their skill permissions.")
@_global_option
@_reports_errors
def agents_installed(use_global: bool) -> None:
    root = _root()
    ui = _ui(root)
    repository = AgentRepository(root, _location(use_global))
    documents = repository.list()
    if not documents:
        ui.render_no_agents(repository.location, repository.agents_dir)
        return
    ui.render_installed_agents(documents, _project_skills(root))


@agents.command("show", help="Show an agent's skill permissions.")
@click.argument("agent_name")
@_global_option
@_reports_errors
def agents_show(agent_name: str, use_global: bool) -> None:
    root = _root()
    document = AgentRepository(root, _location(use_global)).get(agent_name)
    _ui(root).render_agent(document, _project_skills(root))


@agents.command("set", help="Set a skill permission (allow, deny, ask).")
@click.argument("agent_name")
@click.argument("skill")
@click.argument("permission", type=click.Choice(PERMISSION_VALUES))
@_global_option
@_reports_errors
def agents_set(agent_name: str, skill: str, permission: str, use_global: bool) -> None:
    root = _root()
    value = Permission(permission)
    AgentRepository(root, _location(use_global)).update_skill_permissions(
        agent_name, {skill: value}
    )
    _ui(root).render_permission_change(agent_name, skill, value)


@agents.command("enable", help="Allow a skill for an agent.")
@click.argument("agent_name")
@click.argument("skill")
@_global_option
@_reports_errors
def agents_enable(agent_name: str, skill: str, use_global: bool) -> None:
    root = _root()
    AgentRepository(root, _location(use_global)).update_skill_permissions(
        agent_name, {skill: Permission.ALLOW}
    )
    _ui(root).render_permission_change(agent_name, skill, Permission.ALLOW, verb="Enabled")


@agents.command("disable", help="Deny a skill for an agent.")
@click.argument("agent_name")
@click.argument("skill")
@_global_option
@_reports_errors
def agents_disable(agent_name: str, skill: str, use_global: bool) -> None:
    root = _root()
    AgentRepository(root, _location(use_global)).update_skill_permissions(
        agent_name, {skill: Permission.DENY}
    )
    _ui(root).render_permission_change(agent_name, skill, Permission.DENY, verb="Disabled")


@cli.command(help="Migrate a legacy ./skz.json project to .opencode/.")
@_yes_option
@_reports_errors
def migrate(yes: bool) -> None:
    root = _root()
    ui = _ui(root)
    service = MigrateService(root)
    plan = service.plan()
    ui.render_migration_plan(plan)
    if plan.state != MigrationState.READY:
        return
    if not prompter_for(yes).confirm("Proceed with migration?", default=True):
        click.echo("Aborted.")
        return
    ui.render_migration_result(service.apply(plan))


def main() -> int:
    try:
        cli(standalone_mode=False)
    except click.exceptions.Exit as exc:
        code = exc.exit_code
        return code if isinstance(code, int) else 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.exceptions.Abort:
        click.echo("Aborted!", err=True)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
