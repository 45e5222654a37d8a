from typing import Optional

from rich.markup import escape
from rich.table import Column, Table

from skz.agents.models import AgentDocument, Permission
from skz.registry.models import RegistryAgent, RegistrySkill
from skz.skills.models import InstalledSkill
from skz.tui.enums import PERMISSION_STYLE, UIStyle


def permission_markup(permission: Optional[Permission]) -> str:
    if permission is None:
        return f"[{UIStyle.DIM.value}](default: allow)[/{UIStyle.DIM.value}]"
    style = PERMISSION_STYLE[permission]
    return f"[{style}]{permission.value}[/{style}]"


class SkillTable:
    @staticmethod
    def registry_table(skills: list[RegistrySkill]) -> Table:
        table = Table(
            Column(header="Name", no_wrap=True),
            Column(header="Version", width=9),
            Column(header="Description", overflow="fold"),
            expand=True,
            header_style="bold",
        )
        for skill in skills:
            table.add_row(skill.name, skill.version, escape(skill.description))
        return table


class AgentTable:
    @staticmethod
    def registry_table(agents: list[RegistryAgent]) -> Table:
        table = Table(
            Column(header="Name", no_wrap=True),
            Column(header="Version", width=9),
            Column(header="Skills", overflow="fold"),
            Column(header="Description", overflow="fold"),
            expand=True,
            header_style="bold",
        )
        for agent in agents:
            table.add_row(
                agent.name,
                agent.version,
                ", ".join(agent.skills),
                escape(agent.description),
            )
        return table

    @staticmethod
    def summary_block(agent: AgentDocument) -> Table:
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Location", agent.location.value)
        table.add_row("Mode", agent.mode)
        if agent.description:
            table.add_row("Description", escape(agent.description))
        return table

    @staticmethod
    def permissions_table(agent: AgentDocument, skills: list[InstalledSkill]) -> Table:
        permissions = agent.skill_permissions
        table = Table(
            Column(header="Skill / pattern", no_wrap=True),
            Column(header="Permission", width=18),
            Column(header="Status", width=10),
            expand=True,
            header_style="bold",
        )
        for pattern, permission in permissions.wildcard_rules().items():
            table.add_row(pattern, permission_markup(permission), "")
        for skill in skills:
            status = (
                "enabled"
                if permissions.is_enabled(skill.name)
                else f"[{UIStyle.RED.value}]DISABLED[/{UIStyle.RED.value}]"
            )
            table.add_row(
                skill.name,
                permission_markup(permissions.explicit(skill.name)),
                status,
            )
        return table
