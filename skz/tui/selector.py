"""Interactive Textual-based picker for skills and agents."""

from __future__ import annotations

from dataclasses import dataclass

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header, SelectionList, Static
from textual.widgets.selection_list import Selection

from skz.matching import skill_domain
from skz.registry.models import RegistryAgent, RegistrySkill


@dataclass(frozen=True)
class PickerItem:
    name: str
    label: str


def skill_items(skills: list[RegistrySkill]) -> list[PickerItem]:
    return [
        PickerItem(
            skill.name,
            f"[{skill_domain(skill)}] {skill.name} (v{skill.version}) - {skill.description}",
        )
        for skill in skills
    ]


def agent_items(agents: list[RegistryAgent]) -> list[PickerItem]:
    return [
        PickerItem(agent.name, f"{agent.name} (v{agent.version}) - {agent.description}")
        for agent in agents
    ]


class SelectorApp(App[list[str]]):
    """Pick registry entries to install; returns the chosen names."""

    TITLE = "skz"
    DEFAULT_CSS = """
    Screen {
        layout: vertical;
    }
    #info {
        height: 3;
        content-align: center middle;
        background: $primary-darken-2;
        color: $text;
        padding: 0 1;
    }
    SelectionList {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("a", "select_all", "Select All"),
        Binding("n", "select_none", "Select None"),
        Binding("enter", "confirm", "Confirm"),
        Binding("q", "quit_app", "Quit"),
    ]

    def __init__(self, items: list[PickerItem], kind: str = "skills") -> None:
        super().__init__()
        self._items = items
        self._kind = kind

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(
            f"Select {self._kind} to install | "
            f"Available: {len(self._items)} | "
            f"Use [a] select all, [n] select none, [enter] confirm",
            id="info",
        )
        selections = [Selection(Text(item.label), item.name, False) for item in self._items]
        yield SelectionList[str](*selections)
        yield Footer()

    def action_select_all(self) -> None:
        self.query_one(SelectionList).select_all()

    def action_select_none(self) -> None:
        self.query_one(SelectionList).deselect_all()

    def action_confirm(self) -> None:
        selected = set(self.query_one(SelectionList).selected)
        # Keep registry order rather than click order.
        self.exit([item.name for item in self._items if item.name in selected])

    def action_quit_app(self) -> None:
        self.exit([])
