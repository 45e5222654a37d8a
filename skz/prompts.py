from typing import Optional, Protocol

import click


class Prompter(Protocol):
    assume_yes: bool

    def confirm(self, message: str, default: bool = False) -> bool: ...

    def choose(
        self, message: str, choices: list[str], default: Optional[str] = None
    ) -> str: ...

    def text(self, message: str, default: Optional[str] = None) -> str: ...

    def choose_many(
        self, message: str, choices: list[str], defaults: list[str]
    ) -> list[str]: ...


class ClickPrompter:
    assume_yes = False

    def confirm(self, message: str, default: bool = False) -> bool:
        return click.confirm(message, default=default)

    def choose(
        self, message: str, choices: list[str], default: Optional[str] = None
    ) -> str:
        return click.prompt(
            message,
            type=click.Choice(choices),
            default=default if default in choices else None,
            show_choices=True,
        )

    def text(self, message: str, default: Optional[str] = None) -> str:
        return click.prompt(message, default=default or "", show_default=bool(default))

    def choose_many(
        self, message: str, choices: list[str], defaults: list[str]
    ) -> list[str]:
        hint = ", ".join(choices)
        while True:
            raw = click.prompt(
                f"{message} (comma-separated: {hint})",
                default=",".join(defaults),
                show_default=bool(defaults),
            )
            picked = [item.strip() for item in raw.split(",") if item.strip()]
            unknown = [item for item in picked if item not in choices]
            if not unknown:
                return picked
            click.echo(f"Unknown choice(s): {', '.join(unknown)}", err=True)


class AssumeYesPrompter:
    """Non-interactive answers for ``--yes`` runs."""

    assume_yes = True

    def confirm(self, message: str, default: bool = False) -> bool:
        return True

    def choose(
        self, message: str, choices: list[str], default: Optional[str] = None
    ) -> str:
        if default is not None and default in choices:
            return default
        return choices[0]

    def text(self, message: str, default: Optional[str] = None) -> str:
        return default or ""

    def choose_many(
        self, message: str, choices: list[str], defaults: list[str]
    ) -> list[str]:
        return [item for item in defaults if item in choices]


def prompter_for(assume_yes: bool) -> Prompter:
    return AssumeYesPrompter() if assume_yes else ClickPrompter()
