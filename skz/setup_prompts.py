"""Run a skill's post-install setup prompts and persist the answers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from skz.prompts import Prompter
from skz.registry.models import SetupPrompt
from skz.utils import write_text


class UnknownPromptTypeError(ValueError):
    def __init__(self, prompt: SetupPrompt) -> None:
        super().__init__(f"Unknown prompt type '{prompt.type}' for '{prompt.name}'")


def _choice_values(prompt: SetupPrompt) -> list[str]:
    return [str(choice["value"]) for choice in prompt.choices]


def default_answer(prompt: SetupPrompt) -> Any:
    if prompt.type == "input":
        return prompt.default if isinstance(prompt.default, str) else ""
    if prompt.type == "confirm":
        return prompt.default if isinstance(prompt.default, bool) else True
    if prompt.type == "select":
        values = _choice_values(prompt)
        if isinstance(prompt.default, str) and prompt.default in values:
            return prompt.default
        return values[0] if values else ""
    if prompt.type == "checkbox":
        return [str(choice["value"]) for choice in prompt.choices if choice.get("checked")]
    raise UnknownPromptTypeError(prompt)


def ask(prompt: SetupPrompt, prompter: Prompter) -> Any:
    if prompter.assume_yes:
        return default_answer(prompt)

    default = default_answer(prompt)
    if prompt.type == "input":
        return prompter.text(prompt.message, default=default or None)
    if prompt.type == "confirm":
        return prompter.confirm(prompt.message, default=default)
    if prompt.type == "select":
        return prompter.choose(prompt.message, _choice_values(prompt), default=default or None)
    return prompter.choose_many(prompt.message, _choice_values(prompt), default)


def run_setup_prompts(prompts: list[SetupPrompt], prompter: Prompter) -> dict[str, Any]:
    return {prompt.name: ask(prompt, prompter) for prompt in prompts}


def render_answers(path: Path, answers: dict[str, Any]) -> str:
    if path.suffix.lower() in (".yaml", ".yml"):
        return yaml.dump(answers, default_flow_style=False, sort_keys=False)
    return json.dumps(answers, indent=2) + "\n"


def write_setup_config(path: Path, answers: dict[str, Any]) -> Path:
    return write_text(path, render_answers(path, answers))
