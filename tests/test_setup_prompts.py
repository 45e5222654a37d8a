import json
from pathlib import Path

import pytest
import yaml

from skz.prompts import AssumeYesPrompter
from skz.registry.models import SetupPrompt
from skz.setup_prompts import (
    UnknownPromptTypeError,
    default_answer,
    run_setup_prompts,
    write_setup_config,
)


PROMPTS = [
    SetupPrompt(name="team", type="input", message="Team key", default="ENG"),
    SetupPrompt(name="notify", type="confirm", message="Notify?"),
    SetupPrompt(
        name="shell",
        type="select",
        message="Shell",
        choices=[{"value": "bash"}, {"value": "zsh"}],
        default="fish",
    ),
    SetupPrompt(
        name="labels",
        type="checkbox",
        message="Labels",
        choices=[
            {"value": "bug", "checked": True},
            {"value": "feature"},
            {"value": "chore", "checked": True},
        ],
    ),
]


def test_defaults_per_prompt_type() -> None:
    assert [default_answer(prompt) for prompt in PROMPTS] == [
        "ENG",
        True,
        "bash",
        ["bug", "chore"],
    ]


def test_unknown_type_is_rejected() -> None:
    with pytest.raises(UnknownPromptTypeError):
        default_answer(SetupPrompt(name="x", type="slider", message="x"))


def test_assume_yes_takes_defaults_without_asking() -> None:
    answers = run_setup_prompts(PROMPTS, AssumeYesPrompter())
    assert answers == {
        "team": "ENG",
        "notify": True,
        "shell": "bash",
        "labels": ["bug", "chore"],
    }


def test_interactive_answers_use_prompter(scripted_prompter) -> None:
    prompter = scripted_prompter(
        confirms=[False], choices=["zsh"], texts=["OPS"], many=[["feature"]]
    )
    answers = run_setup_prompts(PROMPTS, prompter)
    assert answers == {
        "team": "OPS",
        "notify": False,
        "shell": "zsh",
        "labels": ["feature"],
    }
    assert prompter.asked == ["Team key", "Notify?", "Shell", "Labels"]


def test_yaml_config_file(tmp_path: Path) -> None:
    path = write_setup_config(tmp_path / "skill" / "config.yaml", {"shell": "zsh", "n": 2})
    assert yaml.safe_load(path.read_text(encoding="utf-8")) == {"shell": "zsh", "n": 2}


def test_json_config_file(tmp_path: Path) -> None:
    path = write_setup_config(tmp_path / "config.json", {"labels": ["bug"]})
    text = path.read_text(encoding="utf-8")
    assert json.loads(text) == {"labels": ["bug"]}
    assert text.endswith("\n")
