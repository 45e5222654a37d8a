from pathlib import Path

import pytest

from skz.config import (
    ConfigStore,
    SkzConfig,
    default_config,
    default_registry,
    layout_for,
    resolve_target,
)
from skz.constants import CONFIG_SCHEMA_URL, DEFAULT_REGISTRY, TEST_REGISTRY_ENV
from skz.errors import ConfigNotFoundError, InvalidConfigSchemaError
from skz.models import InstallTarget
from skz.prompts import AssumeYesPrompter


def test_find_returns_none_without_config(tmp_path: Path) -> None:
    store = ConfigStore(tmp_path)
    assert store.find() is None
    assert not store.any_config_exists()
    with pytest.raises(ConfigNotFoundError):
        store.require()


def test_find_prefers_opencode_over_claude_and_legacy(tmp_path: Path, write_json) -> None:
    write_json(tmp_path / "skz.json", {"registries": ["github:a/legacy"]})
    write_json(tmp_path / ".claude" / "skz.json", {"registries": ["github:a/claude"]})
    write_json(tmp_path / ".opencode" / "skz.json", {"registries": ["github:a/opencode"]})

    found = ConfigStore(tmp_path).require()
    assert found.config.registries == ["github:a/opencode"]
    assert found.config_path == tmp_path / ".opencode" / "skz.json"
    assert found.utils_path == (tmp_path / ".opencode" / "utils").resolve()
    assert not found.is_legacy
    assert not found.is_claude


def test_find_skips_unparsable_config(tmp_path: Path, write_json) -> None:
    broken = tmp_path / ".opencode" / "skz.json"
    broken.parent.mkdir(parents=True)
    broken.write_text("{nope", encoding="utf-8")
    write_json(tmp_path / "skz.json", {"registries": ["github:a/legacy"], "utils": "./lib"})

    found = ConfigStore(tmp_path).require()
    assert found.is_legacy
    assert found.utils_path == (tmp_path / "lib").resolve()


def test_claude_config_is_flagged(tmp_path: Path, write_json) -> None:
    write_json(tmp_path / ".claude" / "skz.json", {"registries": ["github:a/b"]})
    found = ConfigStore(tmp_path).require()
    assert found.is_claude
    assert resolve_target(found, ConfigStore(tmp_path), AssumeYesPrompter()) == InstallTarget.CLAUDE


def test_schema_violation_raises(tmp_path: Path, write_json) -> None:
    write_json(tmp_path / ".opencode" / "skz.json", {"registries": "github:a/b"})
    with pytest.raises(InvalidConfigSchemaError) as exc_info:
        ConfigStore(tmp_path).find()
    assert "registries" in str(exc_info.value)


def test_payload_round_trip_omits_auto_target(tmp_path: Path) -> None:
    config = SkzConfig(registries=["github:a/b"], schema=CONFIG_SCHEMA_URL)
    assert config.to_payload() == {
        "$schema": CONFIG_SCHEMA_URL,
        "registries": ["github:a/b"],
        "utils": "./utils",
    }
    claude = SkzConfig(registries=["github:a/b"], target=InstallTarget.CLAUDE)
    assert claude.to_payload()["target"] == "claude"
    assert SkzConfig.from_payload(claude.to_payload(), tmp_path) == claude


def test_default_registry_honours_test_override(monkeypatch) -> None:
    assert default_registry() == DEFAULT_REGISTRY
    monkeypatch.setenv(TEST_REGISTRY_ENV, "http://127.0.0.1:9999")
    assert default_config().registries == ["http://127.0.0.1:9999"]
    assert default_config(InstallTarget.CLAUDE).target == InstallTarget.CLAUDE
    assert default_config(InstallTarget.OPENCODE).target == InstallTarget.AUTO


def test_write_creates_parent_directories(tmp_path: Path) -> None:
    store = ConfigStore(tmp_path)
    path = store.write(default_config(), store.path_for_target(InstallTarget.OPENCODE))
    assert path == tmp_path / ".opencode" / "skz.json"
    assert store.require().config.schema == CONFIG_SCHEMA_URL


def test_explicit_target_wins(tmp_path: Path, write_json) -> None:
    write_json(
        tmp_path / ".opencode" / "skz.json",
        {"registries": ["github:a/b"], "target": "claude"},
    )
    store = ConfigStore(tmp_path)
    found = store.require()
    target = resolve_target(found, store, AssumeYesPrompter())
    assert target == InstallTarget.CLAUDE
    assert layout_for(found, target, tmp_path).skills_dir == tmp_path / ".claude" / "skills"


def test_both_directories_prompt_for_target(
    tmp_path: Path, write_json, scripted_prompter
) -> None:
    write_json(tmp_path / ".opencode" / "skz.json", {"registries": ["github:a/b"]})
    (tmp_path / ".claude").mkdir()
    store = ConfigStore(tmp_path)
    found = store.require()

    prompter = scripted_prompter(choices=["claude"])
    assert resolve_target(found, store, prompter) == InstallTarget.CLAUDE
    assert len(prompter.asked) == 1
    assert resolve_target(found, store, AssumeYesPrompter()) == InstallTarget.OPENCODE


def test_opencode_layout_keeps_utils_path(tmp_path: Path, write_json) -> None:
    write_json(tmp_path / ".opencode" / "skz.json", {"registries": ["github:a/b"]})
    store = ConfigStore(tmp_path)
    found = store.require()
    target = resolve_target(found, store, AssumeYesPrompter())
    layout = layout_for(found, target, tmp_path)
    assert target == InstallTarget.OPENCODE
    assert layout.shares_utils
    assert layout.utils_dir == found.utils_path
