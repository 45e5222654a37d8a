import json
from pathlib import Path

from skz.init_service import InitService
from skz.models import InstallTarget
from skz.prompts import AssumeYesPrompter


def test_opencode_init_creates_layout(tmp_path: Path, stub_client, registry_files, monkeypatch) -> None:
    monkeypatch.setenv("SKZ_TEST_REGISTRY", "https://registry.example.com")
    root = tmp_path / "demo"
    root.mkdir()
    client, _ = stub_client(registry_files)
    service = InitService(root, AssumeYesPrompter(), client)

    result = service.run(service.detect_target(claude=False))

    assert not result.aborted
    assert result.target == InstallTarget.OPENCODE
    assert result.created == [
        root / ".opencode" / "skz.json",
        root / ".opencode" / "skill",
        (root / ".opencode" / "utils").resolve(),
        (root / ".opencode" / "utils" / "utils.ts").resolve(),
    ]
    config = json.loads((root / ".opencode" / "skz.json").read_text(encoding="utf-8"))
    assert config["registries"] == ["https://registry.example.com"]
    assert "target" not in config
    package = json.loads((root / "package.json").read_text(encoding="utf-8"))
    assert package["name"] == "demo"
    assert package["type"] == "module"
    assert result.package_json_created


def test_claude_init_skips_utils(tmp_path: Path, stub_client, registry_files) -> None:
    client, sources = stub_client(registry_files)
    service = InitService(tmp_path, AssumeYesPrompter(), client)

    result = service.run(service.detect_target(claude=True))

    assert result.created == [tmp_path / ".claude" / "skz.json", tmp_path / ".claude" / "skills"]
    config = json.loads((tmp_path / ".claude" / "skz.json").read_text(encoding="utf-8"))
    assert config["target"] == "claude"
    assert sources == {}


def test_detects_claude_only_project(tmp_path: Path) -> None:
    (tmp_path / ".claude").mkdir()
    assert InitService(tmp_path, AssumeYesPrompter()).detect_target(False) == InstallTarget.CLAUDE
    (tmp_path / ".opencode").mkdir()
    assert InitService(tmp_path, AssumeYesPrompter()).detect_target(False) == InstallTarget.OPENCODE


def test_declined_overwrite_aborts(tmp_path: Path, write_json, scripted_prompter) -> None:
    write_json(tmp_path / "skz.json", {"registries": ["github:a/b"]})
    prompter = scripted_prompter(confirms=[False])

    result = InitService(tmp_path, prompter).run(InstallTarget.OPENCODE)

    assert result.aborted
    assert prompter.asked == ["skz.json already exists. Overwrite?"]
    assert not (tmp_path / ".opencode").exists()


def test_unreachable_util_is_a_warning(tmp_path: Path, stub_client, monkeypatch) -> None:
    monkeypatch.setenv("SKZ_TEST_REGISTRY", "https://registry.example.com")
    client, _ = stub_client({})

    result = InitService(tmp_path, AssumeYesPrompter(), client).run(InstallTarget.OPENCODE)

    assert len(result.warnings) == 1
    assert result.warnings[0].startswith("Could not fetch utils.ts")
    assert (tmp_path / ".opencode" / "utils").is_dir()
