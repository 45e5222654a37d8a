import json
from pathlib import Path

import pytest

from skz.errors import InvalidJsonFormatError
from skz.migrate_service import MigrateService, MigrationState


def _legacy_project(root: Path, write_json) -> None:
    write_json(root / "skz.json", {"registries": ["github:a/b"], "target": "opencode"})
    (root / "utils").mkdir(parents=True)
    (root / "utils" / "utils.ts").write_text("export {};\n", encoding="utf-8")
    skill_dir = root / ".opencode" / "skill" / "tmux"
    skill_dir.mkdir(parents=True)
    (skill_dir / "run.ts").write_text('import { run } from "../../../utils/utils";\n', encoding="utf-8")
    (skill_dir / "SKILL.md").write_text("See ../../../utils/ for helpers\n", encoding="utf-8")


def test_plan_states(tmp_path: Path, write_json) -> None:
    service = MigrateService(tmp_path)
    assert service.plan().state == MigrationState.NO_CONFIG

    write_json(tmp_path / "skz.json", {"registries": ["github:a/b"]})
    assert service.plan().state == MigrationState.READY

    write_json(tmp_path / ".opencode" / "skz.json", {"registries": ["github:a/b"]})
    assert service.plan().state == MigrationState.CONFLICT

    (tmp_path / "skz.json").unlink()
    assert service.plan().state == MigrationState.NOT_NEEDED


def test_apply_moves_config_utils_and_imports(tmp_path: Path, write_json) -> None:
    _legacy_project(tmp_path, write_json)
    service = MigrateService(tmp_path)
    plan = service.plan()

    result = service.apply(plan)

    assert not (tmp_path / "skz.json").exists()
    assert not (tmp_path / "utils").exists()
    assert (tmp_path / ".opencode" / "utils" / "utils.ts").is_file()
    config = json.loads((tmp_path / ".opencode" / "skz.json").read_text(encoding="utf-8"))
    assert config["utils"] == "./utils"
    assert config["target"] == "opencode"
    assert config["$schema"] == "https://skillz.sh/schema.json"

    run_ts = tmp_path / ".opencode" / "skill" / "tmux" / "run.ts"
    assert result.rewritten == [run_ts]
    assert run_ts.read_text(encoding="utf-8") == 'import { run } from "../../utils/utils";\n'
    skill_md = tmp_path / ".opencode" / "skill" / "tmux" / "SKILL.md"
    assert "../../../utils/" in skill_md.read_text(encoding="utf-8")


def test_apply_without_utils_dir(tmp_path: Path, write_json) -> None:
    write_json(tmp_path / "skz.json", {"registries": ["github:a/b"]})
    service = MigrateService(tmp_path)

    result = service.apply(service.plan())

    assert result.copied_utils == []
    assert result.removed == [tmp_path / "skz.json"]
    assert result.rewritten == []


def test_apply_refuses_when_not_ready(tmp_path: Path) -> None:
    service = MigrateService(tmp_path)
    with pytest.raises(ValueError):
        service.apply(service.plan())


def test_claude_config_does_not_shadow_legacy_config(tmp_path: Path, write_json) -> None:
    write_json(
        tmp_path / ".claude" / "skz.json",
        {"registries": ["https://claude.example"], "target": "claude"},
    )
    write_json(tmp_path / "skz.json", {"registries": ["https://legacy.example"]})
    service = MigrateService(tmp_path)

    plan = service.plan()
    assert plan.state == MigrationState.READY
    assert plan.found is not None
    assert plan.found.config_path == tmp_path / "skz.json"
    assert plan.found.is_legacy

    service.apply(plan)

    config = json.loads((tmp_path / ".opencode" / "skz.json").read_text(encoding="utf-8"))
    assert config["registries"] == ["https://legacy.example"]
    assert "target" not in config
    claude = json.loads((tmp_path / ".claude" / "skz.json").read_text(encoding="utf-8"))
    assert claude["registries"] == ["https://claude.example"]


def test_invalid_legacy_config_is_reported(tmp_path: Path) -> None:
    (tmp_path / "skz.json").write_text("{broken", encoding="utf-8")
    with pytest.raises(InvalidJsonFormatError):
        MigrateService(tmp_path).plan()


@pytest.mark.parametrize("utils", [".", "../shared"])
def test_utils_outside_a_project_subdirectory_are_left_alone(
    tmp_path: Path, write_json, utils: str
) -> None:
    root = tmp_path / "project"
    write_json(root / "skz.json", {"registries": ["github:a/b"], "utils": utils})
    (root / "README.md").write_text("keep\n", encoding="utf-8")
    shared = tmp_path / "shared"
    shared.mkdir()
    (shared / "utils.ts").write_text("export {};\n", encoding="utf-8")
    service = MigrateService(root)

    result = service.apply(service.plan())

    assert result.copied_utils == []
    assert result.removed == [root / "skz.json"]
    assert (root / "README.md").is_file()
    assert (shared / "utils.ts").is_file()
    assert (root / ".opencode" / "skz.json").is_file()
