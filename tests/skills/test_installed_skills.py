from pathlib import Path

import pytest

from skz.errors import InvalidFrontmatterError
from skz.frontmatter import join_frontmatter, split_frontmatter
from skz.skills.parser import list_installed_skills


def _skill(root: Path, name: str, text: str) -> None:
    path = root / name / "SKILL.md"
    path.parent.mkdir(parents=True)
    path.write_text(text, encoding="utf-8")


def test_list_installed_skills_reads_frontmatter(tmp_path: Path) -> None:
    _skill(tmp_path, "tmux", "---\nname: tmux\ndescription: Drive tmux\nversion: 1.2.0\n---\nBody\n")
    _skill(tmp_path, "notes", "No frontmatter here.\n")
    (tmp_path / "empty").mkdir()

    skills = list_installed_skills(tmp_path)

    assert [skill.name for skill in skills] == ["notes", "tmux"]
    assert skills[0].description == ""
    assert skills[1].description == "Drive tmux"
    assert skills[1].version == "1.2.0"


def test_missing_skills_dir(tmp_path: Path) -> None:
    assert list_installed_skills(tmp_path / "nope") == []


def test_invalid_yaml_frontmatter_raises(tmp_path: Path) -> None:
    with pytest.raises(InvalidFrontmatterError) as excinfo:
        split_frontmatter("---\n: [oops\n---\nBody\n", tmp_path / "SKILL.md")
    assert excinfo.value.path == tmp_path / "SKILL.md"


def test_broken_skill_header_lists_without_description(tmp_path: Path) -> None:
    _skill(tmp_path, "tmux", "---\ndescription: [unclosed\n---\nBody\n")

    skills = list_installed_skills(tmp_path)

    assert [skill.name for skill in skills] == ["tmux"]
    assert skills[0].description == ""


def test_join_keeps_key_order() -> None:
    text = join_frontmatter({"name": "x", "description": "y"}, "Body\n")
    assert text == "---\nname: x\ndescription: y\n---\nBody\n"
    assert join_frontmatter({}, "Body\n") == "Body\n"
