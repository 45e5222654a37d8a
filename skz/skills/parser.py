"""Read installed skills from a skills directory."""

from __future__ import annotations

from pathlib import Path

from skz.constants import SKILL_DESCRIPTOR
from skz.errors import InvalidFrontmatterError
from skz.frontmatter import split_frontmatter
from skz.skills.models import InstalledSkill


def parse_installed_skill(skill_dir: Path) -> InstalledSkill:
    path = skill_dir / SKILL_DESCRIPTOR
    text = path.read_text(encoding="utf-8")
    try:
        raw, _ = split_frontmatter(text, path)
    except InvalidFrontmatterError:
        # Listing only shows descriptions; a broken header just has none.
        raw = {}
    return InstalledSkill(
        name=skill_dir.name,
        path=skill_dir,
        description=str(raw.get("description", "") or ""),
        version=str(raw.get("version", "") or ""),
    )


def list_installed_skills(skills_dir: Path) -> list[InstalledSkill]:
    if not skills_dir.is_dir():
        return []
    return [
        parse_installed_skill(path)
        for path in sorted(skills_dir.iterdir())
        if path.is_dir() and (path / SKILL_DESCRIPTOR).is_file()
    ]
