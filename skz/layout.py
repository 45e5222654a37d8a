from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from skz.constants import (
    CLAUDE_AGENTS_DIRNAME,
    CLAUDE_COMMANDS_DIRNAME,
    CLAUDE_DIRNAME,
    CLAUDE_SKILLS_DIRNAME,
    OPENCODE_AGENTS_DIRNAME,
    OPENCODE_COMMANDS_DIRNAME,
    OPENCODE_DIRNAME,
    OPENCODE_SKILLS_DIRNAME,
)
from skz.models import InstallTarget


@dataclass(frozen=True)
class ProjectLayout:
    """Destination directories for one install target inside a project."""

    root: Path
    target: InstallTarget
    utils_dir: Optional[Path] = None

    @property
    def is_claude(self) -> bool:
        return self.target == InstallTarget.CLAUDE

    @property
    def base_dir(self) -> Path:
        dirname = CLAUDE_DIRNAME if self.is_claude else OPENCODE_DIRNAME
        return self.root / dirname

    @property
    def skills_dir(self) -> Path:
        dirname = CLAUDE_SKILLS_DIRNAME if self.is_claude else OPENCODE_SKILLS_DIRNAME
        return self.base_dir / dirname

    @property
    def commands_dir(self) -> Path:
        dirname = (
            CLAUDE_COMMANDS_DIRNAME if self.is_claude else OPENCODE_COMMANDS_DIRNAME
        )
        return self.base_dir / dirname

    @property
    def agents_dir(self) -> Path:
        dirname = CLAUDE_AGENTS_DIRNAME if self.is_claude else OPENCODE_AGENTS_DIRNAME
        return self.base_dir / dirname

    @property
    def shares_utils(self) -> bool:
        return not self.is_claude and self.utils_dir is not None

    def skill_dir(self, name: str) -> Path:
        return self.skills_dir / name


def opencode_layout(root: Path, utils_dir: Optional[Path] = None) -> ProjectLayout:
    return ProjectLayout(root=root, target=InstallTarget.OPENCODE, utils_dir=utils_dir)


def claude_layout(root: Path) -> ProjectLayout:
    return ProjectLayout(root=root, target=InstallTarget.CLAUDE)
