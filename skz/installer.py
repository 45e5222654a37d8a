import shutil
from pathlib import Path

from skz.constants import SKILL_DESCRIPTOR
from skz.layout import ProjectLayout
from skz.models import FileDestination, FileToInstall
from skz.registry.client import util_file_name
from skz.utils import write_text


class SkillInstaller:
    """Writes fetched files into one project layout."""

    def __init__(self, layout: ProjectLayout) -> None:
        self.layout = layout

    def destination_root(self, skill_name: str, destination: FileDestination) -> Path:
        if destination == FileDestination.COMMAND:
            return self.layout.commands_dir
        if destination == FileDestination.AGENT:
            return self.layout.agents_dir
        return self.layout.skill_dir(skill_name)

    def install(self, skill_name: str, files: list[FileToInstall]) -> list[Path]:
        skill_dir = self.layout.skill_dir(skill_name)
        if skill_dir.exists():
            shutil.rmtree(skill_dir)

        written: list[Path] = []
        for item in files:
            root = self.destination_root(skill_name, item.destination)
            written.append(write_text(root / item.relative_path, item.content))
        return written

    def skill_exists(self, skill_name: str) -> bool:
        return (self.layout.skill_dir(skill_name) / SKILL_DESCRIPTOR).is_file()

    def util_path(self, util_name: str) -> Path:
        if self.layout.utils_dir is None:
            raise ValueError("This layout has no shared utils directory")
        return self.layout.utils_dir / util_file_name(util_name)

    def util_exists(self, util_name: str) -> bool:
        return self.layout.utils_dir is not None and self.util_path(util_name).is_file()

    def install_util(self, util_name: str, content: str) -> Path:
        return write_text(self.util_path(util_name), content)

    def agent_path(self, agent_name: str) -> Path:
        return self.layout.agents_dir / f"{agent_name}.md"

    def agent_exists(self, agent_name: str) -> bool:
        return self.agent_path(agent_name).is_file()

    def install_agent(self, files: list[FileToInstall]) -> list[Path]:
        return [
            write_text(self.layout.agents_dir / item.relative_path, item.content)
            for item in files
        ]
