from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from skz.config import ConfigStore, default_config
from skz.constants import BASE_UTIL_FILENAME
from skz.errors import SkzError
from skz.installer import SkillInstaller
from skz.layout import ProjectLayout, claude_layout, opencode_layout
from skz.models import InstallTarget
from skz.project.package_json import PackageJsonRepository
from skz.prompts import Prompter
from skz.registry.client import RegistryClient


@dataclass
class InitResult:
    target: InstallTarget
    aborted: bool = False
    created: list[Path] = field(default_factory=list)
    package_json: Optional[Path] = None
    package_json_created: bool = False
    warnings: list[str] = field(default_factory=list)


class InitService:
    def __init__(
        self,
        root: Path,
        prompter: Prompter,
        client: Optional[RegistryClient] = None,
    ) -> None:
        self.root = root
        self.prompter = prompter
        self.client = client or RegistryClient()
        self.store = ConfigStore(root)

    def detect_target(self, claude: bool) -> InstallTarget:
        if claude:
            return InstallTarget.CLAUDE
        if self.store.has_claude_dir() and not self.store.has_opencode_dir():
            return InstallTarget.CLAUDE
        return InstallTarget.OPENCODE

    def run(self, target: InstallTarget, confirm_overwrite: bool = True) -> InitResult:
        result = InitResult(target=target)
        config_path = self.store.path_for_target(target)

        if confirm_overwrite and self.store.any_config_exists():
            existing = next(
                path
                for path in (
                    self.store.opencode_config_path,
                    self.store.claude_config_path,
                    self.store.legacy_config_path,
                )
                if path.exists()
            )
            label = existing.relative_to(self.root).as_posix()
            if not self.prompter.confirm(f"{label} already exists. Overwrite?", default=False):
                result.aborted = True
                return result

        config = default_config(target)
        result.created.append(self.store.write(config, config_path))

        if target == InstallTarget.CLAUDE:
            layout = claude_layout(self.root)
        else:
            layout = opencode_layout(self.root, (config_path.parent / config.utils).resolve())
        self._create_dirs(layout, config.registries[0], result)

        package_json = PackageJsonRepository(self.root)
        existed = package_json.exists()
        package_json.ensure_module_project(self.root.name or "skills")
        result.package_json = package_json.path
        result.package_json_created = not existed
        return result

    def _create_dirs(self, layout: ProjectLayout, registry: str, result: InitResult) -> None:
        layout.skills_dir.mkdir(parents=True, exist_ok=True)
        result.created.append(layout.skills_dir)
        if layout.utils_dir is None:
            return

        layout.utils_dir.mkdir(parents=True, exist_ok=True)
        result.created.append(layout.utils_dir)
        try:
            content = self.client.fetch_util(registry, BASE_UTIL_FILENAME)
        except SkzError as exc:
            result.warnings.append(f"Could not fetch {BASE_UTIL_FILENAME}: {exc}")
            return
        result.created.append(SkillInstaller(layout).install_util(BASE_UTIL_FILENAME, content))
