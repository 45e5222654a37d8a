"""Move a legacy ``./skz.json`` project onto the ``.opencode/`` layout."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from skz.config import ConfigStore, FoundConfig, SkzConfig
from skz.constants import (
    CODE_FILE_SUFFIXES,
    CONFIG_SCHEMA_URL,
    OPENCODE_DIRNAME,
    OPENCODE_SKILLS_DIRNAME,
    OPENCODE_UTILS_DIR,
)
from skz.errors import InvalidConfigSchemaError, InvalidJsonFormatError
from skz.transforms import has_legacy_imports, migrate_legacy_imports
from skz.utils import is_under, read_json_safe


class MigrationState(str, Enum):
    NOT_NEEDED = "not-needed"
    CONFLICT = "conflict"
    NO_CONFIG = "no-config"
    READY = "ready"


@dataclass(frozen=True)
class MigrationPlan:
    state: MigrationState
    legacy_config: Path
    new_config: Path
    legacy_utils: Optional[Path] = None
    new_utils: Optional[Path] = None
    found: Optional[FoundConfig] = None


@dataclass
class MigrationResult:
    copied_utils: list[Path] = field(default_factory=list)
    removed: list[Path] = field(default_factory=list)
    created_config: Optional[Path] = None
    rewritten: list[Path] = field(default_factory=list)


class MigrateService:
    def __init__(self, root: Path) -> None:
        self.root = root
        self.store = ConfigStore(root)

    @property
    def new_utils_dir(self) -> Path:
        return self.root / OPENCODE_DIRNAME / OPENCODE_UTILS_DIR

    @property
    def skills_dir(self) -> Path:
        return self.root / OPENCODE_DIRNAME / OPENCODE_SKILLS_DIRNAME

    def plan(self) -> MigrationPlan:
        legacy = self.store.legacy_config_path
        new = self.store.opencode_config_path
        has_new, has_legacy = new.exists(), legacy.exists()

        if has_new and has_legacy:
            return MigrationPlan(MigrationState.CONFLICT, legacy, new)
        if has_new:
            return MigrationPlan(MigrationState.NOT_NEEDED, legacy, new)
        if not has_legacy:
            return MigrationPlan(MigrationState.NO_CONFIG, legacy, new)

        found = self._read_legacy(legacy)
        return MigrationPlan(
            MigrationState.READY,
            legacy,
            new,
            legacy_utils=found.utils_path,
            new_utils=self.new_utils_dir,
            found=found,
        )

    def _read_legacy(self, path: Path) -> FoundConfig:
        payload, error = read_json_safe(path)
        if error is not None:
            raise InvalidJsonFormatError(path, error)
        if not isinstance(payload, dict):
            raise InvalidConfigSchemaError(path, "expected a JSON object")
        config = SkzConfig.from_payload(payload, path)
        return FoundConfig(
            config=config,
            config_path=path,
            utils_path=(self.root / config.utils).resolve(),
            is_legacy=True,
            is_claude=False,
        )

    def _movable_utils(self, path: Path) -> bool:
        # Only a real subdirectory of the project, outside .opencode/, is moved.
        if not path.is_dir():
            return False
        if path.resolve() == self.root.resolve() or not is_under(path, self.root):
            return False
        return not is_under(path, self.root / OPENCODE_DIRNAME)

    def apply(self, plan: MigrationPlan) -> MigrationResult:
        if plan.state != MigrationState.READY or plan.found is None:
            raise ValueError(f"Nothing to migrate ({plan.state.value})")
        if not plan.found.is_legacy:
            raise ValueError(f"Not a legacy config: {plan.found.config_path}")

        result = MigrationResult()
        legacy_utils = plan.legacy_utils
        if legacy_utils is not None and self._movable_utils(legacy_utils):
            result.copied_utils = self._copy_tree(legacy_utils, self.new_utils_dir)
            shutil.rmtree(legacy_utils)
            result.removed.append(legacy_utils)

        old = plan.found.config
        config = SkzConfig(
            registries=old.registries,
            utils=OPENCODE_UTILS_DIR,
            target=old.target,
            schema=old.schema or CONFIG_SCHEMA_URL,
        )
        result.created_config = self.store.write(config, plan.new_config)

        plan.legacy_config.unlink()
        result.removed.append(plan.legacy_config)

        result.rewritten = self.rewrite_skill_imports()
        return result

    def rewrite_skill_imports(self) -> list[Path]:
        if not self.skills_dir.is_dir():
            return []
        rewritten: list[Path] = []
        for path in sorted(self.skills_dir.rglob("*")):
            if not path.is_file() or path.suffix not in CODE_FILE_SUFFIXES:
                continue
            content = path.read_text(encoding="utf-8")
            if not has_legacy_imports(content):
                continue
            path.write_text(migrate_legacy_imports(content), encoding="utf-8")
            rewritten.append(path)
        return rewritten

    @staticmethod
    def _copy_tree(source: Path, destination: Path) -> list[Path]:
        copied: list[Path] = []
        for path in sorted(source.rglob("*")):
            if not path.is_file():
                continue
            target = destination / path.relative_to(source)
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(path, target)
            copied.append(target)
        return copied
