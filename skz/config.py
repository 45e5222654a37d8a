"""Locate, read and write the project's ``skz.json``."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from skz.constants import (
    CLAUDE_DIRNAME,
    CONFIG_FILENAME,
    CONFIG_SCHEMA_URL,
    DEFAULT_REGISTRY,
    OPENCODE_DIRNAME,
    OPENCODE_UTILS_DIR,
    TEST_REGISTRY_ENV,
)
from skz.errors import ConfigNotFoundError, InvalidConfigSchemaError
from skz.layout import ProjectLayout, claude_layout, opencode_layout
from skz.models import InstallTarget
from skz.prompts import Prompter
from skz.schema import CONFIG_SCHEMA, first_schema_error
from skz.utils import read_json_safe, write_json


@dataclass(frozen=True)
class SkzConfig:
    registries: list[str]
    utils: str = OPENCODE_UTILS_DIR
    target: InstallTarget = InstallTarget.AUTO
    schema: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any], path: Path) -> "SkzConfig":
        error = first_schema_error(CONFIG_SCHEMA, payload)
        if error is not None:
            raise InvalidConfigSchemaError(path, error)
        return cls(
            registries=list(payload["registries"]),
            utils=str(payload.get("utils") or OPENCODE_UTILS_DIR),
            target=InstallTarget(payload.get("target", InstallTarget.AUTO.value)),
            schema=payload.get("$schema"),
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.schema:
            payload["$schema"] = self.schema
        payload["registries"] = list(self.registries)
        payload["utils"] = self.utils
        if self.target != InstallTarget.AUTO:
            payload["target"] = self.target.value
        return payload


@dataclass(frozen=True)
class FoundConfig:
    config: SkzConfig
    config_path: Path
    utils_path: Path
    is_legacy: bool
    is_claude: bool


def default_registry() -> str:
    return os.environ.get(TEST_REGISTRY_ENV) or DEFAULT_REGISTRY


def default_config(target: InstallTarget = InstallTarget.OPENCODE) -> SkzConfig:
    return SkzConfig(
        schema=CONFIG_SCHEMA_URL,
        registries=[default_registry()],
        utils=OPENCODE_UTILS_DIR,
        target=InstallTarget.CLAUDE if target == InstallTarget.CLAUDE else InstallTarget.AUTO,
    )


class ConfigStore:
    """Probes the three config locations of a project root.

    Priority: ``.opencode/skz.json``, ``.claude/skz.json``, legacy ``./skz.json``.
    """

    def __init__(self, root: Optional[Path] = None) -> None:
        self._root = root or Path.cwd()

    @property
    def root(self) -> Path:
        return self._root

    @property
    def opencode_config_path(self) -> Path:
        return self.root / OPENCODE_DIRNAME / CONFIG_FILENAME

    @property
    def claude_config_path(self) -> Path:
        return self.root / CLAUDE_DIRNAME / CONFIG_FILENAME

    @property
    def legacy_config_path(self) -> Path:
        return self.root / CONFIG_FILENAME

    def path_for_target(self, target: InstallTarget) -> Path:
        if target == InstallTarget.CLAUDE:
            return self.claude_config_path
        return self.opencode_config_path

    def find(self) -> Optional[FoundConfig]:
        candidates = (
            (self.opencode_config_path, False, False),
            (self.claude_config_path, False, True),
            (self.legacy_config_path, True, False),
        )
        for path, is_legacy, is_claude in candidates:
            payload, error = read_json_safe(path)
            if error is not None or not isinstance(payload, dict):
                continue
            config = SkzConfig.from_payload(payload, path)
            return FoundConfig(
                config=config,
                config_path=path,
                utils_path=(path.parent / config.utils).resolve(),
                is_legacy=is_legacy,
                is_claude=is_claude,
            )
        return None

    def require(self) -> FoundConfig:
        found = self.find()
        if found is None:
            raise ConfigNotFoundError()
        return found

    def any_config_exists(self) -> bool:
        return any(
            path.exists()
            for path in (
                self.opencode_config_path,
                self.claude_config_path,
                self.legacy_config_path,
            )
        )

    def write(self, config: SkzConfig, path: Path) -> Path:
        write_json(path, config.to_payload())
        return path

    def has_opencode_dir(self) -> bool:
        return (self.root / OPENCODE_DIRNAME).is_dir()

    def has_claude_dir(self) -> bool:
        return (self.root / CLAUDE_DIRNAME).is_dir()


def resolve_target(
    found: FoundConfig, store: ConfigStore, prompter: Prompter
) -> InstallTarget:
    """Pick where skills go for this invocation."""
    preferred = found.config.target
    if preferred == InstallTarget.CLAUDE:
        return InstallTarget.CLAUDE
    if preferred == InstallTarget.OPENCODE:
        return InstallTarget.OPENCODE
    if found.is_claude:
        return InstallTarget.CLAUDE

    has_opencode = store.has_opencode_dir() or found.is_legacy
    has_claude = store.has_claude_dir()
    if has_opencode and has_claude:
        answer = prompter.choose(
            "Detected both OpenCode and Claude directories. Install skills to",
            [InstallTarget.OPENCODE.value, InstallTarget.CLAUDE.value],
            default=InstallTarget.OPENCODE.value,
        )
        return InstallTarget(answer)
    if has_claude:
        return InstallTarget.CLAUDE
    return InstallTarget.OPENCODE


def layout_for(found: FoundConfig, target: InstallTarget, root: Path) -> ProjectLayout:
    if target == InstallTarget.CLAUDE:
        return claude_layout(root)
    return opencode_layout(root, utils_dir=found.utils_path)
