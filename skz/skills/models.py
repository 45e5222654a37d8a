"""Installed skill models."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class InstalledSkill:
    name: str
    path: Path
    description: str = ""
    version: str = ""
