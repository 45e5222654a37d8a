from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar


T = TypeVar("T")


class InstallTarget(str, Enum):
    OPENCODE = "opencode"
    CLAUDE = "claude"
    AUTO = "auto"


class FileDestination(str, Enum):
    SKILL = "skill"
    COMMAND = "command"
    AGENT = "agent"


@dataclass(frozen=True)
class FileToInstall:
    relative_path: str
    content: str
    destination: FileDestination = FileDestination.SKILL


@dataclass(frozen=True)
class SkillFileSet:
    files: list[FileToInstall]
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class BatchFailure:
    item: str
    reason: str

    def describe(self) -> str:
        return f"{self.item}: {self.reason}"


@dataclass
class BatchResult(Generic[T]):
    succeeded: list[T] = field(default_factory=list)
    failed: list[BatchFailure] = field(default_factory=list)

    def add_failure(self, item: str, reason: str | Exception) -> None:
        self.failed.append(BatchFailure(item=item, reason=str(reason)))
