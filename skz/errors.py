from pathlib import Path
from typing import Optional


class SkzError(Exception):
    """Base user-facing application error."""


class SkzFileError(SkzError):
    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class InvalidJsonFormatError(SkzFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid JSON format ({detail})")


class InvalidConfigSchemaError(SkzFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid config schema ({detail})")


class ConfigNotFoundError(SkzError):
    def __init__(self) -> None:
        super().__init__("No skz.json found. Run `skz init` first.")


class RegistryError(SkzError):
    """Failure tied to a registry URL and, usually, a path inside it."""

    def __init__(self, registry: str, path: Optional[str], message: str) -> None:
        self.registry = registry
        self.path = path
        self.message = message
        super().__init__(message)


class InvalidRegistryUrlError(RegistryError):
    def __init__(self, registry: str) -> None:
        super().__init__(
            registry=registry,
            path=None,
            message=(
                f"Invalid registry format: {registry}. "
                "Expected: github:owner/repo, gh:owner/repo or https://..."
            ),
        )


class RegistryFileNotFoundError(RegistryError):
    def __init__(self, registry: str, path: str) -> None:
        super().__init__(
            registry=registry, path=path, message=f"File not found: {path} in {registry}"
        )


class RegistryFetchError(RegistryError):
    def __init__(
        self, registry: str, path: str, status: Optional[int], detail: str = ""
    ) -> None:
        self.status = status
        status_text = f"{status}" if status is not None else "network error"
        suffix = f" {detail}" if detail else ""
        super().__init__(
            registry=registry,
            path=path,
            message=f"Failed to fetch {path} from {registry}: {status_text}{suffix}",
        )


class ToolingUnavailableError(RegistryError):
    def __init__(self, registry: str, path: Optional[str], remediation: str) -> None:
        self.remediation = remediation
        super().__init__(registry=registry, path=path, message=remediation)


class InvalidRegistryError(RegistryError):
    def __init__(self, registry: str, detail: str, path: str = "registry.json") -> None:
        self.detail = detail
        super().__init__(
            registry=registry,
            path=path,
            message=f"Invalid registry {registry}: {detail}",
        )


class RequiredFileMissingError(SkzError):
    def __init__(self, skill: str, path: str, cause: Exception) -> None:
        self.skill = skill
        self.path = path
        self.cause = cause
        super().__init__(f"Required file {path} missing for '{skill}': {cause}")


class NameNotFoundError(SkzError):
    def __init__(self, kind: str, name: str, available: list[str]) -> None:
        self.kind = kind
        self.name = name
        self.available = available
        listing = ", ".join(available) if available else "(none)"
        super().__init__(
            f"{kind.capitalize()} not found: {name}\nAvailable {kind}s: {listing}"
        )


class AgentNotFoundError(SkzError):
    def __init__(self, name: str, location: str) -> None:
        self.name = name
        self.location = location
        super().__init__(f"Agent '{name}' not found in {location} agents.")


class InvalidFrontmatterError(SkzFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid frontmatter ({detail})")
