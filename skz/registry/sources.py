"""Registry URL schemes.

A configured registry string is parsed once into one of three sources:

- ``github:owner/repo[#ref]`` -> :class:`GitHubRawSource` (raw.githubusercontent.com
  with a cache-busting query parameter)
- ``gh:owner/repo[#ref]`` -> :class:`GitHubApiSource` (GitHub contents API through
  the authenticated ``gh`` CLI)
- ``https://...`` / ``http://...`` -> :class:`HttpsCdnSource` (plain base URL
  concatenation, no cache-busting)
"""

from __future__ import annotations

import re
import shutil
import subprocess
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from skz.constants import DEFAULT_BRANCH, HTTP_TIMEOUT_SECONDS, USER_AGENT
from skz.errors import (
    InvalidRegistryUrlError,
    RegistryError,
    RegistryFetchError,
    RegistryFileNotFoundError,
    ToolingUnavailableError,
)

_GITHUB_RE = re.compile(r"^(github|gh):([^/\s]+)/([^#\s]+?)(?:#(\S+))?$")
_GH_STATUS_RE = re.compile(r"HTTP (\d{3})")

GH_INSTALL_HINT = (
    "GitHub CLI (gh) is required for gh: registries. "
    "Install it from https://cli.github.com/ and run `gh auth login`."
)
GH_AUTH_HINT = "GitHub CLI is not authenticated. Run `gh auth login` and retry."


def http_get_text(registry: str, path: str, url: str) -> str:
    request = Request(url, headers={"User-Agent": USER_AGENT})
    try:
        with urlopen(request, timeout=HTTP_TIMEOUT_SECONDS) as response:
            return response.read().decode("utf-8")
    except HTTPError as exc:
        if exc.code == 404:
            raise RegistryFileNotFoundError(registry, path) from exc
        raise RegistryFetchError(registry, path, exc.code, str(exc.reason)) from exc
    except URLError as exc:
        raise RegistryFetchError(registry, path, None, str(exc.reason)) from exc
    except OSError as exc:
        raise RegistryFetchError(registry, path, None, str(exc)) from exc


class RegistrySource(ABC):
    url: str

    @abstractmethod
    def fetch(self, path: str) -> str:
        """Return the text content of ``path`` relative to the registry root."""


@dataclass(frozen=True)
class HttpsCdnSource(RegistrySource):
    url: str
    base_url: str

    def fetch(self, path: str) -> str:
        return http_get_text(self.url, path, f"{self.base_url}/{path}")


@dataclass(frozen=True)
class GitHubRawSource(RegistrySource):
    url: str
    owner: str
    repo: str
    ref: str = DEFAULT_BRANCH
    clock: Callable[[], float] = field(default=time.time, compare=False, repr=False)

    @property
    def base_url(self) -> str:
        return f"https://raw.githubusercontent.com/{self.owner}/{self.repo}/{self.ref}"

    def fetch(self, path: str) -> str:
        cache_buster = int(self.clock() * 1000)
        return http_get_text(
            self.url, path, f"{self.base_url}/{path}?_={cache_buster}"
        )


@dataclass(frozen=True)
class GitHubApiSource(RegistrySource):
    url: str
    owner: str
    repo: str
    ref: str = DEFAULT_BRANCH
    runner: Callable[..., subprocess.CompletedProcess] = field(
        default=subprocess.run, compare=False, repr=False
    )
    which: Callable[[str], Optional[str]] = field(
        default=shutil.which, compare=False, repr=False
    )

    def endpoint(self, path: str) -> str:
        return f"repos/{self.owner}/{self.repo}/contents/{path}?ref={self.ref}"

    def fetch(self, path: str) -> str:
        executable = self.which("gh")
        if executable is None:
            raise ToolingUnavailableError(self.url, path, GH_INSTALL_HINT)

        try:
            result = self.runner(
                [
                    executable,
                    "api",
                    "-H",
                    "Accept: application/vnd.github.raw",
                    self.endpoint(path),
                ],
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise ToolingUnavailableError(
                self.url, path, f"{GH_INSTALL_HINT} ({exc})"
            ) from exc

        if result.returncode == 0:
            return result.stdout
        raise self._failure(path, result.returncode, result.stderr or "")

    def _failure(self, path: str, returncode: int, stderr: str) -> RegistryError:
        lowered = stderr.lower()
        if "http 404" in lowered or "not found" in lowered:
            return RegistryFileNotFoundError(self.url, path)
        if returncode == 4 or "auth login" in lowered or "authentication" in lowered:
            return ToolingUnavailableError(self.url, path, GH_AUTH_HINT)
        match = _GH_STATUS_RE.search(stderr)
        status = int(match.group(1)) if match else None
        return RegistryFetchError(self.url, path, status, stderr.strip())


def parse_registry_url(url: str) -> RegistrySource:
    if url.startswith("https://") or url.startswith("http://"):
        return HttpsCdnSource(url=url, base_url=url.rstrip("/"))

    match = _GITHUB_RE.match(url)
    if match:
        scheme, owner, repo, ref = match.groups()
        ref = ref or DEFAULT_BRANCH
        if scheme == "gh":
            return GitHubApiSource(url=url, owner=owner, repo=repo, ref=ref)
        return GitHubRawSource(url=url, owner=owner, repo=repo, ref=ref)

    raise InvalidRegistryUrlError(url)
