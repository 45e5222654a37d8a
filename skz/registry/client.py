"""Fetch registry documents and files across the supported URL schemes."""

from __future__ import annotations

import json
from typing import Any, Callable, Iterable, Optional

from skz.constants import REGISTRY_FILENAME, UTIL_SUFFIX
from skz.errors import InvalidRegistryError, RegistryError
from skz.models import BatchResult
from skz.registry.models import Registry, RegistryAgent, RegistrySkill, parse_registry
from skz.registry.sources import RegistrySource, parse_registry_url
from skz.schema import REGISTRY_SCHEMA, first_schema_error


def join_registry_path(base_path: Optional[str], path: str) -> str:
    if not base_path:
        return path
    return f"{base_path.strip('/')}/{path.lstrip('/')}"


class RegistryClient:
    def __init__(
        self,
        source_factory: Callable[[str], RegistrySource] = parse_registry_url,
    ) -> None:
        self._source_factory = source_factory
        self._sources: dict[str, RegistrySource] = {}

    def source_for(self, url: str) -> RegistrySource:
        source = self._sources.get(url)
        if source is None:
            source = self._source_factory(url)
            self._sources[url] = source
        return source

    def fetch_file(self, url: str, path: str, base_path: Optional[str] = None) -> str:
        return self.source_for(url).fetch(join_registry_path(base_path, path))

    def fetch_util(self, url: str, util_name: str, base_path: Optional[str] = None) -> str:
        return self.fetch_file(url, f"utils/{util_file_name(util_name)}", base_path)

    def fetch_json(self, url: str, path: str, base_path: Optional[str] = None) -> Any:
        content = self.fetch_file(url, path, base_path)
        try:
            return json.loads(content)
        except json.JSONDecodeError as exc:
            raise InvalidRegistryError(url, f"invalid JSON in {path} ({exc})", path=path) from exc

    def fetch_registry(self, url: str) -> Registry:
        payload = self.fetch_json(url, REGISTRY_FILENAME)

        if not isinstance(payload, dict):
            raise InvalidRegistryError(url, "registry.json must be a JSON object")
        if "version" not in payload:
            raise InvalidRegistryError(url, "registry v2 format required")

        error = first_schema_error(REGISTRY_SCHEMA, payload)
        if error is not None:
            raise InvalidRegistryError(url, error)
        return parse_registry(url, payload)

    def fetch_all(self, urls: Iterable[str]) -> BatchResult[Registry]:
        result: BatchResult[Registry] = BatchResult()
        for url in urls:
            try:
                result.succeeded.append(self.fetch_registry(url))
            except RegistryError as exc:
                result.add_failure(url, exc)
        return result


def util_file_name(util_name: str) -> str:
    return util_name if util_name.endswith(UTIL_SUFFIX) else f"{util_name}{UTIL_SUFFIX}"


def all_skills(registries: BatchResult[Registry]) -> list[RegistrySkill]:
    return [skill for registry in registries.succeeded for skill in registry.skills]


def all_agents(registries: BatchResult[Registry]) -> list[RegistryAgent]:
    return [agent for registry in registries.succeeded for agent in registry.agents]
