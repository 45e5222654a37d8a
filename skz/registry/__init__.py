from skz.registry.client import RegistryClient
from skz.registry.models import (
    Registry,
    RegistryAgent,
    RegistrySkill,
    SetupPrompt,
    SkillFiles,
    SkillSetup,
)
from skz.registry.sources import (
    GitHubApiSource,
    GitHubRawSource,
    HttpsCdnSource,
    RegistrySource,
    parse_registry_url,
)

__all__ = [
    "GitHubApiSource",
    "GitHubRawSource",
    "HttpsCdnSource",
    "Registry",
    "RegistryAgent",
    "RegistryClient",
    "RegistrySkill",
    "RegistrySource",
    "SetupPrompt",
    "SkillFiles",
    "SkillSetup",
    "parse_registry_url",
]
