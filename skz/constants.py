from typing import Final


VERSION_PREFIX: Final[str] = "skz v"

DEFAULT_REGISTRY: Final[str] = "github:Bind/skillz.sh"
DEFAULT_BRANCH: Final[str] = "main"
TEST_REGISTRY_ENV: Final[str] = "SKZ_TEST_REGISTRY"
CONFIG_SCHEMA_URL: Final[str] = "https://skillz.sh/schema.json"

CONFIG_FILENAME: Final[str] = "skz.json"
REGISTRY_FILENAME: Final[str] = "registry.json"
PACKAGE_JSON_FILENAME: Final[str] = "package.json"
OPENCODE_CONFIG_FILENAME: Final[str] = "opencode.json"
OPENCODE_CONFIG_SCHEMA_URL: Final[str] = "https://opencode.ai/config.json"
CLAUDE_SETTINGS_FILENAME: Final[str] = "settings.json"

SKILL_DESCRIPTOR: Final[str] = "SKILL.md"
AGENT_DESCRIPTOR: Final[str] = "agent.md"
BASE_UTIL_FILENAME: Final[str] = "utils.ts"
UTIL_SUFFIX: Final[str] = ".ts"

OPENCODE_DIRNAME: Final[str] = ".opencode"
OPENCODE_SKILLS_DIRNAME: Final[str] = "skill"
OPENCODE_COMMANDS_DIRNAME: Final[str] = "command"
OPENCODE_AGENTS_DIRNAME: Final[str] = "agent"
OPENCODE_UTILS_DIR: Final[str] = "./utils"

CLAUDE_DIRNAME: Final[str] = ".claude"
CLAUDE_SKILLS_DIRNAME: Final[str] = "skills"
CLAUDE_COMMANDS_DIRNAME: Final[str] = "commands"
CLAUDE_AGENTS_DIRNAME: Final[str] = "agents"

OPENCODE_GUIDELINES_FILENAME: Final[str] = "AGENTS.md"
CLAUDE_GUIDELINES_FILENAME: Final[str] = "CLAUDE.md"

DEFAULT_DOMAIN: Final[str] = "other"

CODE_FILE_SUFFIXES: Final[tuple[str, ...]] = (".ts", ".tsx", ".js", ".mjs")

HTTP_TIMEOUT_SECONDS: Final[float] = 30.0
USER_AGENT: Final[str] = "skz"
