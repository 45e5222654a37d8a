"""Per-target content rewrites applied to fetched registry files."""

from __future__ import annotations

import re

from skz.constants import CLAUDE_GUIDELINES_FILENAME, OPENCODE_GUIDELINES_FILENAME

_CURRENT_UTILS_IMPORT_RE = re.compile(r"""from ["']\.\./\.\./utils/""")
_LEGACY_UTILS_IMPORT_RE = re.compile(r"""from ["']\.\./\.\./\.\./utils/""")
_ALLOWED_TOOLS_RE = re.compile(r"^allowed-tools: .*\n", re.MULTILINE)
_AGENT_FIELD_RE = re.compile(r"^agent: .*\n", re.MULTILINE)

LEGACY_UTILS_MARKER = "../../../utils/"


def rewrite_imports_for_layout(content: str, is_legacy: bool) -> str:
    """Point shared-utils imports at the installed utils directory.

    Sources import ``../../utils/``. Skills land in ``.opencode/skill/<name>/``,
    so the current layout (utils at ``.opencode/utils/``) needs no change and the
    legacy layout (utils at ``./utils/``) needs one more level.
    """
    if not is_legacy:
        return content
    return _CURRENT_UTILS_IMPORT_RE.sub('from "../../../utils/', content)


def migrate_legacy_imports(content: str) -> str:
    return _LEGACY_UTILS_IMPORT_RE.sub('from "../../utils/', content)


def has_legacy_imports(content: str) -> bool:
    return LEGACY_UTILS_MARKER in content


def transform_for_opencode(content: str) -> str:
    # OpenCode manages tool permissions in opencode.json.
    return _ALLOWED_TOOLS_RE.sub("", content, count=1)


def transform_for_claude(content: str) -> str:
    result = content.replace(OPENCODE_GUIDELINES_FILENAME, CLAUDE_GUIDELINES_FILENAME)
    return _AGENT_FIELD_RE.sub("", result, count=1)
