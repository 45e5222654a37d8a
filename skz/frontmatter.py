"""YAML frontmatter split/join shared by skill and agent documents."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml

from skz.errors import InvalidFrontmatterError

_FRONTMATTER_RE = re.compile(r"^---\s*\r?\n(.*?)\r?\n---\s*(?:\r?\n|$)", re.DOTALL)


def split_frontmatter(text: str, path: Path) -> tuple[dict[str, Any], str]:
    """Return the header mapping and the body that follows it.

    A header that is not valid YAML, or not a mapping, raises
    ``InvalidFrontmatterError`` so callers never rewrite it as empty.
    """
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return {}, text
    try:
        raw = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        raise InvalidFrontmatterError(path, str(exc).splitlines()[0]) from exc
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise InvalidFrontmatterError(path, "expected a mapping")
    return raw, text[match.end() :]


def join_frontmatter(frontmatter: dict[str, Any], body: str) -> str:
    if not frontmatter:
        return body
    dumped = yaml.dump(frontmatter, default_flow_style=False, sort_keys=False).rstrip()
    return "\n".join(["---", dumped, "---", body])
