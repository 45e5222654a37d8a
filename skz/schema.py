import json
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

_SCHEMA_DIR = Path(__file__).resolve().parent / "schemas"
_SCHEMA_CACHE: dict[str, dict[str, Any]] = {}

REGISTRY_SCHEMA = "registry.schema.json"
CONFIG_SCHEMA = "skz.schema.json"


def load_schema(name: str) -> dict[str, Any]:
    cached = _SCHEMA_CACHE.get(name)
    if cached is not None:
        return cached
    schema = json.loads((_SCHEMA_DIR / name).read_text(encoding="utf-8"))
    _SCHEMA_CACHE[name] = schema
    return schema


def first_schema_error(name: str, payload: Any) -> str | None:
    validator = Draft202012Validator(load_schema(name))
    errors = sorted(validator.iter_errors(payload), key=lambda err: list(err.path))
    if not errors:
        return None
    error = errors[0]
    location = "/".join(str(part) for part in error.path)
    return f"{location}: {error.message}" if location else error.message
