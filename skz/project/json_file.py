from pathlib import Path
from typing import Any

from skz.errors import InvalidConfigSchemaError, InvalidJsonFormatError
from skz.utils import read_json_safe, write_json


class JsonObjectFile:
    """A project JSON file whose top level must be an object."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> dict[str, Any]:
        payload, error = read_json_safe(self.path)
        if error is not None:
            raise InvalidJsonFormatError(self.path, error)
        if payload is None:
            return {}
        if not isinstance(payload, dict):
            raise InvalidConfigSchemaError(self.path, "must be a JSON object")
        return payload

    def save(self, payload: dict[str, Any]) -> None:
        write_json(self.path, payload)
