"""JSON-backed configuration with flat and dotted-path access."""

from __future__ import annotations

import copy
import json
from typing import Any, Optional


class ConfigError(Exception):
    """Raised when configuration cannot be loaded or modified."""


def _split_path(path: str) -> list[str]:
    return [part for part in path.split(".") if part]


def _convert(value: Any, like: Any) -> Any:
    """Return ``value`` as the type of ``like``; raise TypeError if it does not fit."""
    if like is None:
        return value
    if isinstance(like, bool):
        if isinstance(value, bool):
            return value
        raise TypeError("expected a boolean")
    if isinstance(like, int):
        if isinstance(value, (bool, int)):
            return int(value)
        if isinstance(value, float):
            return int(value)
        raise TypeError("expected a number")
    if isinstance(like, float):
        if isinstance(value, (bool, int, float)):
            return float(value)
        raise TypeError("expected a number")
    if isinstance(like, str):
        if isinstance(value, str):
            return value
        raise TypeError("expected a string")
    if isinstance(value, type(like)):
        return value
    raise TypeError(f"expected {type(like).__name__}")


class Config:
    """Holds a JSON document; values are read with a typed default."""

    def __init__(self, data: Optional[dict] = None) -> None:
        self._data: Any = copy.deepcopy(data) if data is not None else {}

    def load_from_file(self, path: str) -> None:
        """Replace the configuration with the JSON document in ``path``."""
        try:
            with open(path, encoding="utf-8") as handle:
                data = json.load(handle)
        except OSError as exc:
            raise ConfigError(f"Cannot open config file: {path}") from exc
        except ValueError as exc:
            raise ConfigError(f"Invalid JSON in config file: {path}") from exc
        self._data = data

    def get(self, key: str, default: Any = None) -> Any:
        """Return the top-level value under ``key``, or ``default`` if absent or mistyped."""
        if not isinstance(self._data, dict) or key not in self._data:
            return default
        try:
            return _convert(self._data[key], default)
        except TypeError:
            return default

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under the top-level ``key``."""
        if not isinstance(self._data, dict):
            raise ConfigError("Configuration root is not an object")
        self._data[key] = value

    def get_nested(self, path: str, default: Any = None) -> Any:
        """Return the value at a dotted ``path``, or ``default`` if absent or mistyped."""
        parts = _split_path(path)
        if not parts:
            return default
        node = self._data
        for part in parts:
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        try:
            return _convert(node, default)
        except TypeError:
            return default

    def set_nested(self, path: str, value: Any) -> None:
        """Store ``value`` at a dotted ``path``, creating objects on the way."""
        parts = _split_path(path)
        if not parts:
            return
        if not isinstance(self._data, dict):
            raise ConfigError("Configuration root is not an object")
        node = self._data
        for part in parts[:-1]:
            if not isinstance(node.get(part), dict):
                node[part] = {}
            node = node[part]
        node[parts[-1]] = value

    def to_dict(self) -> Any:
        """Return a copy of the whole configuration document."""
        return copy.deepcopy(self._data)