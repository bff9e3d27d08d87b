"""Structured launcher config file readers.

Purpose
-------
Convert on-disk launcher definitions into Python mappings. Readers are small
wrappers around ``tomllib``/``json``/``yaml.safe_load`` so error handling and
observability live in one place.

Contents
--------
* :class:`BaseFileReader` – shared helpers for reading files and validating
  mapping outputs.
* :class:`TOMLFileReader` / :class:`JSONFileReader` / :class:`YAMLFileReader`.
* :data:`READERS` – mapping of file suffixes to reader instances.
* :func:`read_mapping` – suffix-driven entry point.

System Role
-----------
Invoked by :class:`stork_launcher.adapters.config_loaders.factory.ConfigurationFactory`
before the mapping is validated into a
:class:`~stork_launcher.domain.configuration.Configuration`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

try:  # Python >= 3.11
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for <3.11
    import tomli as tomllib  # type: ignore[no-redef]

import yaml

from ...domain.errors import ConfigParseError
from ...observability import log_debug, log_error


class BaseFileReader:
    """Common utilities shared by the structured readers."""

    format_name = "text"

    def _read(self, path: Path) -> bytes:
        """Read *path* as bytes, raising :class:`ConfigParseError` when missing."""

        if not path.is_file():
            raise ConfigParseError(f"Launcher config file not found: {path}", source=path)
        payload = path.read_bytes()
        log_debug("config_file_read", path=str(path), size=len(payload))
        return payload

    @staticmethod
    def _ensure_mapping(data: object, *, path: Path) -> Mapping[str, object]:
        """Ensure *data* is a mapping, otherwise raise :class:`ConfigParseError`.

        Examples
        --------
        >>> BaseFileReader._ensure_mapping({"name": "demo"}, path=Path("demo.toml"))
        {'name': 'demo'}
        >>> BaseFileReader._ensure_mapping([1], path=Path("demo.toml"))
        Traceback (most recent call last):
        ...
        stork_launcher.domain.errors.ConfigParseError: File demo.toml did not produce a mapping
        """

        if not isinstance(data, Mapping):
            raise ConfigParseError(f"File {path} did not produce a mapping", source=path)
        return data

    def _invalid(self, path: Path, exc: Exception) -> ConfigParseError:
        log_error("config_file_invalid", path=str(path), format=self.format_name, error=str(exc))
        return ConfigParseError(f"Invalid {self.format_name.upper()} in {path}: {exc}", source=path)

    def _loaded(self, data: object, path: Path) -> Mapping[str, object]:
        result = self._ensure_mapping(data, path=path)
        log_debug("config_file_loaded", path=str(path), format=self.format_name)
        return result


class TOMLFileReader(BaseFileReader):
    format_name = "toml"

    def read(self, path: Path) -> Mapping[str, object]:
        try:
            data = tomllib.loads(self._read(path).decode("utf-8"))
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
            raise self._invalid(path, exc) from exc
        return self._loaded(data, path)


class JSONFileReader(BaseFileReader):
    format_name = "json"

    def read(self, path: Path) -> Mapping[str, object]:
        try:
            data = json.loads(self._read(path))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise self._invalid(path, exc) from exc
        return self._loaded(data, path)


class YAMLFileReader(BaseFileReader):
    """Read YAML documents; an empty document yields an empty mapping."""

    format_name = "yaml"

    def read(self, path: Path) -> Mapping[str, object]:
        try:
            data = yaml.safe_load(self._read(path))
        except yaml.YAMLError as exc:
            raise self._invalid(path, exc) from exc
        return self._loaded({} if data is None else data, path)


READERS: Mapping[str, BaseFileReader] = {
    ".toml": TOMLFileReader(),
    ".json": JSONFileReader(),
    ".yaml": YAMLFileReader(),
    ".yml": YAMLFileReader(),
}


def read_mapping(path: str | Path) -> Mapping[str, object]:
    """Read *path* with the reader registered for its suffix.

    Raises
    ------
    ConfigParseError
        For unsupported suffixes, missing files, and malformed documents.
    """

    file_path = Path(path)
    reader = READERS.get(file_path.suffix.lower())
    if reader is None:
        supported = ", ".join(sorted(READERS))
        raise ConfigParseError(f"Unsupported launcher config format [{file_path.suffix}] (expected {supported})", source=file_path)
    return reader.read(file_path)
